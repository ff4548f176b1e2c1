"""Settings domain - per-user profile and preferences"""
