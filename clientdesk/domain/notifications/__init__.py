"""Notifications domain - outbound email queue"""
