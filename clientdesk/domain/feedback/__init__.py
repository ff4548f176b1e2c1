"""Feedback domain - app feedback log"""
