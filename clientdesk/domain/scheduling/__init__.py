"""Scheduling domain - calendar, dashboard and analytics views"""
