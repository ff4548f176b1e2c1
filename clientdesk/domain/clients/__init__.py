"""Clients domain - client records and their notes"""
