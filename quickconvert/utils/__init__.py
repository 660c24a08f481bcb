"""Utility modules for the quickconvert engine."""
