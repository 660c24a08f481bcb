"""
File conversion engine for the quickconvert service.

This package resolves an uploaded file and a requested output format to one of
a fixed set of local conversion pipelines, runs it, and shapes the outcome
into a success payload or a structured failure.
"""

__version__ = "1.0.0"
