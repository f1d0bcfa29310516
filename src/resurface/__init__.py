"""Spaced resurfacing for reading highlights."""

__version__ = "0.1.0"
