"""Keyhost Homes property rental booking API."""

__version__ = "1.0.0"
