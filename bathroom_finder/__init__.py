"""Bathroom Finder user accounts and authentication."""

__version__ = "0.1.0"
