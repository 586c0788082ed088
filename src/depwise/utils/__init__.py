"""Utility modules for depwise."""
