"""Utility helpers: message formatting and logging."""
