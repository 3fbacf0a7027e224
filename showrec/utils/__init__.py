"""Shared helpers: logging, errors, date/time parsing."""
