"""Worklog: users, roles and daily work records behind a JSON API."""

__version__ = "1.0.0"
