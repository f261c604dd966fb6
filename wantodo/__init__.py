"""Wantodo task backend: validation, calendar queries and task service."""
