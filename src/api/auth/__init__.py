"""Caller identity from upstream authentication headers."""
