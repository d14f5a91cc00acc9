"""Persistence implementations for bondarys_auth, grouped by technology."""
