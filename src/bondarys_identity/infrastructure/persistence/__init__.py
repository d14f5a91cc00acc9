"""Persistence implementations for the identity package."""
