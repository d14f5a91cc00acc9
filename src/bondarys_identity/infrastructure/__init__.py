"""Infrastructure adapters for the identity package."""
