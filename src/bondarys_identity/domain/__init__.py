"""Domain layer of the identity package."""
