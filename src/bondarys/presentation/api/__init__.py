"""FastAPI application exposing the identity flows."""
