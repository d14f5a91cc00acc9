"""Bondarys - account sign-in and session service."""

__version__ = "0.1.0"
