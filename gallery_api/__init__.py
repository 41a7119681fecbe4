"""FastAPI service exposing users and uploaded images."""

__version__ = "1.0.0"
