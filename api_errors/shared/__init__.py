"""Shared building blocks: logging and error handling."""
