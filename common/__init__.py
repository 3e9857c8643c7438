"""Shared models, exceptions and user-facing error messages."""
