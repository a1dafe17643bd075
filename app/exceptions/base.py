"""Base exception for the application exception hierarchy."""


class AppException(Exception):
    """Root of every domain-level error raised by the application."""

    pass
