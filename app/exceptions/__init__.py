"""
Application exceptions module.

This module provides a clean separation of concerns for error handling:
- Base exceptions define the hierarchy
- Storage exceptions cover repository reads and report timeouts
- Job exceptions cover the scheduled coupon usage reset
- HTTP mapping is handled separately in app/core/error_handlers.py
"""

from app.exceptions.base import AppException
from app.exceptions.crud import ValidationError
from app.exceptions.storage import (
    StorageUnavailableError,
    ReportTimeoutError,
    InvalidFilterError,
)
from app.exceptions.jobs import ResetJobError

__all__ = [
    # Base
    "AppException",
    # Parameters
    "ValidationError",
    # Storage
    "StorageUnavailableError",
    "ReportTimeoutError",
    "InvalidFilterError",
    # Jobs
    "ResetJobError",
]
