"""Exceptions raised by scheduled maintenance jobs."""

from app.exceptions.base import AppException


class ResetJobError(AppException):
    """The bulk coupon usage reset failed."""

    def __init__(self, reason: str):
        """
        Initialize a ResetJobError.

        Parameters:
            reason (str): Description of the storage failure that aborted the reset.
        """
        self.reason = reason
        super().__init__(f"Coupon usage reset failed: {reason}")
