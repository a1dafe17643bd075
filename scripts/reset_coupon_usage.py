"""
One-shot coupon usage reset, for deployments driving the job from an external cron
instead of the in-process scheduler (set COUPON_RESET_ENABLED=false on the API).
"""

import sys
import os

# Add project root to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from loguru import logger

from app.core.config import get_settings
from app.database.database import engine
from app.exceptions import ResetJobError
from app.services.coupon_usage import run_coupon_usage_reset
from app.utils.logger import setup_logging


def run_reset():
    """
    Reset every coupon's usage counter once and exit non-zero on failure.
    """
    setup_logging(get_settings().LOG_LEVEL)
    logger.info("Starting coupon usage reset...")

    try:
        affected = run_coupon_usage_reset(engine)
    except ResetJobError as e:
        logger.error(f"Coupon usage reset failed: {e}")
        sys.exit(1)

    logger.info(f"Coupon usage reset completed: {affected} coupons changed.")


if __name__ == "__main__":
    run_reset()
