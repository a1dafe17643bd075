"""Coupon usage counter maintenance."""

from sqlalchemy import Engine, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col

from app.exceptions import ResetJobError
from app.models.coupon import Coupon


def reset_coupon_usage(session: Session) -> int:
    """
    Set the usage counter of every coupon back to zero.

    A single bulk UPDATE, not coordinated with concurrent increments: a click
    landing while the reset runs may survive until the next one. Coupons whose
    counter is already zero are left untouched and not counted, so a second
    call in a row reports 0.

    Parameters:
        session: Database session.

    Returns:
        int: Number of coupons whose counter was changed.

    Raises:
        ResetJobError: If the update fails; the transaction is rolled back.
    """
    statement = update(Coupon).where(col(Coupon.uses) != 0).values(uses=0)
    try:
        result = session.execute(statement)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise ResetJobError(str(e)) from e
    return result.rowcount


def run_coupon_usage_reset(engine: Engine) -> int:
    """
    Run the reset in its own session, for callers outside a request.

    Returns:
        int: Number of coupons whose counter was changed.

    Raises:
        ResetJobError: If the update fails.
    """
    with Session(engine) as session:
        return reset_coupon_usage(session)
