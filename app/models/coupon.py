from datetime import datetime
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field

from app.models.enums import CouponStatus, CouponType
from app.utils.dates import utc_now


class CouponBase(SQLModel):
    title: str
    coupon_code: str = Field(unique=True)
    coupon_type: CouponType = Field(index=True)
    status: CouponStatus = Field(index=True)
    id_store: int = Field(foreign_key="store.id_store")


class Coupon(CouponBase, table=True):
    id_coupon: int | None = Field(default=None, primary_key=True)
    # Zeroed every night by the usage reset job
    uses: int = Field(default=0)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
