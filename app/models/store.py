from datetime import datetime
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field

from app.utils.dates import utc_now


class StoreBase(SQLModel):
    name: str
    slug: str = Field(unique=True, index=True)
    is_active: bool = Field(default=True, index=True)
    # Incremented by the storefront on every coupon click
    total_coupon_used_times: int = Field(default=0, index=True)


class Store(StoreBase, table=True):
    id_store: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
