from datetime import datetime
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field

from app.utils.dates import utc_now


class RoleBase(SQLModel):
    name: str = Field(unique=True)
    display_name: str


class Role(RoleBase, table=True):
    id_role: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
