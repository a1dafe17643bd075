from datetime import datetime
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field

from app.utils.dates import utc_now


class UserBase(SQLModel):
    name: str
    email: str = Field(unique=True, index=True)
    is_active: bool = Field(default=True, index=True)
    id_role: int | None = Field(default=None, foreign_key="role.id_role")


class User(UserBase, table=True):
    id_user: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
