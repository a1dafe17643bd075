from datetime import datetime
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field

from app.utils.dates import utc_now


class CategoryBase(SQLModel):
    name: str = Field(unique=True)
    slug: str = Field(unique=True)


class Category(CategoryBase, table=True):
    id_categ: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
