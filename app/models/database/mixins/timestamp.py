"""Timestamp mixin for created_at and updated_at fields."""

from datetime import datetime
from sqlmodel import Field, SQLModel

from app.utils.time import utcnow


class TimestampMixin(SQLModel):
    """Adds created_at and updated_at bookkeeping to persisted workspace rows."""

    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        description="When this workspace row was first written"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"onupdate": utcnow},
        description="When this workspace row was last written"
    )
