from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class EntityTable(SQLModel, table=False):
    """Base table with an autoincrement integer id and timestamps."""

    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"onupdate": sa.func.now()},
    )

    def apply(self, changes: dict) -> None:
        """Copy ``changes`` onto the row and bump ``updated_at``."""
        for key, value in changes.items():
            setattr(self, key, value)
        self.updated_at = utcnow()


class Payload(BaseModel):
    """Base for request bodies; unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def changes(self) -> dict:
        """Fields the client actually sent; absent means unchanged."""
        return self.model_dump(exclude_unset=True)
