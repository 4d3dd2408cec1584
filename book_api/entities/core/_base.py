from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity with a database-assigned identifier and lifecycle timestamps."""

    model_config = ConfigDict(from_attributes=True)

    id: int = PydanticField(description="Unique identifier for the entity")

    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class EntityTable(SQLModel, table=False):
    """Base table with an autoincrement key and soft-delete marker.

    Rows are never physically removed; a non-null ``deleted_at`` hides them
    from every read path.
    """

    id: int | None = Field(
        default=None,
        primary_key=True,
        # SQLite only autoincrements an INTEGER primary key
        sa_type=sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
    deleted_at: datetime | None = Field(
        default=None,
        index=True,
        sa_type=sa.DateTime(timezone=True),
    )
