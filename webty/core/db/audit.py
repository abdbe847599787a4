"""
Creation/modification timestamps for persisted rows.

Every audited table mixes in `Audited`, which maps the `created_at` and
`modified_at` columns onto private attributes and only exposes read
accessors. The two storage writes below are the only places that stamp them:

- `insert_audited` stamps `created_at` and leaves `modified_at` unset, so the
  column is not part of the INSERT and stays NULL.
- `update_audited` stamps `modified_at` on every later write.
"""
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, Session, mapped_column
from sqlalchemy.types import TypeDecorator

from webty.core.logger import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetimes on every backend.

    SQLite drops the offset on storage, so values are written as UTC and
    naive values read back are tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class AuditFields:
    created_at: datetime | None = None
    modified_at: datetime | None = None


class Audited:
    """Adds read-only audit timestamps to a table"""

    _created_at: Mapped[datetime] = mapped_column(
        "created_at",
        UTCDateTime(),
        nullable=False,
    )
    _modified_at: Mapped[datetime | None] = mapped_column(
        "modified_at",
        UTCDateTime(),
        nullable=True,
    )

    @property
    def created_at(self) -> datetime | None:
        return self._created_at

    @property
    def modified_at(self) -> datetime | None:
        return self._modified_at

    @property
    def audit(self) -> AuditFields:
        return AuditFields(created_at=self._created_at, modified_at=self._modified_at)


def insert_audited(session: Session, entity: Audited, now: datetime | None = None) -> Audited:
    """
    Persist a new row, stamping its creation time.

    Flushes so that database-assigned identifiers are available on return.
    The caller owns the transaction and commits.
    """
    if entity._created_at is not None:
        raise ValueError(f"{type(entity).__name__} has already been inserted")

    entity._created_at = now or utcnow()
    session.add(entity)
    session.flush()

    logger.debug(f"Inserted {type(entity).__name__} at {entity._created_at.isoformat()}")
    return entity


def update_audited(session: Session, entity: Audited, now: datetime | None = None) -> Audited:
    """Flush pending changes on an existing row, stamping its modification time."""
    if entity._created_at is None:
        raise ValueError(f"{type(entity).__name__} must be inserted before it is updated")

    entity._modified_at = now or utcnow()
    session.flush()

    logger.debug(f"Updated {type(entity).__name__} at {entity._modified_at.isoformat()}")
    return entity
