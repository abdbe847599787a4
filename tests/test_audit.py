"""
Tests for creation/modification timestamp stamping.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import event

from webty.core.db.audit import AuditFields, insert_audited, update_audited
from webty.core.db.tables.review import Review
from webty.core.db.tables.user import WebtyUser


T0 = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def new_user(nickname="auditor"):
    return WebtyUser(nickname=nickname)


class TestInsertAudited:
    """Tests for the insert-time stamp."""

    def test_sets_created_at_only(self, db_session):
        user = insert_audited(db_session, new_user(), now=T0)

        assert user.user_id is not None
        assert user.created_at == T0
        assert user.modified_at is None
        assert user.audit == AuditFields(created_at=T0, modified_at=None)

    def test_modified_at_left_out_of_insert(self, db_session):
        statements = []

        def capture(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        engine = db_session.get_bind()
        event.listen(engine, "before_cursor_execute", capture)
        try:
            insert_audited(db_session, new_user())
        finally:
            event.remove(engine, "before_cursor_execute", capture)

        inserts = [s for s in statements if s.startswith("INSERT INTO webty_user")]
        assert len(inserts) == 1
        assert "created_at" in inserts[0]
        assert "modified_at" not in inserts[0]

    def test_modified_at_null_after_commit(self, db_session):
        user = insert_audited(db_session, new_user())
        db_session.commit()
        db_session.expire_all()

        assert user.created_at is not None
        assert user.modified_at is None

    def test_insert_twice_rejected(self, db_session):
        user = insert_audited(db_session, new_user())

        with pytest.raises(ValueError):
            insert_audited(db_session, user)


class TestUpdateAudited:
    """Tests for the update-time stamp."""

    def test_sets_modified_at_and_keeps_created_at(self, db_session):
        user = insert_audited(db_session, new_user(), now=T0)

        later = T0 + timedelta(minutes=5)
        user.profile_image = "https://img.example.com/new.png"
        update_audited(db_session, user, now=later)

        assert user.created_at == T0
        assert user.modified_at == later
        assert user.created_at <= user.modified_at

    def test_each_update_refreshes_modified_at(self, db_session):
        user = insert_audited(db_session, new_user(), now=T0)
        update_audited(db_session, user, now=T0 + timedelta(seconds=1))
        update_audited(db_session, user, now=T0 + timedelta(seconds=2))

        assert user.modified_at == T0 + timedelta(seconds=2)
        assert user.created_at == T0

    def test_update_before_insert_rejected(self, db_session):
        with pytest.raises(ValueError):
            update_audited(db_session, new_user())

    def test_applies_to_every_audited_table(self, db_session):
        author = insert_audited(db_session, new_user())
        review = insert_audited(
            db_session,
            Review(user_id=author.user_id, title="t", content="c"),
            now=T0,
        )

        assert review.audit.created_at == T0
        assert review.audit.modified_at is None

        review.view_count = 3
        update_audited(db_session, review)
        assert review.audit.modified_at is not None

    def test_timestamps_are_read_only(self, db_session):
        user = insert_audited(db_session, new_user())

        with pytest.raises(AttributeError):
            user.created_at = T0
        with pytest.raises(AttributeError):
            user.modified_at = T0


class TestStoredTimestamps:
    """Tests for timestamps read back from the database."""

    def test_reloaded_values_are_utc_aware(self, db_session):
        user = insert_audited(db_session, new_user(), now=T0)
        update_audited(db_session, user, now=T0 + timedelta(minutes=1))
        db_session.commit()
        db_session.expire_all()

        assert user.created_at == T0
        assert user.created_at.utcoffset() == timedelta(0)
        assert user.modified_at == T0 + timedelta(minutes=1)
        assert user.created_at <= user.modified_at

    def test_other_offsets_stored_as_utc(self, db_session):
        seoul = timezone(timedelta(hours=9))
        local = datetime(2025, 3, 1, 21, 0, tzinfo=seoul)

        user = insert_audited(db_session, new_user(), now=local)
        db_session.commit()
        db_session.expire_all()

        assert user.created_at == local
        assert user.created_at.hour == 12
        assert user.created_at.tzinfo == timezone.utc
