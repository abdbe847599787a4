"""
Test configuration and fixtures for Webty tests.
"""
import os

os.environ.setdefault("WEBTY_BCRYPT_ROUNDS", "4")

import pytest
from fastapi import Depends, HTTPException, Request, status
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from webty.core.db.audit import insert_audited
from webty.core.db.session import get_current_user, get_db
from webty.core.db.tables.base import Base
from webty.core.db.tables.review import Review
from webty.core.db.tables.review_comment import ReviewComment  # noqa: F401
from webty.core.db.tables.user import WebtyUser
from webty.core.security import hash_key, new_sk, sk_lookup_id, verify_key


@pytest.fixture(scope="function")
def db_session():
    """Create an isolated test database session for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def client_factory():
    """Factory to create test clients with a specific db session."""

    def create_client(session, user_sk=None):
        from webty.app import app

        def override_get_db():
            yield session

        def override_get_current_user(
            request: Request, session: Session = Depends(get_db)
        ):
            # Tests may authenticate with a header instead of the cookie
            secret_key = request.cookies.get("secret_key") or request.headers.get("X-Secret-Key")

            if not secret_key:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
                )

            user = session.execute(
                select(WebtyUser).where(WebtyUser.sk_id == sk_lookup_id(secret_key))
            ).scalar()

            if not user or not verify_key(secret_key, user.sk_hash):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid secret key",
                )

            return user

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_current_user] = override_get_current_user

        client = TestClient(app)
        if user_sk:
            client.cookies.set("secret_key", user_sk)
        return client

    yield create_client

    from webty.app import app

    app.dependency_overrides.clear()


def make_user(session, nickname: str) -> dict:
    sk = new_sk()
    user = WebtyUser(
        nickname=nickname,
        profile_image=f"https://img.example.com/{nickname}.png",
        sk_id=sk_lookup_id(sk),
        sk_hash=hash_key(sk),
    )
    insert_audited(session, user)
    session.commit()
    return {"user_id": user.user_id, "nickname": nickname, "sk": sk}


@pytest.fixture
def test_user_data(db_session):
    """Create a test user and return their credentials."""
    return make_user(db_session, "testuser")


@pytest.fixture
def other_user_data(db_session):
    """A second user who does not own the test comments."""
    return make_user(db_session, "otheruser")


@pytest.fixture
def test_review_data(db_session, test_user_data):
    """Create a review to comment on."""
    review = Review(
        user_id=test_user_data["user_id"],
        title="Weekly pick",
        content="The second arc is the best part.",
    )
    insert_audited(db_session, review)
    db_session.commit()
    return {"review_id": review.review_id}
