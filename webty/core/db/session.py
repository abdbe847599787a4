from sqlalchemy import select
from fastapi import Depends, HTTPException, status, Request
from typing import Generator
from sqlalchemy.orm import sessionmaker, Session
from webty.core.db.engine import engine
from webty.core.db.tables.user import WebtyUser
from webty.core.security import sk_lookup_id, verify_key

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    request: Request,
    session: Session = Depends(get_db),
) -> WebtyUser:
    """Resolve the acting user from the secret key cookie"""
    secret_key = request.cookies.get("secret_key")

    if not secret_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )

    user = session.execute(
        select(WebtyUser).where(WebtyUser.sk_id == sk_lookup_id(secret_key))
    ).scalar()

    if not user or not user.sk_hash or not verify_key(secret_key, user.sk_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid secret key"
        )

    return user
