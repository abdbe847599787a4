import os
from pathlib import Path
from sqlalchemy import create_engine

database_url = os.getenv("WEBTY_DB_URL") or "sqlite:///.data/webty.db"

if database_url.startswith("sqlite:///.data/"):
    Path(".data").mkdir(exist_ok=True)

engine = create_engine(
    database_url,
    echo=False,
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,
    pool_recycle=3600,
)

# Create all tables on import
from webty.core.db.tables.base import Base
from webty.core.db.tables.user import WebtyUser
from webty.core.db.tables.review import Review
from webty.core.db.tables.review_comment import ReviewComment

Base.metadata.create_all(engine)
