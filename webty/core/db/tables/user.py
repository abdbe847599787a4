from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from webty.core.db.audit import Audited
from webty.core.db.tables.base import Base


class WebtyUser(Audited, Base):
    """
    Platform user.

    - sk_id: first 16 chars of the user's secret key, used for lookup
    - sk_hash: bcrypt hash of the full secret key
    """

    __tablename__ = "webty_user"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nickname: Mapped[str] = mapped_column(String(256), unique=True, index=True)
    profile_image: Mapped[str | None] = mapped_column(String(512), nullable=True, default=None)

    sk_id: Mapped[str | None] = mapped_column(String(16), unique=True, nullable=True, default=None)
    sk_hash: Mapped[str | None] = mapped_column(String(256), nullable=True, default=None)
