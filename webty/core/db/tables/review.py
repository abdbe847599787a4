from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from webty.core.db.audit import Audited
from webty.core.db.tables.base import Base
from webty.core.db.tables.user import WebtyUser


class Review(Audited, Base):
    """Review of a webtoon, the thing comments hang off"""

    __tablename__ = "review"

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("webty_user.user_id"), index=True)
    title: Mapped[str] = mapped_column(String(256))
    content: Mapped[str] = mapped_column(String(5000))
    view_count: Mapped[int] = mapped_column(Integer, default=0)

    user: Mapped[WebtyUser] = relationship(WebtyUser)
