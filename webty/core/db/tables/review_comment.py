from sqlalchemy import String, Integer, ForeignKey, Index, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from webty.core.db.audit import Audited
from webty.core.db.tables.base import Base
from webty.core.db.tables.review import Review
from webty.core.db.tables.user import WebtyUser


class ReviewComment(Audited, Base):
    """Comment on a review; parent_id threads replies under another comment"""

    __tablename__ = "review_comment"
    __table_args__ = (
        Index("idx_review_comment", "review_id", "depth", "comment_id"),
        Index("idx_parent_comment", "parent_id", "comment_id"),
    )

    comment_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("webty_user.user_id"))
    review_id: Mapped[int] = mapped_column(Integer, ForeignKey("review.review_id"))
    content: Mapped[str] = mapped_column(String(4096))
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("review_comment.comment_id"), nullable=True, default=None
    )
    # 0 for a top-level comment, parent depth + 1 for a reply
    depth: Mapped[int] = mapped_column(Integer, default=0)
    mentions: Mapped[list[str]] = mapped_column(JSON, default=list)

    user: Mapped[WebtyUser] = relationship(WebtyUser)
    review: Mapped[Review] = relationship(Review)

    def apply_edit(self, content: str, mentions: list[str]) -> bool:
        """Replace content and mentions; returns False when nothing changed."""
        if self.content == content and list(self.mentions or []) == list(mentions):
            return False
        self.content = content
        self.mentions = list(mentions)
        return True
