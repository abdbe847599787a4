"""
Conversion between review comment rows and their request/response shapes.

The mapper holds no state beyond the user projection it is given, and does no
I/O or validation: callers resolve the user and review, and the storage layer
assigns the identifier, timestamps and depth.
"""
from typing import Callable

from webty.api.v0.comment.models import CommentRequest, CommentResponse
from webty.api.v0.user.models import UserDataResponse, to_user_data
from webty.core.db.tables.review import Review
from webty.core.db.tables.review_comment import ReviewComment
from webty.core.db.tables.user import WebtyUser


class ReviewCommentMapper:
    def __init__(self, user_mapper: Callable[[WebtyUser], UserDataResponse] = to_user_data):
        self.user_mapper = user_mapper

    def to_entity(self, request: CommentRequest, user: WebtyUser, review: Review) -> ReviewComment:
        """Build an unsaved comment authored by `user` on `review`."""
        return ReviewComment(
            user=user,
            review=review,
            content=request.content,
            parent_id=request.parent_comment_id,
            mentions=request.mentions,
        )

    def to_response(self, comment: ReviewComment | None) -> CommentResponse:
        """Project a saved comment; replies are attached by the caller."""
        if comment is None:
            raise ValueError("Comment cannot be null")

        return CommentResponse(
            user=self.user_mapper(comment.user),
            comment_id=comment.comment_id,
            content=comment.content,
            created_at=comment.created_at,
            modified_at=comment.modified_at,
            depth=comment.depth,
            parent_id=comment.parent_id,
            mentions=comment.mentions,
            child_comments=[],
        )


def get_comment_mapper() -> ReviewCommentMapper:
    return ReviewCommentMapper()
