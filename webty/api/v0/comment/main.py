import math
import os

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from fastapi import APIRouter, Depends, HTTPException, status

from webty.core.db.audit import insert_audited, update_audited
from webty.core.db.tables.review import Review
from webty.core.db.tables.review_comment import ReviewComment
from webty.core.db.tables.user import WebtyUser
from webty.core.db.session import get_db, get_current_user
from webty.core.logger import get_logger
from webty.api.v0.comment.mapper import ReviewCommentMapper, get_comment_mapper
from webty.api.v0.comment.models import (
    CommentPage,
    CommentRequest,
    CommentResponse,
)

router = APIRouter(prefix="/reviews/{review_id}/comments")
logger = get_logger(__name__)

MAX_COMMENT_DEPTH = int(os.getenv("WEBTY_COMMENT_MAX_DEPTH", "2"))
MAX_PAGE_SIZE = 100
MAX_PAGE = 100_000


def get_review_or_404(session: Session, review_id: int) -> Review:
    review = session.execute(select(Review).where(Review.review_id == review_id)).scalar()
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review


def get_comment_or_404(session: Session, review_id: int, comment_id: int) -> ReviewComment:
    comment = session.execute(
        select(ReviewComment).where(
            ReviewComment.comment_id == comment_id,
            ReviewComment.review_id == review_id,
        )
    ).scalar()
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found",
        )
    return comment


def ensure_author(comment: ReviewComment, user: WebtyUser) -> None:
    if comment.user_id != user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to modify this comment",
        )


def resolve_depth(session: Session, review_id: int, parent_id: int | None) -> int:
    """Depth for a new comment: 0 at the root, one below its parent otherwise"""
    if parent_id is None:
        return 0

    parent = session.execute(
        select(ReviewComment).where(ReviewComment.comment_id == parent_id)
    ).scalar()
    if not parent:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Parent comment not found",
        )
    if parent.review_id != review_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Parent comment must belong to the same review",
        )
    if parent.depth >= MAX_COMMENT_DEPTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Replies are not allowed at this depth",
        )
    return parent.depth + 1


def collect_reply_levels(session: Session, comment_id: int) -> list[list[int]]:
    """IDs of every reply below a comment, one list per level, shallowest first"""
    levels = []
    frontier = [comment_id]
    while frontier:
        frontier = list(
            session.execute(
                select(ReviewComment.comment_id).where(ReviewComment.parent_id.in_(frontier))
            ).scalars().all()
        )
        if frontier:
            levels.append(frontier)
    return levels


def build_comment_tree(
    comments: list[ReviewComment], mapper: ReviewCommentMapper
) -> list[CommentResponse]:
    """Nest replies under their parents; replies whose parent is absent are dropped"""
    nodes = {}
    roots = []

    for comment in comments:
        nodes[comment.comment_id] = mapper.to_response(comment)

    for comment in comments:
        node = nodes[comment.comment_id]
        if comment.parent_id is None:
            roots.append(node)
        elif comment.parent_id in nodes:
            nodes[comment.parent_id].child_comments.append(node)

    return roots


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    review_id: int,
    comment_data: CommentRequest,
    current_user: WebtyUser = Depends(get_current_user),
    session: Session = Depends(get_db),
    mapper: ReviewCommentMapper = Depends(get_comment_mapper),
):
    """Comment on a review, or reply to one of its comments"""
    review = get_review_or_404(session, review_id)
    depth = resolve_depth(session, review_id, comment_data.parent_comment_id)

    comment = mapper.to_entity(comment_data, current_user, review)
    comment.depth = depth

    insert_audited(session, comment)
    session.commit()
    session.refresh(comment)

    logger.info(f"Comment {comment.comment_id} created on review {review_id} by {current_user.nickname}")

    return mapper.to_response(comment)


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
    review_id: int,
    comment_id: int,
    comment_data: CommentRequest,
    current_user: WebtyUser = Depends(get_current_user),
    session: Session = Depends(get_db),
    mapper: ReviewCommentMapper = Depends(get_comment_mapper),
):
    """Edit content and mentions of an own comment"""
    comment = get_comment_or_404(session, review_id, comment_id)
    ensure_author(comment, current_user)

    if comment.apply_edit(comment_data.content, comment_data.mentions):
        update_audited(session, comment)
        session.commit()
        session.refresh(comment)
        logger.info(f"Comment {comment_id} edited by {current_user.nickname}")

    return mapper.to_response(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    review_id: int,
    comment_id: int,
    current_user: WebtyUser = Depends(get_current_user),
    session: Session = Depends(get_db),
):
    """Delete an own comment together with all replies below it"""
    comment = get_comment_or_404(session, review_id, comment_id)
    ensure_author(comment, current_user)

    levels = collect_reply_levels(session, comment_id)
    for ids in reversed(levels):
        session.execute(
            delete(ReviewComment)
            .where(ReviewComment.comment_id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
    session.delete(comment)
    session.commit()

    logger.info(
        f"Comment {comment_id} deleted by {current_user.nickname} "
        f"with {sum(len(ids) for ids in levels)} replies"
    )


@router.get("", response_model=CommentPage)
def get_comments(
    review_id: int,
    page: int = 0,
    size: int = 10,
    session: Session = Depends(get_db),
    mapper: ReviewCommentMapper = Depends(get_comment_mapper),
):
    """
    Get one page of a review's comments.

    The page is cut from the comments ordered by depth, then newest first,
    and root comments are returned with the replies found on the same page.
    """
    get_review_or_404(session, review_id)

    page = min(max(0, page), MAX_PAGE)
    size = min(max(1, size), MAX_PAGE_SIZE)

    total = session.execute(
        select(func.count()).select_from(ReviewComment).where(ReviewComment.review_id == review_id)
    ).scalar_one()

    comments = session.execute(
        select(ReviewComment)
        .where(ReviewComment.review_id == review_id)
        .order_by(ReviewComment.depth.asc(), ReviewComment.comment_id.desc())
        .offset(page * size)
        .limit(size)
    ).scalars().all()

    return CommentPage(
        content=build_comment_tree(comments, mapper),
        page=page,
        size=size,
        total_elements=total,
        total_pages=math.ceil(total / size),
    )
