from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from webty.api.v0.user.models import UserDataResponse


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CommentRequest(CamelModel):
    """Body for creating or editing a comment"""

    content: str = Field(..., min_length=1, max_length=4096)
    parent_comment_id: int | None = Field(None, description="ID of parent comment for replies")
    mentions: list[str] = Field(default_factory=list, description="Mentioned nicknames")


class CommentResponse(CamelModel):
    user: UserDataResponse
    comment_id: int
    content: str
    created_at: datetime
    modified_at: datetime | None = None
    depth: int
    parent_id: int | None = None
    mentions: list[str] = []
    child_comments: list["CommentResponse"] = []


CommentResponse.model_rebuild()


class CommentPage(CamelModel):
    """One page of a review's comments, replies nested under their roots"""

    content: list[CommentResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int
