from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from webty.core.db.tables.user import WebtyUser


class UserDataResponse(BaseModel):
    """Public author summary embedded in other responses"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: int
    nickname: str
    profile_image: str | None = None


def to_user_data(user: WebtyUser) -> UserDataResponse:
    """Convert a user row to its public summary"""
    return UserDataResponse(
        user_id=user.user_id,
        nickname=user.nickname,
        profile_image=user.profile_image,
    )
