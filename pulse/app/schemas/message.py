from pydantic import BaseModel

from pulse.app.schemas.profile import ProfileSnapshot
from pulse.app.schemas.reaction import ReactionSummary


class MessageCreate(BaseModel):
    content: str | None = None
    attachment_url: str | None = None
    attachment_name: str | None = None
    attachment_type: str | None = None
    attachment_size: int | None = None


class MessageResponse(BaseModel):
    id: int
    channel_id: int
    user_id: str
    content: str | None = None
    attachment_url: str | None = None
    attachment_name: str | None = None
    attachment_type: str | None = None
    attachment_size: int | None = None
    created_at: str
    updated_at: str
    reactions: list[ReactionSummary] = []
    user_data: ProfileSnapshot | None = None
