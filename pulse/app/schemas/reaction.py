from pydantic import BaseModel, ConfigDict, Field


class ReactionToggle(BaseModel):
    emoji: str


class ReactionSummary(BaseModel):
    """Per-emoji aggregate for one message, as seen by the requesting caller."""

    model_config = ConfigDict(populate_by_name=True)

    emoji: str
    count: int
    reacted_by_me: bool = Field(default=False, alias="reactedByMe")
