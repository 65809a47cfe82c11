from pulse.app.schemas.channel import ChannelCreate, ChannelResponse
from pulse.app.schemas.message import MessageCreate, MessageResponse
from pulse.app.schemas.profile import ProfileSnapshot
from pulse.app.schemas.reaction import ReactionSummary, ReactionToggle

__all__ = [
    "ChannelCreate",
    "ChannelResponse",
    "MessageCreate",
    "MessageResponse",
    "ProfileSnapshot",
    "ReactionSummary",
    "ReactionToggle",
]
