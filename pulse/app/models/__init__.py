from pulse.app.models.channel import Channel
from pulse.app.models.message import Message
from pulse.app.models.reaction import Reaction
from pulse.app.models.profile import UserProfile

__all__ = [
    "Channel",
    "Message",
    "Reaction",
    "UserProfile",
]
