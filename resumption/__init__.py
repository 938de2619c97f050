"""Resumption — conversation resumption cookies for chat bots.

- Cookie: ResumptionCookie value object and its factories
- Codec: compact base64 tokens (versioned binary record, gzip)
- Trust: trusted service URL hosts
- Conversation: rebuild the message that resumes a conversation
"""

__version__ = "0.1.0"

from .errors import ResumptionError, InvalidArgument, DecodeError
from .models import Address, Activity, ChannelAccount, ConversationAccount
from .cookie import ResumptionCookie
from .codec import serialize, deserialize
from .trust import TrustedHostList, is_trusted_service_url, trust_service_url
from .conversation import resume_message

__all__ = [
    # Errors
    "ResumptionError",
    "InvalidArgument",
    "DecodeError",
    # Models
    "Address",
    "Activity",
    "ChannelAccount",
    "ConversationAccount",
    # Cookie
    "ResumptionCookie",
    "serialize",
    "deserialize",
    # Trust
    "TrustedHostList",
    "is_trusted_service_url",
    "trust_service_url",
    # Conversation
    "resume_message",
]
