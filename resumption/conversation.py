"""Resume a conversation from a cookie."""

import logging
from typing import Optional

from .cookie import ResumptionCookie
from .models import Activity
from .trust import TrustedHostList
from . import trust as _trust

logger = logging.getLogger("resumption.conversation")


def resume_message(cookie: ResumptionCookie, trust_list: Optional[TrustedHostList] = None) -> Activity:
    """Turn a cookie back into a message for the bot.

    If the cookie's service URL was trusted when the cookie was built, its
    host is trusted again in trust_list (default: the process-wide list)
    so replies to it are accepted.
    """
    if trust_list is None:
        trust_list = _trust.default_trust_list

    if cookie.is_trusted_service_url:
        trust_list.trust_service_url(cookie.address.service_url)

    msg = cookie.to_message()
    logger.debug(
        f"Resuming conversation {cookie.address.conversation_id} on "
        f"{cookie.address.channel_id} as message {msg.id}"
    )
    return msg
