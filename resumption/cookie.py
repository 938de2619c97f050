"""The resumption cookie — enough of a conversation to resume it later."""

import uuid
from typing import Callable, Optional

from .errors import DecodeError, InvalidArgument, require
from .models import Activity, Address, ChannelAccount, ConversationAccount, optional_str
from . import trust as _trust

TrustPredicate = Callable[[str], bool]


def _resolve(trust: Optional[TrustPredicate]) -> TrustPredicate:
    return trust if trust is not None else _trust.is_trusted_service_url


class ResumptionCookie:
    """Address plus the bits of a message needed to rebuild it.

    ``is_trusted_service_url`` is computed once, when the cookie is built,
    and cannot be changed afterwards. ``user_name``, ``is_group`` and
    ``locale`` are plain attributes.

    Equality covers all five fields; the hash covers the address only.
    """

    __slots__ = ("address", "user_name", "_is_trusted_service_url", "is_group", "locale")

    def __init__(self, address: Address, trust: Optional[TrustPredicate] = None):
        require("address", address)
        self.address = address
        self.user_name: Optional[str] = None
        self._is_trusted_service_url = bool(_resolve(trust)(address.service_url))
        self.is_group = False
        self.locale: Optional[str] = None

    @property
    def is_trusted_service_url(self) -> bool:
        """True if the service URL was trusted when this cookie was built."""
        return self._is_trusted_service_url

    # ── Factories ────────────────────────────────────────

    @classmethod
    def from_address(cls, address: Address, trust: Optional[TrustPredicate] = None) -> "ResumptionCookie":
        return cls(address, trust=trust)

    @classmethod
    def from_identity(
        cls,
        user_id: str,
        bot_id: str,
        conversation_id: str,
        channel_id: str,
        service_url: str,
        locale: str = "en",
        trust: Optional[TrustPredicate] = None,
    ) -> "ResumptionCookie":
        """Build a cookie from raw identity strings.

        Args:
            user_id: The user id
            bot_id: The bot id
            conversation_id: The conversation id
            channel_id: The channel id of the conversation
            service_url: The service url of the conversation
            locale: The locale of the message; must not be None
            trust: Trust predicate, defaults to the process-wide trust list

        Raises:
            InvalidArgument: locale or one of the identity strings is None
        """
        require("locale", locale)
        address = Address(
            bot_id=bot_id,
            channel_id=channel_id,
            user_id=user_id,
            conversation_id=conversation_id,
            service_url=service_url,
        )
        cookie = cls(address, trust=trust)
        cookie.locale = locale
        return cookie

    @classmethod
    def from_message(cls, msg: Activity, trust: Optional[TrustPredicate] = None) -> "ResumptionCookie":
        """Build a cookie from an inbound message.

        The locale is copied as-is and may be None.
        """
        # Address.from_message rejects a missing sender or conversation
        cookie = cls(Address.from_message(msg), trust=trust)
        cookie.user_name = msg.sender.name
        cookie.is_group = bool(msg.conversation.is_group)
        cookie.locale = msg.locale
        return cookie

    @classmethod
    def _restore(
        cls,
        address: Address,
        user_name: Optional[str],
        is_trusted_service_url: bool,
        is_group: bool,
        locale: Optional[str],
    ) -> "ResumptionCookie":
        """Rebuild a cookie with a stored trust flag. Used by the codec only."""
        cookie = cls.__new__(cls)
        cookie.address = require("address", address)
        cookie.user_name = user_name
        cookie._is_trusted_service_url = is_trusted_service_url
        cookie.is_group = is_group
        cookie.locale = locale
        return cookie

    # ── Value semantics ──────────────────────────────────

    def _key(self) -> tuple:
        return (self.address, self.user_name, self._is_trusted_service_url, self.is_group, self.locale)

    def __eq__(self, other):
        if not isinstance(other, ResumptionCookie):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self.address)

    def __repr__(self):
        return (
            f"ResumptionCookie(address={self.address!r}, user_name={self.user_name!r}, "
            f"is_trusted_service_url={self._is_trusted_service_url}, "
            f"is_group={self.is_group}, locale={self.locale!r})"
        )

    # ── Conversions ──────────────────────────────────────

    def to_message(self) -> Activity:
        """Create a message that can be sent to the bot to resume the conversation."""
        return Activity(
            id=str(uuid.uuid4()),
            recipient=ChannelAccount(id=self.address.bot_id),
            channel_id=self.address.channel_id,
            service_url=self.address.service_url,
            conversation=ConversationAccount(
                id=self.address.conversation_id,
                is_group=self.is_group,
            ),
            sender=ChannelAccount(id=self.address.user_id, name=self.user_name),
            locale=self.locale,
        )

    def serialize(self, compress_level: int = 9) -> str:
        """Compressed base64 token, see resumption.codec."""
        from .codec import serialize
        return serialize(self, compress_level=compress_level)

    @classmethod
    def deserialize(cls, token: str) -> "ResumptionCookie":
        from .codec import deserialize
        return deserialize(token)

    def to_dict(self) -> dict:
        return {
            "address": self.address.to_dict(),
            "userName": self.user_name,
            "isTrustedServiceUrl": self._is_trusted_service_url,
            "isGroup": self.is_group,
            "locale": self.locale,
        }

    @classmethod
    def from_dict(cls, data: dict, trust: Optional[TrustPredicate] = None) -> "ResumptionCookie":
        """Rebuild from to_dict() output.

        The stored trust flag is ignored and recomputed against the current
        trust list, same as any other address-based construction.
        """
        if not isinstance(data, dict):
            raise DecodeError(f"cookie must be an object, got {type(data).__name__}")
        if "address" not in data:
            raise DecodeError("cookie has no address")
        try:
            cookie = cls(Address.from_dict(data["address"]), trust=trust)
        except InvalidArgument as e:
            raise DecodeError(f"invalid cookie address: {e}") from e
        is_group = data.get("isGroup", False)
        if not isinstance(is_group, bool):
            raise DecodeError(f"'isGroup' must be a boolean, got {type(is_group).__name__}")
        cookie.user_name = optional_str(data, "userName")
        cookie.is_group = is_group
        cookie.locale = optional_str(data, "locale")
        return cookie
