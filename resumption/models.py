"""Channel address and message models.

Minimal versions of the bot framework's Address / ChannelAccount /
ConversationAccount / Activity types. JSON helpers use the framework's
camelCase field names so activities can be read from and written to the
same shape a channel connector sends.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import DecodeError, InvalidArgument, require


def optional_str(data: dict, key: str) -> Optional[str]:
    """data[key] if it is a string or absent/null, DecodeError otherwise."""
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise DecodeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Address:
    """Where a conversation lives: bot, channel, user, conversation, service URL."""

    bot_id: str
    channel_id: str
    user_id: str
    conversation_id: str
    service_url: str

    def __post_init__(self):
        for name in ("bot_id", "channel_id", "user_id", "conversation_id", "service_url"):
            require(name, getattr(self, name))

    @classmethod
    def from_message(cls, msg: "Activity") -> "Address":
        """Extract the address of an inbound message.

        The bot is the message recipient and the user is its sender.
        """
        if msg.recipient is None:
            raise InvalidArgument("message has no recipient")
        if msg.sender is None:
            raise InvalidArgument("message has no sender")
        if msg.conversation is None:
            raise InvalidArgument("message has no conversation")
        return cls(
            bot_id=msg.recipient.id,
            channel_id=msg.channel_id,
            user_id=msg.sender.id,
            conversation_id=msg.conversation.id,
            service_url=msg.service_url,
        )

    def to_dict(self) -> dict:
        return {
            "botId": self.bot_id,
            "channelId": self.channel_id,
            "userId": self.user_id,
            "conversationId": self.conversation_id,
            "serviceUrl": self.service_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Address":
        if not isinstance(data, dict):
            raise DecodeError(f"address must be an object, got {type(data).__name__}")
        return cls(
            bot_id=optional_str(data, "botId"),
            channel_id=optional_str(data, "channelId"),
            user_id=optional_str(data, "userId"),
            conversation_id=optional_str(data, "conversationId"),
            service_url=optional_str(data, "serviceUrl"),
        )


@dataclass
class ChannelAccount:
    id: str
    name: Optional[str] = None


@dataclass
class ConversationAccount:
    id: str
    is_group: Optional[bool] = None
    name: Optional[str] = None


@dataclass
class Activity:
    """A message exchanged with a channel."""

    type: str = "message"
    id: Optional[str] = None
    channel_id: Optional[str] = None
    service_url: Optional[str] = None
    recipient: Optional[ChannelAccount] = None
    sender: Optional[ChannelAccount] = None     # "from" on the wire
    conversation: Optional[ConversationAccount] = None
    locale: Optional[str] = None
    text: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize to the connector's JSON shape, omitting unset fields."""
        data = {
            "type": self.type,
            "id": self.id,
            "channelId": self.channel_id,
            "serviceUrl": self.service_url,
            "recipient": _account_to_dict(self.recipient),
            "from": _account_to_dict(self.sender),
            "conversation": _conversation_to_dict(self.conversation),
            "locale": self.locale,
            "text": self.text,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        if not isinstance(data, dict):
            raise DecodeError(f"activity must be an object, got {type(data).__name__}")
        return cls(
            type=data.get("type", "message"),
            id=optional_str(data, "id"),
            channel_id=optional_str(data, "channelId"),
            service_url=optional_str(data, "serviceUrl"),
            recipient=_account_from_dict(data.get("recipient")),
            sender=_account_from_dict(data.get("from")),
            conversation=_conversation_from_dict(data.get("conversation")),
            locale=optional_str(data, "locale"),
            text=optional_str(data, "text"),
        )


def _account_to_dict(account: Optional[ChannelAccount]) -> Optional[dict]:
    if account is None:
        return None
    data = {"id": account.id}
    if account.name is not None:
        data["name"] = account.name
    return data


def _account_from_dict(data) -> Optional[ChannelAccount]:
    if not isinstance(data, dict):
        return None
    return ChannelAccount(id=optional_str(data, "id"), name=optional_str(data, "name"))


def _conversation_to_dict(conv: Optional[ConversationAccount]) -> Optional[dict]:
    if conv is None:
        return None
    data = {"id": conv.id}
    if conv.is_group is not None:
        data["isGroup"] = conv.is_group
    if conv.name is not None:
        data["name"] = conv.name
    return data


def _conversation_from_dict(data) -> Optional[ConversationAccount]:
    if not isinstance(data, dict):
        return None
    is_group = data.get("isGroup")
    if is_group is not None and not isinstance(is_group, bool):
        raise DecodeError(f"'isGroup' must be a boolean, got {type(is_group).__name__}")
    return ConversationAccount(
        id=optional_str(data, "id"),
        is_group=is_group,
        name=optional_str(data, "name"),
    )
