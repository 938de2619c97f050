"""Pytest configuration and shared fixtures."""

import pytest

from resumption import trust as trust_module
from resumption.models import Activity, Address, ChannelAccount, ConversationAccount
from resumption.trust import TrustedHostList


@pytest.fixture(autouse=True)
def fresh_default_trust_list(monkeypatch):
    """Give every test its own process-wide trust list."""
    trust_list = TrustedHostList(hosts=["trusted.example.com"])
    monkeypatch.setattr(trust_module, "default_trust_list", trust_list)
    return trust_list


@pytest.fixture
def trust_list():
    """A standalone trust list trusting trusted.example.com."""
    return TrustedHostList(hosts=["trusted.example.com"])


@pytest.fixture
def address():
    return Address(
        bot_id="b1",
        channel_id="test",
        user_id="u1",
        conversation_id="c1",
        service_url="https://trusted.example.com",
    )


@pytest.fixture
def activity():
    """An inbound group message from Alice to the bot."""
    return Activity(
        id="m1",
        channel_id="test",
        service_url="https://trusted.example.com",
        recipient=ChannelAccount(id="b1", name="Bot"),
        sender=ChannelAccount(id="u1", name="Alice"),
        conversation=ConversationAccount(id="c1", is_group=True),
        locale="en-US",
        text="hello",
    )
