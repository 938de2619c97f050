"""Trusted service URL hosts.

A cookie records whether its service URL was trusted when it was built.
When a conversation is resumed from a trusted cookie, the host goes back
into the trust list so outbound calls to it are allowed again.

Entries expire: a resumed host stays trusted for ``ttl`` (one day by
default), and an entry still counts for ``grace`` after its expiry to
absorb clock skew. The framework's own hosts never expire.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import httpx

from .errors import InvalidArgument

logger = logging.getLogger("resumption.trust")

# Sentinel expiry for permanent entries
NEVER = datetime.max.replace(tzinfo=timezone.utc)

BUILTIN_TRUSTED_HOSTS = (
    "state.botframework.com",
    "api.botframework.com",
    "token.botframework.com",
    "state.botframework.azure.us",
    "api.botframework.azure.us",
    "token.botframework.azure.us",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _host_of(url: Optional[str]) -> Optional[str]:
    """Lower-cased host of url, or None if it has none or doesn't parse."""
    if not url:
        return None
    try:
        host = httpx.URL(url).host
    except (httpx.InvalidURL, TypeError):
        return None
    return host.lower() or None


class TrustedHostList:
    """Host name → expiry map answering "is this service URL trusted?"."""

    def __init__(
        self,
        hosts: Optional[Iterable[str]] = None,
        ttl: timedelta = timedelta(days=1),
        grace: timedelta = timedelta(minutes=5),
    ):
        """Initialize trust list.

        Args:
            hosts: Permanently trusted hosts, in addition to the builtin ones
            ttl: Default lifetime of hosts added via trust_service_url
            grace: How long an expired entry is still accepted
        """
        self.ttl = ttl
        self.grace = grace
        self._hosts: dict[str, datetime] = {h: NEVER for h in BUILTIN_TRUSTED_HOSTS}
        for host in hosts or ():
            self.add_permanent_host(host)

    def add_permanent_host(self, host: str) -> None:
        self._hosts[host.lower()] = NEVER

    def trust_service_url(self, url: str, expiration: Optional[datetime] = None) -> None:
        """Trust the host of url until expiration (default: now + ttl).

        Never shortens an existing entry.
        """
        host = _host_of(url)
        if host is None:
            raise InvalidArgument(f"cannot trust service url without a host: {url!r}")
        if expiration is None:
            expiration = _utcnow() + self.ttl
        current = self._hosts.get(host)
        if current is not None and current >= expiration:
            return
        self._hosts[host] = expiration
        logger.info(f"Trusted service host {host} until {expiration.isoformat()}")

    def is_trusted_service_url(self, url: Optional[str]) -> bool:
        host = _host_of(url)
        if host is None:
            return False
        expiration = self._hosts.get(host)
        if expiration is None:
            return False
        if expiration == NEVER:
            return True
        return expiration > _utcnow() - self.grace

    def hosts(self) -> dict[str, datetime]:
        """Snapshot of host → expiry."""
        return dict(self._hosts)

    def __contains__(self, url: str) -> bool:
        return self.is_trusted_service_url(url)


default_trust_list = TrustedHostList()


def is_trusted_service_url(url: Optional[str]) -> bool:
    """Check url against the process-wide trust list."""
    return default_trust_list.is_trusted_service_url(url)


def trust_service_url(url: str, expiration: Optional[datetime] = None) -> None:
    """Add url's host to the process-wide trust list."""
    default_trust_list.trust_service_url(url, expiration)


def load_default_trust_list(settings) -> TrustedHostList:
    """Apply settings to the process-wide trust list and return it."""
    default_trust_list.ttl = timedelta(seconds=settings.trust_ttl_seconds)
    for host in settings.trusted_hosts:
        default_trust_list.add_permanent_host(host)
    return default_trust_list
