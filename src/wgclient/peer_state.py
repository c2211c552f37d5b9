"""
Derived peer state: online classification, handshake age and aggregates.

All functions are pure and take ``now`` explicitly so callers (and tests)
control the clock. Naive datetimes are read as UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable

from .data_models import PeerRecord

ONLINE_WINDOW = timedelta(seconds=120)

_SECONDS_IN_MINUTE = 60
_SECONDS_IN_HOUR = 3600
_SECONDS_IN_DAY = 86400


class HandshakeKind(Enum):
    NEVER = "never"
    JUST_NOW = "just_now"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"


@dataclass(frozen=True)
class HandshakeAge:
    """Bucketed time since a peer's latest handshake."""

    kind: HandshakeKind
    value: int = 0

    def describe(self) -> str:
        if self.kind is HandshakeKind.NEVER:
            return "never"
        if self.kind is HandshakeKind.JUST_NOW:
            return "just now"
        unit = {
            HandshakeKind.MINUTES: "minute",
            HandshakeKind.HOURS: "hour",
            HandshakeKind.DAYS: "day",
        }[self.kind]
        suffix = "" if self.value == 1 else "s"
        return f"{self.value} {unit}{suffix} ago"


@dataclass(frozen=True)
class PeerStats:
    total_count: int = 0
    active_count: int = 0
    online_count: int = 0
    total_traffic: int = 0
    current_download_rate: float = 0.0
    current_upload_rate: float = 0.0


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_online(peer: PeerRecord, now: datetime) -> bool:
    """True when the peer is enabled and handshook less than 120s ago."""
    if not peer.enabled or peer.latest_handshake_at is None:
        return False
    return _as_utc(now) - _as_utc(peer.latest_handshake_at) < ONLINE_WINDOW


def time_since_last_handshake(peer: PeerRecord, now: datetime) -> HandshakeAge:
    """
    Classify how long ago the peer last handshook.

    A handshake stamped in the future (clock skew) counts as just now.
    """
    if peer.latest_handshake_at is None:
        return HandshakeAge(HandshakeKind.NEVER)

    elapsed = (_as_utc(now) - _as_utc(peer.latest_handshake_at)).total_seconds()
    if elapsed < _SECONDS_IN_MINUTE:
        return HandshakeAge(HandshakeKind.JUST_NOW)
    if elapsed < _SECONDS_IN_HOUR:
        return HandshakeAge(HandshakeKind.MINUTES, int(elapsed // _SECONDS_IN_MINUTE))
    if elapsed < _SECONDS_IN_DAY:
        return HandshakeAge(HandshakeKind.HOURS, int(elapsed // _SECONDS_IN_HOUR))
    return HandshakeAge(HandshakeKind.DAYS, int(elapsed // _SECONDS_IN_DAY))


def aggregate(peers: Iterable[PeerRecord], now: datetime) -> PeerStats:
    total = active = online = traffic = 0
    download = upload = 0.0
    for peer in peers:
        total += 1
        if peer.enabled:
            active += 1
        if is_online(peer, now):
            online += 1
        traffic += peer.total_transfer
        download += peer.transfer_rx_current
        upload += peer.transfer_tx_current
    return PeerStats(
        total_count=total,
        active_count=active,
        online_count=online,
        total_traffic=traffic,
        current_download_rate=download,
        current_upload_rate=upload,
    )


__all__ = [
    "HandshakeAge",
    "HandshakeKind",
    "ONLINE_WINDOW",
    "PeerStats",
    "aggregate",
    "is_online",
    "time_since_last_handshake",
]
