"""Immutable view of the peer list published after each poll."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Tuple

from ..data_models import PeerRecord
from ..peer_state import PeerStats, aggregate


@dataclass(frozen=True)
class PeerSnapshot:
    """
    Latest known peers plus their aggregate statistics.

    ``updated_at`` is the time of the last successful poll (None before the
    first one). Failed polls keep the previous peers and only bump
    ``consecutive_failures`` and ``last_error``.
    """

    peers: Tuple[PeerRecord, ...] = ()
    stats: PeerStats = PeerStats()
    updated_at: Optional[datetime] = None
    consecutive_failures: int = 0
    last_error: Optional[str] = None

    @classmethod
    def from_peers(cls, peers: Iterable[PeerRecord], now: datetime) -> "PeerSnapshot":
        peer_tuple = tuple(peers)
        return cls(peers=peer_tuple, stats=aggregate(peer_tuple, now), updated_at=now)

    @property
    def is_stale(self) -> bool:
        return self.consecutive_failures > 0

    def find(self, peer_id: str) -> Optional[PeerRecord]:
        for peer in self.peers:
            if peer.id == peer_id:
                return peer
        return None

    def with_failure(self, description: str) -> "PeerSnapshot":
        return dataclasses.replace(
            self,
            consecutive_failures=self.consecutive_failures + 1,
            last_error=description,
        )

    def with_peer_enabled(self, peer_id: str, enabled: bool, now: datetime) -> "PeerSnapshot":
        """Flip one peer's enabled flag and recompute the statistics."""
        peers = tuple(peer.with_enabled(enabled) if peer.id == peer_id else peer for peer in self.peers)
        return dataclasses.replace(self, peers=peers, stats=aggregate(peers, now))
