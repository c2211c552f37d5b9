"""Helper modules for PeerListPoller."""

from .policy import PollingPolicy
from .snapshot import PeerSnapshot
from .state import PollerState, TickOutcome

__all__ = [
    "PeerSnapshot",
    "PollerState",
    "PollingPolicy",
    "TickOutcome",
]
