"""Poller lifecycle states and per-tick outcomes."""

from enum import Enum


class PollerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    POLLING = "polling"
    STOPPED = "stopped"


class TickOutcome(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"
    SESSION_EXPIRED = "session_expired"

    @property
    def is_failure(self) -> bool:
        return self in (TickOutcome.NETWORK_ERROR, TickOutcome.SERVER_ERROR)
