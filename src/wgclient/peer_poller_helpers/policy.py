"""Polling cadence owned by the poller's caller."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import ClientSettings
from ..exceptions import ValidationError


@dataclass(frozen=True)
class PollingPolicy:
    """
    How often a poller refreshes, and whether it refreshes at all.

    Owners swap policies with ``PeerListPoller.update_policy``; a disabled
    policy pauses ticking without stopping the poller.
    """

    interval_seconds: float
    enabled: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.interval_seconds, bool) or not isinstance(self.interval_seconds, (int, float)):
            raise ValidationError("Polling interval must be a number", field="interval_seconds")
        if self.interval_seconds <= 0:
            raise ValidationError(
                f"Polling interval must be positive, got {self.interval_seconds}",
                field="interval_seconds",
            )

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "PollingPolicy":
        return cls(settings.poll_interval_seconds)

    def paused(self) -> "PollingPolicy":
        return PollingPolicy(self.interval_seconds, enabled=False)

    def resumed(self) -> "PollingPolicy":
        return PollingPolicy(self.interval_seconds, enabled=True)
