"""
Peer (client) records as reported by the server.

Records are only ever built from server payloads. The one local mutation
the client performs is ``with_enabled``, an optimistic flip used right after
a successful enable/disable call; the next poll replaces it.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..exceptions import ServerError


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts the ``Z`` suffix the server emits. Naive values are treated as UTC.
    Returns None for null/empty input.

    Raises:
        ValueError: If the value is not a recognizable timestamp
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _require_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        raise ValueError(f"missing {key!r}")
    return str(value)


def _counter(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key)
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"{key!r} must be numeric")
    return max(0, int(value))


def _rate(payload: Mapping[str, Any], key: str) -> float:
    value = payload.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"{key!r} must be numeric")
    return max(0.0, float(value))


@dataclass(frozen=True)
class PeerRecord:
    """A VPN peer managed by the server."""

    id: str
    name: str
    address: str
    public_key: str
    enabled: bool
    latest_handshake_at: Optional[datetime] = None
    transfer_rx: int = 0
    transfer_tx: int = 0
    transfer_rx_current: float = 0.0
    transfer_tx_current: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    private_key: Optional[str] = dataclasses.field(default=None, repr=False)

    @property
    def total_transfer(self) -> int:
        return self.transfer_rx + self.transfer_tx

    def with_enabled(self, enabled: bool) -> "PeerRecord":
        return dataclasses.replace(self, enabled=enabled)

    @classmethod
    def from_payload(cls, payload: Any) -> "PeerRecord":
        """
        Build a record from the server's camelCase JSON object.

        Raises:
            ServerError: If the payload is not a well-formed peer object
        """
        if not isinstance(payload, Mapping):
            raise ServerError(200, f"peer entry must be a JSON object, got {type(payload).__name__}")
        try:
            return cls(
                id=_require_str(payload, "id"),
                name=str(payload.get("name") or ""),
                address=str(payload.get("address") or ""),
                public_key=str(payload.get("publicKey") or ""),
                enabled=bool(payload.get("enabled", False)),
                latest_handshake_at=parse_timestamp(payload.get("latestHandshakeAt")),
                transfer_rx=_counter(payload, "transferRx"),
                transfer_tx=_counter(payload, "transferTx"),
                transfer_rx_current=_rate(payload, "transferRxCurrent"),
                transfer_tx_current=_rate(payload, "transferTxCurrent"),
                created_at=parse_timestamp(payload.get("createdAt")),
                updated_at=parse_timestamp(payload.get("updatedAt")),
                private_key=payload.get("privateKey"),
            )
        except (TypeError, ValueError) as exc:
            raise ServerError(200, f"malformed peer entry: {exc}") from exc


__all__ = ["PeerRecord", "parse_timestamp"]
