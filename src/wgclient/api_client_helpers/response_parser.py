"""Decoding of wg-easy response bodies."""

from __future__ import annotations

from typing import Any, List, Optional

import orjson

from ..data_models import PeerRecord, ServerInfo
from ..exceptions import ServerError
from ..http_utils import error_snippet
from .request_executor import ResponseEnvelope


class ResponseParser:
    """Turns response envelopes into typed records."""

    @staticmethod
    def decode_json(envelope: ResponseEnvelope) -> Any:
        if not envelope.body.strip():
            return None
        try:
            return orjson.loads(envelope.body)
        except orjson.JSONDecodeError as exc:
            raise ServerError(envelope.status, f"response was not JSON: {error_snippet(envelope.text())}") from exc

    @classmethod
    def parse_peers(cls, envelope: ResponseEnvelope) -> List[PeerRecord]:
        payload = cls.decode_json(envelope)
        if isinstance(payload, dict) and "clients" in payload:
            payload = payload["clients"]
        if not isinstance(payload, list):
            raise ServerError(envelope.status, "peer list response was not a JSON array")
        return [PeerRecord.from_payload(item) for item in payload]

    @classmethod
    def parse_created_peer(cls, envelope: ResponseEnvelope) -> Optional[PeerRecord]:
        """Return the created peer when the server echoes it back."""
        payload = cls.decode_json(envelope)
        if isinstance(payload, dict) and isinstance(payload.get("client"), dict):
            payload = payload["client"]
        if isinstance(payload, dict) and "id" in payload:
            return PeerRecord.from_payload(payload)
        return None

    @classmethod
    def parse_server_info(cls, envelope: ResponseEnvelope) -> ServerInfo:
        return ServerInfo.from_payload(cls.decode_json(envelope))

    @classmethod
    def error_message(cls, envelope: ResponseEnvelope) -> str:
        """Best-effort human-readable reason for a failed response."""
        try:
            payload = orjson.loads(envelope.body) if envelope.body.strip() else None
        except orjson.JSONDecodeError:
            payload = None
        if isinstance(payload, dict):
            for key in ("error", "message"):
                value = payload.get(key)
                if value:
                    return str(value)
        return error_snippet(envelope.text())
