"""Non-secret session metadata persisted as a small JSON document."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import orjson

from ..data_models import AuthFormat, parse_timestamp
from ..exceptions import StorageError

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = 1
_FILE_MODE = 0o600


@dataclass(frozen=True)
class SessionMetadata:
    server_url: str
    auth_format: Optional[AuthFormat]
    created_at: datetime

    @property
    def no_auth(self) -> bool:
        return self.auth_format is None


class SessionMetadataFile:
    """Reads and atomically rewrites the session metadata file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> Optional[SessionMetadata]:
        """
        Load metadata, or None when absent.

        A file that cannot be parsed is removed so the next launch starts clean.
        """
        if not self.path.exists():
            return None
        try:
            payload = orjson.loads(self.path.read_bytes())
            metadata = self._decode(payload)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Discarding unreadable session file %s: %s", self.path, exc)
            self.remove()
            return None
        return metadata

    def write(self, metadata: SessionMetadata) -> None:
        payload = {
            "version": _SCHEMA_VERSION,
            "server_url": metadata.server_url,
            "auth_format": None if metadata.auth_format is None else metadata.auth_format.value,
            "no_auth": metadata.no_auth,
            "created_at": metadata.created_at.isoformat(),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".session-", suffix=".tmp", dir=self.path.parent)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
                os.chmod(tmp_name, _FILE_MODE)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to write session file {self.path}") from exc

    def remove(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to remove session file {self.path}") from exc

    @staticmethod
    def _decode(payload: object) -> SessionMetadata:
        if not isinstance(payload, dict):
            raise ValueError("session file must contain a JSON object")
        auth_format = AuthFormat.from_name(payload.get("auth_format"))
        if auth_format is None and payload.get("no_auth") is not True:
            raise ValueError(f"unknown auth format {payload.get('auth_format')!r}")
        created_at = parse_timestamp(payload["created_at"])
        if created_at is None:
            raise ValueError("created_at is empty")
        return SessionMetadata(
            server_url=str(payload["server_url"]),
            auth_format=auth_format,
            created_at=created_at,
        )
