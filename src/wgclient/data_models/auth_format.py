"""Login body encodings accepted by different server deployments."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class AuthFormat(Enum):
    """
    One way of encoding the password in a ``POST /api/session`` request.

    Declaration order is the probing priority: the first member the server
    accepts wins and later members are never tried.
    """

    JSON_PASSWORD = "json_password"
    JSON_PASS = "json_pass"
    FORM_PASSWORD = "form_password"
    FORM_PASS = "form_pass"
    PLAIN_TEXT = "plain_text"

    @property
    def priority(self) -> int:
        """1-based position in the probing order."""
        return PROBE_ORDER.index(self) + 1

    def request_kwargs(self, password: str) -> Dict[str, Any]:
        """Build the aiohttp request keyword arguments for this encoding."""
        if self is AuthFormat.JSON_PASSWORD:
            return {"json": {"password": password}}
        if self is AuthFormat.JSON_PASS:
            return {"json": {"pass": password}}
        if self is AuthFormat.FORM_PASSWORD:
            return {"data": {"password": password}}
        if self is AuthFormat.FORM_PASS:
            return {"data": {"pass": password}}
        return {
            "data": password.encode("utf-8"),
            "headers": {"Content-Type": "text/plain; charset=utf-8"},
        }

    @classmethod
    def from_name(cls, value: Optional[str]) -> Optional["AuthFormat"]:
        """Look up a format by its persisted value or member name."""
        if not value:
            return None
        for member in cls:
            if value in (member.value, member.name):
                return member
        return None


PROBE_ORDER = tuple(AuthFormat)


__all__ = ["AuthFormat", "PROBE_ORDER"]
