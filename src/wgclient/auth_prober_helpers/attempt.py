"""Typed outcomes of individual login attempts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..data_models import AuthFormat


@dataclass(frozen=True)
class ProbeAttempt:
    """
    Result of sending one login request with one encoding.

    An ``auth_format`` of None is the unauthenticated check made for a
    profile without a password; it succeeds without a credential.
    """

    auth_format: Optional[AuthFormat]
    status: Optional[int] = None
    error: Optional[str] = None
    credential: str = field(default="", repr=False)

    @property
    def succeeded(self) -> bool:
        if self.error is not None:
            return False
        return self.auth_format is None or bool(self.credential)


@dataclass(frozen=True)
class ProbeResult:
    """Winning encoding plus the credential it produced."""

    auth_format: Optional[AuthFormat]
    credential: str = field(repr=False)
    attempts: Tuple[ProbeAttempt, ...] = ()

    @property
    def no_auth(self) -> bool:
        return self.auth_format is None

    @property
    def request_count(self) -> int:
        return len(self.attempts)
