"""User-supplied server target."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import ValidationError
from ..http_utils import normalize_server_url


@dataclass(frozen=True)
class ServerProfile:
    """
    Server the client should talk to.

    The URL is validated and normalized on construction, so an invalid
    profile never reaches the network layer.
    """

    url: str
    password: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", normalize_server_url(self.url))
        if self.password is not None and not isinstance(self.password, str):
            raise ValidationError("Password must be a string", field="password")

    @property
    def has_password(self) -> bool:
        return bool(self.password and self.password.strip())

    def require_password(self) -> str:
        """Return the trimmed password, raising if none is configured."""
        if not self.has_password:
            raise ValidationError("A password is required to authenticate", field="password")
        assert self.password is not None
        return self.password.strip()


__all__ = ["ServerProfile"]
