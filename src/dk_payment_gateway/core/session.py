"""
Per-client authentication state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = ["GatewaySession"]


@dataclass
class GatewaySession:
    """
    Bearer token and signing key obtained by :class:`Authenticator`.

    Both start out empty and are replaced together after a successful
    authentication.
    """

    access_token: Optional[str] = None
    private_key: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.access_token) and bool(self.private_key)

    def update(self, access_token: str, private_key: str) -> None:
        self.access_token = access_token
        self.private_key = private_key

    def clear(self) -> None:
        self.access_token = None
        self.private_key = None

    def __repr__(self) -> str:
        return (
            f"GatewaySession(access_token={'set' if self.access_token else None}, "
            f"private_key={'set' if self.private_key else None})"
        )
