from __future__ import annotations

import hmac
import os
import secrets
import time
from typing import Callable, Optional

from .scoring.types import PoolError


class PermissionDenied(PoolError):
    """Raised when a privileged write lacks a valid organizer token."""

    pass


class CapabilityIssuer:
    """
    Mints and verifies organizer capability tokens.
    - Token format: "<expires_at>.<hex hmac-sha256(secret, 'organizer:<expires_at>')>"
    - Secret comes from PROPSHEET_ADMIN_SECRET, else a random per-process key
    - Verification is server-side and constant-time; the client holds no flag
    """

    def __init__(
        self,
        *,
        secret: Optional[str] = None,
        ttl_seconds: int = 12 * 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        key = secret or os.getenv("PROPSHEET_ADMIN_SECRET")
        self._secret = key.encode("utf-8") if key else secrets.token_bytes(32)
        self.ttl_seconds = max(1, int(ttl_seconds))
        self._clock = clock

    def _sign(self, expires_at: int) -> str:
        msg = f"organizer:{expires_at}".encode("utf-8")
        return hmac.new(self._secret, msg, digestmod="sha256").hexdigest()

    def issue(self, *, password: str, expected_password: str) -> str:
        """Exchange the organizer password for a signed token."""
        if not expected_password or not hmac.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8")):
            raise PermissionDenied("invalid organizer password")
        expires_at = int(self._clock()) + self.ttl_seconds
        return f"{expires_at}.{self._sign(expires_at)}"

    def verify(self, token: Optional[str]) -> bool:
        if not token or "." not in token:
            return False
        raw_exp, signature = token.split(".", 1)
        try:
            expires_at = int(raw_exp)
        except ValueError:
            return False
        if expires_at < int(self._clock()):
            return False
        return hmac.compare_digest(self._sign(expires_at), signature)

    def require_organizer(self, token: Optional[str]) -> None:
        if not self.verify(token):
            raise PermissionDenied("organizer capability required")


__all__ = ["PermissionDenied", "CapabilityIssuer"]
