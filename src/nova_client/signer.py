"""Request signing for the Nova REST API."""

from __future__ import annotations

import base64
import hashlib
import hmac
import threading
import time
from dataclasses import dataclass
from typing import Callable

from .errors import NovaConfigError


@dataclass(frozen=True)
class SignedEnvelope:
    nonce: int
    signature: str


class NovaSigner:
    """
    HMAC-SHA256 signer.

    Signature:
      message   = str(nonce) + methodPath + body
      signature = base64(HMAC-SHA256(apiSecret, message))

    The nonce is the current time in milliseconds. A signer never hands out
    the same nonce twice, even when two requests land in the same millisecond.
    Uniqueness is tracked per signer only: two clients built from the same
    credentials can still collide within one millisecond, so share one client
    per API key.
    """

    def __init__(
        self,
        api_secret: str,
        time_provider: Callable[[], float] | None = None,
    ) -> None:
        if not api_secret:
            raise NovaConfigError("API secret is required for signing")
        self._secret = api_secret.encode("utf-8")
        self._time_provider = time_provider or time.time
        self._last_nonce = 0
        self._lock = threading.Lock()

    def generate_nonce(self) -> int:
        nonce = int(self._time_provider() * 1000)
        with self._lock:
            if nonce <= self._last_nonce:
                nonce = self._last_nonce + 1
            self._last_nonce = nonce
        return nonce

    def signature_for(self, nonce: int, method_path: str, content: str) -> str:
        message = f"{nonce}{method_path}{content}"
        digest = hmac.new(self._secret, message.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def sign(self, method_path: str, content: str) -> SignedEnvelope:
        nonce = self.generate_nonce()
        return SignedEnvelope(nonce=nonce, signature=self.signature_for(nonce, method_path, content))
