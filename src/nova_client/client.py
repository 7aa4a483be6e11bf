from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable

import requests
from requests.exceptions import RequestException, Timeout

from .errors import NovaConfigError, NovaNetworkError
from .signer import NovaSigner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiConfig:
    api_path: str
    api_key: str
    api_secret: str
    timeout: float = 10.0

    def __post_init__(self) -> None:
        for name in ("api_path", "api_key", "api_secret"):
            if not getattr(self, name):
                raise NovaConfigError(f"ApiConfig.{name} must be set")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ApiConfig":
        """Build the config from NOVA_API_PATH, NOVA_API_KEY, NOVA_API_SECRET and NOVA_API_TIMEOUT."""
        env = os.environ if environ is None else environ
        missing = [k for k in ("NOVA_API_PATH", "NOVA_API_KEY", "NOVA_API_SECRET") if not env.get(k)]
        if missing:
            raise NovaConfigError(f"Missing environment variables: {', '.join(missing)}")

        timeout_raw = env.get("NOVA_API_TIMEOUT")
        timeout = 10.0
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as e:
                raise NovaConfigError(f"NOVA_API_TIMEOUT is not a number: {timeout_raw!r}", cause=e) from e

        return cls(
            api_path=env["NOVA_API_PATH"],
            api_key=env["NOVA_API_KEY"],
            api_secret=env["NOVA_API_SECRET"],
            timeout=timeout,
        )


class NovaClient:
    """
    Transport core: a requests session plus Nova auth headers.

    Headers:
      api-key, nonce, sign, Content-Type: application/json
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        session: requests.Session | None = None,
        time_provider: Callable[[], float] | None = None,
    ):
        self.config = config
        self.base_url = config.api_path.rstrip("/")
        self.signer = NovaSigner(config.api_secret, time_provider=time_provider)
        self.session = session or requests.Session()

    def _headers(self, *, with_key: bool = True) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if with_key:
            headers["api-key"] = self.config.api_key
        return headers

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        call = getattr(self.session, method.lower())
        try:
            return call(url, timeout=self.config.timeout, **kwargs)
        except Timeout as e:
            raise NovaNetworkError(f"Timeout calling {url}", method=method, path=path, cause=e) from e
        except RequestException as e:
            raise NovaNetworkError(f"Network error calling {url}: {e}", method=method, path=path, cause=e) from e
        except Exception as e:
            raise NovaNetworkError(f"Request to {url} failed: {e!r}", method=method, path=path, cause=e) from e

    def signed_post(self, path: str, body: str) -> requests.Response:
        """POST ``body`` exactly as signed."""
        envelope = self.signer.sign(path, body)
        headers = self._headers()
        headers.update({"nonce": str(envelope.nonce), "sign": envelope.signature})
        logger.debug("POST %s nonce=%d", path, envelope.nonce)
        return self._send("POST", path, data=body.encode("utf-8"), headers=headers)

    def get(self, path: str, *, with_key: bool = True) -> requests.Response:
        logger.debug("GET %s", path)
        return self._send("GET", path, headers=self._headers(with_key=with_key))

    def delete(self, path: str) -> requests.Response:
        logger.debug("DELETE %s", path)
        return self._send("DELETE", path, headers=self._headers())
