"""HTTP transport for the Edda REST API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

import requests

from .config import EddaConfig
from .exceptions import EddaClientError, EddaServiceError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ServiceResponse:
    """Raw body of one GET plus the moment the request was started."""

    start_time: datetime
    url: str
    status_code: int
    content: bytes
    elapsed_seconds: float


class EddaRestClient:
    """Thin wrapper around a requests session pointed at one Edda endpoint."""

    def __init__(self, config: EddaConfig):
        self._base = config.base_url()
        self._session = requests.Session()
        self._session.headers["Accept"] = "application/json"
        self._session.headers["User-Agent"] = config.user_agent
        self._session.verify = config.verify_ssl
        self._timeout = config.timeout

    @property
    def base_url(self) -> str:
        return self._base

    def url(self, path: str) -> str:
        return f"{self._base}{path}"

    def do_get(self, url: str) -> ServiceResponse:
        """GET an absolute URL. Raises EddaClientError or EddaServiceError."""
        start_time = _utcnow()
        started = time.monotonic()
        logger.debug("GET %s", url, extra={"url": url})

        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise EddaClientError(f"Request failed: {exc}") from exc

        elapsed = round(time.monotonic() - started, 3)
        if resp.status_code >= 400:
            raise EddaServiceError(
                f"HTTP {resp.status_code} on GET {url}: {resp.text}",
                status_code=resp.status_code,
                response_body=resp.text,
            )

        logger.debug(
            "GET %s -> %d", url, resp.status_code,
            extra={"url": url, "status_code": resp.status_code, "elapsed_seconds": elapsed},
        )
        return ServiceResponse(
            start_time=start_time,
            url=url,
            status_code=resp.status_code,
            content=resp.content,
            elapsed_seconds=elapsed,
        )

    def close(self) -> None:
        self._session.close()
