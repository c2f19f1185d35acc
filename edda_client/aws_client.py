"""Shared plumbing for Edda-backed AWS service clients."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, TypeVar

import boto3

from .config import AWSConfig, EddaConfig
from .exceptions import EddaClientError, InvalidParameterValue, UnsupportedOperationError
from .rest_client import EddaRestClient, ServiceResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EddaAwsClient:
    """Base class: URL building, GET, parse, validation and id filtering.

    Subclasses list the operations they serve from Edda in ``OPERATIONS``;
    ``read_only()`` and ``wrap_aws_client()`` expose exactly those.
    """

    OPERATIONS: tuple[str, ...] = ()

    def __init__(self, config: EddaConfig, rest_client: EddaRestClient | None = None):
        self._config = config
        self._rest = rest_client or EddaRestClient(config)

    def url(self, path: str) -> str:
        return self._rest.url(path)

    def do_get(self, url: str) -> ServiceResponse:
        return self._rest.do_get(url)

    def parse(self, url: str, content: bytes, loader: Callable[[Any], T]) -> T:
        """Decode a JSON body and map it with ``loader``; any failure is an EddaClientError."""
        try:
            return loader(json.loads(content))
        except (ValueError, KeyError, TypeError) as exc:
            raise EddaClientError(f"Failed to parse {url}") from exc

    def close(self) -> None:
        self._rest.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ── Request helpers ─────────────────────────────────────────────

    @staticmethod
    def validate_not_empty(name: str, value: str | None) -> None:
        if not value:
            raise InvalidParameterValue(name, value)

    @staticmethod
    def should_filter(ids: Iterable[str] | None) -> bool:
        """Filter only when the caller supplied at least one id."""
        return bool(ids)

    @staticmethod
    def matches(ids: Iterable[str], value: str) -> bool:
        return value in ids

    # ── Facades ─────────────────────────────────────────────────────

    def read_only(self) -> _EddaFacade:
        """A view of this client that refuses every operation Edda cannot serve."""
        return _EddaFacade(self, delegate=None)

    def wrap_aws_client(self, delegate: Any) -> _EddaFacade:
        """Serve this client's operations from Edda and send everything else to ``delegate``."""
        return _EddaFacade(self, delegate=delegate)


class _EddaFacade:
    def __init__(self, edda: EddaAwsClient, delegate: Any = None):
        self._edda = edda
        self._delegate = delegate

    def __getattr__(self, name: str) -> Any:
        # Private and dunder lookups never forward.
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._edda.OPERATIONS:
            return getattr(self._edda, name)
        if self._delegate is None:
            raise UnsupportedOperationError(
                f"{name} is not supported by the read-only {type(self._edda).__name__}"
            )
        return getattr(self._delegate, name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} edda={self._edda!r} delegate={self._delegate!r}>"


def build_aws_client(service: str, aws_config: AWSConfig) -> Any:
    """Build a plain boto3 client, typically to pass to ``wrap_aws_client``."""
    session_kwargs: dict[str, Any] = {"region_name": aws_config.region}
    if aws_config.credential_profile:
        session_kwargs["profile_name"] = aws_config.credential_profile

    session = boto3.Session(**session_kwargs)
    logger.debug("Built boto3 %s client for %s", service, aws_config.region)
    return session.client(service)
