"""Timestamped envelopes that wrap one SDK-shaped result."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """A result plus the start time of the request that produced it."""

    start_time: datetime
    result: T


@dataclass(frozen=True)
class NamedServiceResult(Generic[T]):
    """A result belonging to one named resource, e.g. a single load balancer."""

    start_time: datetime
    name: str
    result: T


@dataclass(frozen=True)
class PaginatedServiceResult(Generic[T]):
    start_time: datetime
    next_token: str | None
    result: T
