"""Data models describing where loaded data came from."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DataSource(Enum):
    """Tier that produced a load result."""

    REMOTE = "remote"
    CACHE = "cache"
    BUNDLED = "bundled"
    NONE = "none"  # Bundled dataset missing; packaging error


class FailureKind(Enum):
    """Why a tier did not produce data."""

    SKIPPED = "skipped"  # Freshness gate said no
    NETWORK = "network"  # Transport error, timeout or non-2xx status
    DECODE = "decode"  # Malformed JSON or unexpected shape
    STORAGE = "storage"  # On-device storage read/write failed
    MISSING = "missing"  # Nothing stored yet


@dataclass(frozen=True)
class TierResult:
    """Outcome of a single tier attempt inside the tiered loader."""

    payload: Any = None
    failure: FailureKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, payload: Any) -> "TierResult":
        return cls(payload=payload)

    @classmethod
    def failed(cls, failure: FailureKind, detail: str = "") -> "TierResult":
        return cls(failure=failure, detail=detail)


@dataclass(frozen=True)
class LoadResult:
    """Data returned by a tiered load, with its provenance."""

    payload: Any
    source: DataSource
    last_fetch: str | None = None  # ISO-8601 timestamp of the last remote success

    @property
    def is_fresh(self) -> bool:
        """True when the payload came straight from the server on this load."""
        return self.source is DataSource.REMOTE

    @property
    def is_fallback(self) -> bool:
        """True when the payload is the shipped dataset (or nothing at all)."""
        return self.source in (DataSource.BUNDLED, DataSource.NONE)
