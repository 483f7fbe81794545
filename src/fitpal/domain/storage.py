"""Storage outcome models."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class StorageTier(str, Enum):
    """Storage backend that served a call."""

    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class StoreOutcome(Generic[T]):
    """Result of a two-tier storage call.

    ``error`` is set when the remote tier was attempted and failed, in which
    case the local tier served the call. ``local_error`` is set when the
    local copy could not be written.
    """

    value: T
    tier: StorageTier
    error: str | None = None
    local_error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.error is not None
