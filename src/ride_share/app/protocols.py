from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from ride_share.domain.entities.driver import Driver


@runtime_checkable
class Clock(Protocol):
    """Source of 'now' for newly requested trips. Must return tz-aware datetimes."""

    def now(self) -> datetime: ...


@runtime_checkable
class MatchingPolicy(Protocol):
    """
    Responsibilities:
      • Choose one driver from an already-filtered pool of available drivers.
      • Return None for an empty pool; never mutate the drivers.
    """

    def select(self, candidates: Iterable[Driver]) -> Driver | None: ...
