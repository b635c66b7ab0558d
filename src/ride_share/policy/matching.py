# ride_share/policy/matching.py
from collections.abc import Iterable
from dataclasses import dataclass

from ride_share.app.protocols import MatchingPolicy
from ride_share.domain.entities.driver import Driver


def _idle_rank(d: Driver) -> tuple:
    # (0,) never driven; (1, end) waiting since `end`; (2,) only in-progress trips
    if not d.trips:
        return (0,)
    last_end = d.last_trip_end
    if last_end is None:
        return (2,)
    return (1, last_end)


@dataclass
class LongestIdleMatchingPolicy(MatchingPolicy):
    """
    Pick the driver who has gone longest without a trip. Drivers with no trip
    history go first; ties keep the candidates' order.
    """

    def select(self, candidates: Iterable[Driver]) -> Driver | None:
        # min() returns the first of equal keys
        return min(candidates, key=_idle_rank, default=None)
