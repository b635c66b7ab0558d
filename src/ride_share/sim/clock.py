# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

MIN = 60.0
HOUR = 3600.0


def minutes(x: float) -> float:
    return x * MIN


def hours(x: float) -> float:
    return x * HOUR


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware ones pass through unchanged."""
    return dt if dt.tzinfo else dt.replace(tzinfo=UTC)


class WallClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


@dataclass
class SimClock:
    epoch: datetime  # wall-time of t=0
    t: float = 0.0  # seconds since epoch

    @classmethod
    def utc_epoch(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC))

    def now(self) -> datetime:
        return self.to_wall(self.t)

    def advance(self, seconds: float) -> datetime:
        if seconds < 0:
            raise ValueError(f"clock cannot run backwards ({seconds}s)")
        self.t += seconds
        return self.now()

    # wall -> sim seconds
    def to_sim(self, dt: datetime) -> float:
        return (as_utc(dt) - self.epoch).total_seconds()

    # sim seconds -> wall
    def to_wall(self, t: float) -> datetime:
        return self.epoch + timedelta(seconds=t)
