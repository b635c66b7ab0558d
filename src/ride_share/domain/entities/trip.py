# domain/entities/trip.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ride_share.domain.ids import require_id
from ride_share.errors import InvalidTrip
from ride_share.sim.clock import as_utc

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Trip:
    id: int
    passenger_id: int
    start_time: datetime
    driver_id: int | None = None  # None until a driver is assigned
    end_time: datetime | None = None  # None => in progress
    cost: Decimal | None = None
    rating: int | None = None

    def __post_init__(self):
        self.id = require_id(self.id, "trip")
        self.passenger_id = require_id(self.passenger_id, "passenger")
        if self.driver_id is not None:
            self.driver_id = require_id(self.driver_id, "driver")

        self.start_time = as_utc(self.start_time)
        if self.end_time is not None:
            self.end_time = as_utc(self.end_time)
            if self.end_time < self.start_time:
                raise InvalidTrip(
                    f"trip {self.id} ends before it starts ({self.end_time} < {self.start_time})"
                )

        if self.cost is not None:
            if not isinstance(self.cost, Decimal):
                # str() first so 32.5 becomes Decimal("32.5"), not the binary expansion
                self.cost = Decimal(str(self.cost))
            if self.cost < 0:
                raise InvalidTrip(f"trip {self.id} has negative cost {self.cost}")

        if self.rating is not None and not MIN_RATING <= self.rating <= MAX_RATING:
            raise InvalidTrip(
                f"trip {self.id} rating must be {MIN_RATING}..{MAX_RATING}, got {self.rating}"
            )

    @property
    def in_progress(self) -> bool:
        return self.end_time is None

    @property
    def duration(self) -> float | None:
        """Seconds between start and end; None while the trip is in progress."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()
