# domain/entities/driver.py
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from ride_share.domain.entities.trip import Trip
from ride_share.domain.ids import require_id

TRIP_FEE = Decimal("1.65")
DRIVER_SHARE = Decimal("0.8")


class DriverStatus(Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass
class Driver:
    id: int
    name: str
    vin: str
    status: DriverStatus = DriverStatus.AVAILABLE
    trips: list[Trip] = field(default_factory=list)

    def __post_init__(self):
        self.id = require_id(self.id, "driver")
        if isinstance(self.status, str):
            self.status = DriverStatus(self.status.upper())

    def add_trip(self, trip: Trip) -> None:
        self.trips.append(trip)

    @property
    def is_available(self) -> bool:
        return self.status is DriverStatus.AVAILABLE

    @property
    def last_trip(self) -> Trip | None:
        return self.trips[-1] if self.trips else None

    @property
    def last_trip_end(self) -> datetime | None:
        ends = [t.end_time for t in self.trips if t.end_time is not None]
        return max(ends) if ends else None

    def average_rating(self) -> float:
        ratings = [t.rating for t in self.trips if t.end_time is not None and t.rating is not None]
        if not ratings:
            return 0.0
        return sum(ratings) / len(ratings)

    def total_revenue(self) -> Decimal:
        """Driver's cut of every settled fare, after the flat per-trip fee."""
        total = Decimal(0)
        for t in self.trips:
            if t.end_time is None or t.cost is None:
                continue
            total += max(t.cost - TRIP_FEE, Decimal(0)) * DRIVER_SHARE
        return total
