# domain/entities/passenger.py
from dataclasses import dataclass, field
from decimal import Decimal

from ride_share.domain.entities.trip import Trip
from ride_share.domain.ids import require_id


@dataclass
class Passenger:
    id: int
    name: str
    phone_number: str
    trips: list[Trip] = field(default_factory=list)

    def __post_init__(self):
        self.id = require_id(self.id, "passenger")

    def add_trip(self, trip: Trip) -> None:
        # caller keeps trip.passenger_id consistent
        self.trips.append(trip)

    def net_expenditures(self) -> Decimal | None:
        """
        Total spent over all trips. An absent cost (in-progress or unsettled
        trip) counts as zero. None when the passenger has never ridden.
        """
        if not self.trips:
            return None
        return sum((t.cost for t in self.trips if t.cost is not None), Decimal(0))

    def total_time_spent(self) -> float | None:
        """Seconds spent in finished trips; None when there are no trips at all."""
        if not self.trips:
            return None
        return sum((t.duration for t in self.trips if t.end_time is not None), 0.0)
