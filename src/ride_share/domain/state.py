# ride_share/domain/state.py
from dataclasses import dataclass, field

from ride_share.domain.entities.driver import Driver, DriverStatus
from ride_share.domain.entities.passenger import Passenger
from ride_share.domain.entities.trip import Trip
from ride_share.errors import UnresolvedReference


@dataclass
class RideShareState:
    """
    Owns every entity, keyed by id. Trips carry passenger/driver ids only;
    passengers and drivers hold the Trip objects they took part in.
    """

    passengers: dict[int, Passenger] = field(default_factory=dict)
    drivers: dict[int, Driver] = field(default_factory=dict)
    trips: dict[int, Trip] = field(default_factory=dict)

    # id for the next requested trip; only ever grows
    next_trip_id: int = 1

    def add_passenger(self, p: Passenger) -> None:
        if p.id in self.passengers:
            raise ValueError(f"duplicate passenger id {p.id}")
        self.passengers[p.id] = p

    def add_driver(self, d: Driver) -> None:
        if d.id in self.drivers:
            raise ValueError(f"duplicate driver id {d.id}")
        self.drivers[d.id] = d

    def resolve(self, trip: Trip) -> tuple[Passenger, Driver]:
        p = self.passengers.get(trip.passenger_id)
        if p is None:
            raise UnresolvedReference(trip.id, "passenger", trip.passenger_id)
        d = self.drivers.get(trip.driver_id) if trip.driver_id is not None else None
        if d is None:
            raise UnresolvedReference(trip.id, "driver", trip.driver_id)
        return p, d

    def add_trip(self, trip: Trip) -> None:
        """Register a trip and append it to its passenger's and driver's lists."""
        if trip.id in self.trips:
            raise ValueError(f"duplicate trip id {trip.id}")
        p, d = self.resolve(trip)
        self.trips[trip.id] = trip
        p.add_trip(trip)
        d.add_trip(trip)
        self.next_trip_id = max(self.next_trip_id, trip.id + 1)

    def available_drivers(self) -> list[Driver]:
        return [d for d in self.drivers.values() if d.status is DriverStatus.AVAILABLE]
