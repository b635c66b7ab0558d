# ride_share/app/dispatcher.py
import threading
from collections.abc import Iterable

from ride_share.app.protocols import Clock, MatchingPolicy
from ride_share.domain.entities.driver import Driver, DriverStatus
from ride_share.domain.entities.passenger import Passenger
from ride_share.domain.entities.trip import Trip
from ride_share.domain.ids import require_id
from ride_share.domain.state import RideShareState
from ride_share.errors import NoAvailableDriver, NotFound
from ride_share.policy.matching import LongestIdleMatchingPolicy
from ride_share.sim.clock import WallClock
from ride_share.sim.hooks import DispatchHooks, NoopHooks


class TripDispatcher:
    def __init__(
        self,
        state: RideShareState | None = None,
        *,
        matching: MatchingPolicy | None = None,
        clock: Clock | None = None,
        hooks: DispatchHooks | None = None,
    ):
        self.state = state or RideShareState()
        self.matching = matching or LongestIdleMatchingPolicy()
        self.clock = clock or WallClock()
        self.hooks = hooks or NoopHooks()
        # guards request_trip and driver status flips
        self._lock = threading.RLock()

    @classmethod
    def from_entities(
        cls,
        passengers: Iterable[Passenger],
        drivers: Iterable[Driver],
        trips: Iterable[Trip],
        **kwargs,
    ) -> "TripDispatcher":
        """
        Build the arena and wire every trip to its passenger and driver.
        Raises UnresolvedReference (and builds nothing) if a trip points at
        a passenger or driver that is not in the given collections.
        """
        state = RideShareState()
        for p in passengers:
            state.add_passenger(p)
        for d in drivers:
            state.add_driver(d)
        for t in trips:
            state.add_trip(t)
        dispatcher = cls(state, **kwargs)
        dispatcher.hooks.loaded(
            passengers=len(state.passengers), drivers=len(state.drivers), trips=len(state.trips)
        )
        return dispatcher

    # ------------- read-only collections --------------

    @property
    def passengers(self) -> list[Passenger]:
        return list(self.state.passengers.values())

    @property
    def drivers(self) -> list[Driver]:
        return list(self.state.drivers.values())

    @property
    def trips(self) -> list[Trip]:
        return list(self.state.trips.values())

    def available_drivers(self) -> list[Driver]:
        return self.state.available_drivers()

    # ------------- lookup --------------

    def find_passenger(self, passenger_id: int) -> Passenger:
        require_id(passenger_id, "passenger")
        try:
            return self.state.passengers[passenger_id]
        except KeyError:
            raise NotFound("passenger", passenger_id) from None

    def find_driver(self, driver_id: int) -> Driver:
        require_id(driver_id, "driver")
        try:
            return self.state.drivers[driver_id]
        except KeyError:
            raise NotFound("driver", driver_id) from None

    def find_trip(self, trip_id: int) -> Trip:
        require_id(trip_id, "trip")
        try:
            return self.state.trips[trip_id]
        except KeyError:
            raise NotFound("trip", trip_id) from None

    def passenger_of(self, trip: Trip) -> Passenger:
        return self.find_passenger(trip.passenger_id)

    def driver_of(self, trip: Trip) -> Driver | None:
        if trip.driver_id is None:
            return None
        return self.find_driver(trip.driver_id)

    # ------------- dispatch --------------

    def request_trip(self, passenger_id: int) -> Trip:
        """
        Assign the longest-idle available driver to a new in-progress trip.

        Every check happens before the first mutation, so a failed request
        leaves trips, passenger/driver trip lists and statuses untouched.
        """
        with self._lock:
            try:
                passenger = self.find_passenger(passenger_id)
                available = self.state.available_drivers()
                driver = self.matching.select(available)
                if driver is None:
                    raise NoAvailableDriver(passenger_id)
                trip = Trip(
                    id=self.state.next_trip_id,
                    passenger_id=passenger.id,
                    driver_id=driver.id,
                    start_time=self.clock.now(),
                )
            except Exception as exc:
                self.hooks.request_failed(passenger_id, exc=exc)
                raise

            # commit: none of these can fail
            self.state.add_trip(trip)
            driver.status = DriverStatus.UNAVAILABLE

        self.hooks.trip_requested(trip, available=len(available))
        return trip

    def set_driver_status(self, driver_id: int, status: DriverStatus | str) -> Driver:
        driver = self.find_driver(driver_id)
        with self._lock:
            driver.status = status if isinstance(status, DriverStatus) else DriverStatus(status.upper())
        return driver
