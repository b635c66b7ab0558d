# src/ride_share/io/synthetic.py
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from ride_share.domain.entities.driver import DriverStatus
from ride_share.io.loader import RecordSet
from ride_share.io.records import VIN_LENGTH, DriverRecord, PassengerRecord, TripRecord
from ride_share.sim.clock import HOUR, MIN
from ride_share.sim.rng import RNGRegistry

VIN_ALPHABET = list("ABCDEFGHJKLMNPRSTUVWXYZ0123456789")

BASE_FARE = 2.0
PER_MINUTE = 0.9


def generate_records(
    n_passengers: int,
    n_drivers: int,
    n_trips: int,
    *,
    seed: int = 123,
    epoch: datetime = datetime(2025, 1, 1, tzinfo=UTC),
    busy_fraction: float = 0.2,
) -> RecordSet:
    """
    Draw a self-consistent data set from named RNG streams.

    Trips of a driver never overlap and are generated in time order. A
    `busy_fraction` share of drivers get one extra in-progress trip and are
    marked UNAVAILABLE; everyone else is AVAILABLE.
    """
    if n_trips and (n_passengers < 1 or n_drivers < 1):
        raise ValueError("trips need at least one passenger and one driver")

    reg = RNGRegistry(seed, scenario="synthetic")

    g = reg.stream("passengers")
    passengers = [
        PassengerRecord(
            id=i,
            name=f"Passenger {i}",
            phone_num="{}-{}-{}".format(*(int(x) for x in g.integers([200, 100, 1000], [1000, 1000, 10000]))),
        )
        for i in range(1, n_passengers + 1)
    ]

    g = reg.stream("drivers")
    drivers = [
        DriverRecord(id=i, name=f"Driver {i}", vin="".join(g.choice(VIN_ALPHABET, size=VIN_LENGTH)))
        for i in range(1, n_drivers + 1)
    ]

    g = reg.stream("trips")
    cursor = {d.id: 0.0 for d in drivers}  # seconds since epoch the driver is free again
    trips: list[TripRecord] = []

    def _trip(driver_id: int, *, finished: bool) -> TripRecord:
        start_s = cursor[driver_id] + float(g.exponential(2 * HOUR))
        passenger_id = int(g.integers(1, n_passengers + 1))
        start = epoch + timedelta(seconds=start_s)
        if not finished:
            cursor[driver_id] = start_s
            return TripRecord(
                id=len(trips) + 1, passenger_id=passenger_id, driver_id=driver_id, start_time=start
            )
        ride_s = float(g.uniform(5 * MIN, 60 * MIN))
        cursor[driver_id] = start_s + ride_s
        fare = BASE_FARE + PER_MINUTE * ride_s / MIN
        return TripRecord(
            id=len(trips) + 1,
            passenger_id=passenger_id,
            driver_id=driver_id,
            start_time=start,
            end_time=start + timedelta(seconds=ride_s),
            cost=Decimal(f"{fare:.2f}"),
            rating=int(g.integers(1, 6)),
        )

    for _ in range(n_trips):
        trips.append(_trip(int(g.integers(1, n_drivers + 1)), finished=True))

    if n_passengers:
        busy = g.random(n_drivers) < busy_fraction
        for d, is_busy in zip(drivers, busy):
            if is_busy:
                trips.append(_trip(d.id, finished=False))
                d.status = DriverStatus.UNAVAILABLE

    return RecordSet(passengers=passengers, drivers=drivers, trips=trips)
