import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from ride_share.app.dispatcher import TripDispatcher
from ride_share.domain.entities.driver import Driver, DriverStatus
from ride_share.domain.entities.passenger import Passenger
from ride_share.domain.entities.trip import Trip
from ride_share.errors import InvalidIdentifier, NoAvailableDriver, NotFound, UnresolvedReference
from ride_share.io.loader import load_directory
from ride_share.sim.clock import SimClock, minutes
from ride_share.sim.hooks import NoopHooks

TEST_DATA = Path(__file__).resolve().parents[1] / "test_data"


def build_test_dispatcher(**kwargs) -> TripDispatcher:
    kwargs.setdefault("clock", SimClock.utc_epoch(2025, 1, 1, 8, 0, 0))
    passengers, drivers, trips = load_directory(TEST_DATA).to_entities()
    return TripDispatcher.from_entities(passengers, drivers, trips, **kwargs)


def snapshot(d: TripDispatcher):
    return (
        len(d.trips),
        {p.id: len(p.trips) for p in d.passengers},
        {x.id: (len(x.trips), x.status) for x in d.drivers},
    )


class RecordingHooks(NoopHooks):
    def __init__(self):
        self.calls = []

    def loaded(self, **kw):
        self.calls.append(("loaded", kw))

    def trip_requested(self, trip, *, available):
        self.calls.append(("trip_requested", trip.id, available))

    def request_failed(self, passenger_id, *, exc):
        self.calls.append(("request_failed", passenger_id, type(exc).__name__))


# ------------------ loading & wiring ------------------


def test_loads_collections_in_file_order():
    d = build_test_dispatcher()
    assert isinstance(d.passengers, list)
    assert isinstance(d.drivers, list)
    assert isinstance(d.trips, list)

    assert (d.passengers[0].id, d.passengers[0].name) == (1, "Passenger 1")
    assert (d.passengers[-1].id, d.passengers[-1].name) == (8, "Passenger 8")

    first, last = d.drivers[0], d.drivers[-1]
    assert (first.id, first.name, first.status) == (1, "Driver 1 (unavailable)", DriverStatus.UNAVAILABLE)
    assert (last.id, last.name, last.status) == (3, "Driver 3 (no trips)", DriverStatus.AVAILABLE)


def test_connects_trips_passengers_and_drivers():
    d = build_test_dispatcher()
    assert len(d.trips) == 5
    for trip in d.trips:
        passenger = d.passenger_of(trip)
        driver = d.driver_of(trip)
        assert passenger.id == trip.passenger_id
        assert driver.id == trip.driver_id
        assert trip in passenger.trips
        assert trip in driver.trips


def test_collection_views_are_copies():
    d = build_test_dispatcher()
    d.drivers.clear()
    d.trips.clear()
    assert len(d.drivers) == 3
    assert len(d.trips) == 5


def test_unknown_passenger_reference_aborts_construction():
    p = Passenger(id=1, name="A", phone_number="1")
    dr = Driver(id=1, name="B", vin="12345678901234567")
    trip = Trip(id=1, passenger_id=2, driver_id=1, start_time=datetime(2020, 1, 1, tzinfo=UTC))
    with pytest.raises(UnresolvedReference) as exc:
        TripDispatcher.from_entities([p], [dr], [trip])
    assert (exc.value.kind, exc.value.ident) == ("passenger", 2)


def test_unknown_driver_reference_aborts_construction():
    p = Passenger(id=1, name="A", phone_number="1")
    trip = Trip(id=1, passenger_id=1, driver_id=7, start_time=datetime(2020, 1, 1, tzinfo=UTC))
    with pytest.raises(UnresolvedReference) as exc:
        TripDispatcher.from_entities([p], [], [trip])
    assert (exc.value.kind, exc.value.ident) == ("driver", 7)


def test_loaded_hook_reports_counts():
    hooks = RecordingHooks()
    build_test_dispatcher(hooks=hooks)
    assert hooks.calls == [("loaded", {"passengers": 8, "drivers": 3, "trips": 5})]


# ------------------ lookup ------------------


def test_find_passenger_and_driver():
    d = build_test_dispatcher()
    assert isinstance(d.find_passenger(2), Passenger)
    assert isinstance(d.find_driver(2), Driver)
    assert d.find_trip(3).driver_id == 2


@pytest.mark.parametrize("bad", [0, -1, True, "2", 2.0])
def test_lookup_rejects_invalid_ids(bad):
    d = build_test_dispatcher()
    with pytest.raises(InvalidIdentifier):
        d.find_passenger(bad)
    with pytest.raises(InvalidIdentifier):
        d.find_driver(bad)


def test_lookup_of_zero_is_invalid_even_when_empty():
    d = TripDispatcher()
    with pytest.raises(InvalidIdentifier):
        d.find_passenger(0)
    with pytest.raises(InvalidIdentifier):
        d.find_driver(0)


def test_lookup_of_missing_id_is_not_found():
    d = build_test_dispatcher()
    with pytest.raises(NotFound):
        d.find_passenger(99)
    with pytest.raises(NotFound):
        d.find_driver(99)
    with pytest.raises(NotFound):
        d.find_trip(99)


# ------------------ request_trip ------------------


def test_request_trip_returns_new_in_progress_trip():
    clock = SimClock.utc_epoch(2025, 1, 1, 8, 0, 0)
    d = build_test_dispatcher(clock=clock)
    before = d.trips

    trip = d.request_trip(1)

    assert isinstance(trip, Trip)
    assert trip not in before
    assert trip.id == 6
    assert trip.passenger_id == 1
    assert trip.start_time == clock.now()
    assert trip.in_progress and trip.cost is None and trip.rating is None


def test_request_trip_updates_all_collections():
    d = build_test_dispatcher()
    trips_before = len(d.trips)
    passenger_before = len(d.find_passenger(1).trips)
    driver_before = len(d.find_driver(3).trips)

    trip = d.request_trip(1)
    passenger = d.find_passenger(1)
    driver = d.driver_of(trip)

    assert len(d.trips) == trips_before + 1
    assert len(passenger.trips) == passenger_before + 1
    assert len(driver.trips) == driver_before + 1
    assert trip in d.trips
    assert passenger.trips[-1] is trip
    assert driver.trips[-1] is trip


def test_request_trip_selects_available_driver_and_flips_status():
    d = build_test_dispatcher()
    available = d.available_drivers()
    trip = d.request_trip(1)
    driver = d.driver_of(trip)
    assert driver in available
    assert driver.status is DriverStatus.UNAVAILABLE


def test_request_trip_prefers_driver_without_trips():
    d = build_test_dispatcher()
    assert d.request_trip(1).driver_id == 3


def test_request_trip_prefers_driver_idle_longest():
    d = build_test_dispatcher()
    # Driver 3 (no trips) busy; add a driver whose only trip ended in 1900
    d.set_driver_status(3, DriverStatus.UNAVAILABLE)
    veteran = Driver(id=4, name="Driver 4 a long time since last trip", vin="12345678901234567")
    d.state.add_driver(veteran)
    d.state.add_trip(
        Trip(
            id=100,
            passenger_id=8,
            driver_id=4,
            cost=500,
            rating=5,
            start_time=datetime(1900, 1, 1, tzinfo=UTC),
            end_time=datetime(1900, 1, 2, tzinfo=UTC),
        )
    )

    trip = d.request_trip(1)

    assert d.driver_of(trip) is veteran
    assert trip.id == 101  # never reuses or undercuts a loaded id


def test_request_trip_no_history_beats_any_history():
    d = TripDispatcher(clock=SimClock.utc_epoch(2025, 1, 1))
    d.state.add_passenger(Passenger(id=1, name="P", phone_number="1"))
    old = Driver(id=1, name="Old", vin="12345678901234567")
    new = Driver(id=2, name="New", vin="12345678901234567")
    d.state.add_driver(old)
    d.state.add_driver(new)
    d.state.add_trip(
        Trip(
            id=1,
            passenger_id=1,
            driver_id=1,
            start_time=datetime(1900, 1, 1, tzinfo=UTC),
            end_time=datetime(1900, 1, 1, 1, tzinfo=UTC),
        )
    )
    assert d.request_trip(1).driver_id == 2


def test_request_trip_ties_go_to_first_driver():
    d = TripDispatcher(clock=SimClock.utc_epoch(2025, 1, 1))
    d.state.add_passenger(Passenger(id=1, name="P", phone_number="1"))
    for i in (5, 2, 9):
        d.state.add_driver(Driver(id=i, name=f"D{i}", vin="12345678901234567"))
    assert [d.request_trip(1).driver_id for _ in range(3)] == [5, 2, 9]


def test_consecutive_requests_rotate_through_drivers():
    clock = SimClock.utc_epoch(2025, 1, 1, 8, 0, 0)
    d = build_test_dispatcher(clock=clock)
    first = d.request_trip(1)
    clock.advance(minutes(5))
    second = d.request_trip(2)

    assert (first.driver_id, second.driver_id) == (3, 2)
    assert second.start_time - first.start_time == timedelta(minutes=5)
    assert second.id == first.id + 1
    with pytest.raises(NoAvailableDriver):
        d.request_trip(3)


def test_request_trip_without_available_drivers_changes_nothing():
    d = build_test_dispatcher()
    for driver in d.drivers:
        d.set_driver_status(driver.id, "UNAVAILABLE")
    before = snapshot(d)

    with pytest.raises(NoAvailableDriver):
        d.request_trip(1)

    assert snapshot(d) == before


def test_request_trip_for_unknown_passenger_changes_nothing():
    d = build_test_dispatcher()
    before = snapshot(d)
    with pytest.raises(NotFound):
        d.request_trip(42)
    with pytest.raises(InvalidIdentifier):
        d.request_trip(0)
    assert snapshot(d) == before


def test_request_hooks_see_success_and_failure():
    hooks = RecordingHooks()
    d = build_test_dispatcher(hooks=hooks)
    d.request_trip(1)
    d.request_trip(2)
    with pytest.raises(NoAvailableDriver):
        d.request_trip(3)

    assert hooks.calls[1:] == [
        ("trip_requested", 6, 2),
        ("trip_requested", 7, 1),
        ("request_failed", 3, "NoAvailableDriver"),
    ]


def test_concurrent_requests_never_share_a_driver():
    d = TripDispatcher(clock=SimClock.utc_epoch(2025, 1, 1))
    for i in (1, 2, 3):
        d.state.add_driver(Driver(id=i, name=f"D{i}", vin="12345678901234567"))
    for i in range(1, 21):
        d.state.add_passenger(Passenger(id=i, name=f"P{i}", phone_number=str(i)))

    start = threading.Barrier(20)
    trips, failures = [], []

    def worker(passenger_id):
        start.wait()
        try:
            trips.append(d.request_trip(passenger_id))
        except NoAvailableDriver as e:
            failures.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(1, 21)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(t.driver_id for t in trips) == [1, 2, 3]
    assert sorted(t.id for t in trips) == [1, 2, 3]
    assert len(failures) == 17
    assert len(d.trips) == 3
    assert d.available_drivers() == []
