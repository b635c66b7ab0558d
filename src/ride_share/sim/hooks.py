# sim/hooks.py
from typing import Protocol

from ride_share.domain.entities.trip import Trip


class DispatchHooks(Protocol):
    def loaded(self, *, passengers: int, drivers: int, trips: int): ...
    def trip_requested(self, trip: Trip, *, available: int): ...
    def request_failed(self, passenger_id, *, exc: BaseException): ...


class NoopHooks:
    def loaded(self, **_):
        pass

    def trip_requested(self, *_, **__):
        pass

    def request_failed(self, *_, **__):
        pass
