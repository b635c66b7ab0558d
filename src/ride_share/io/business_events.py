# ride_share/io/business_events.py

from dataclasses import dataclass
from typing import Literal


# Analytics records; emitted after the fact, never fed back into dispatch
@dataclass
class BizEvent:
    run_id: str
    at: str  # ISO 8601 wall time
    seq: int  # per-run emission order
    name: str


@dataclass
class TripRequestedBiz(BizEvent):
    trip_id: int
    passenger_id: int
    driver_id: int
    available_drivers: int


@dataclass
class RequestRejectedBiz(BizEvent):
    passenger_id: int | None
    reason: Literal["no_driver", "invalid_id", "not_found", "other"]
    error: str
