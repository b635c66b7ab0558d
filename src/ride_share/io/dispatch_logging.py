# io/dispatch_logging.py
import json
import logging
import sys

from ride_share.domain.entities.trip import Trip
from ride_share.errors import InvalidIdentifier, NoAvailableDriver, NotFound
from ride_share.io.business_events import RequestRejectedBiz, TripRequestedBiz
from ride_share.io.recorder import Recorder
from ride_share.sim.hooks import NoopHooks


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="ride_share", level="INFO", stream=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


def _reason(exc: BaseException) -> str:
    if isinstance(exc, NoAvailableDriver):
        return "no_driver"
    if isinstance(exc, InvalidIdentifier):
        return "invalid_id"
    if isinstance(exc, NotFound):
        return "not_found"
    return "other"


class DispatchLogging(NoopHooks):
    """
    One place to shape and emit structured logs for dispatcher activity,
    and to forward business events to the recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id = run_id
        self.clock = clock
        self.debug = debug
        self.recorder = recorder
        self.log = logger or default_json_logger(level="DEBUG" if debug else level)
        self._seq = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: int, msg: str, **extra):
        self.log.log(level, msg, extra={"extra": {"run_id": self.run_id, **extra}})

    def _now(self) -> str:
        return self.clock.now().isoformat() if self.clock else ""

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    # --------------------------------------------------------

    def loaded(self, *, passengers: int, drivers: int, trips: int):
        self._emit(logging.INFO, "loaded", passengers=passengers, drivers=drivers, trips=trips)

    def trip_requested(self, trip: Trip, *, available: int):
        self._emit(
            logging.INFO,
            "trip_requested",
            trip_id=trip.id,
            passenger_id=trip.passenger_id,
            driver_id=trip.driver_id,
            start_time=trip.start_time.isoformat(),
            available=available,
        )
        self.biz(
            TripRequestedBiz(
                run_id=self.run_id,
                at=trip.start_time.isoformat(),
                seq=self._next_seq(),
                name="TripRequested",
                trip_id=trip.id,
                passenger_id=trip.passenger_id,
                driver_id=trip.driver_id,
                available_drivers=available,
            )
        )

    def request_failed(self, passenger_id, *, exc: BaseException):
        reason = _reason(exc)
        self._emit(
            logging.WARNING,
            "request_failed",
            passenger_id=passenger_id,
            reason=reason,
            error=str(exc),
        )
        if self.debug:
            self.log.debug("request_failed detail", exc_info=exc)
        self.biz(
            RequestRejectedBiz(
                run_id=self.run_id,
                at=self._now(),
                seq=self._next_seq(),
                name="RequestRejected",
                passenger_id=passenger_id if isinstance(passenger_id, int) else None,
                reason=reason,
                error=str(exc),
            )
        )

    # ------------- Business Event Reporting --------------------------

    def biz(self, ev):
        if self.recorder:
            self.recorder.emit(ev)
