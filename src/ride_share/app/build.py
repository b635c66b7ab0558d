# ride_share/app/build.py
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from ride_share.app.dispatcher import TripDispatcher
from ride_share.app.protocols import Clock
from ride_share.config.models import RideShareModel
from ride_share.io.dispatch_logging import DispatchLogging  # JSON logs
from ride_share.io.loader import RecordSet, load_directory
from ride_share.io.recorder import MemorySink, Recorder
from ride_share.io.synthetic import generate_records
from ride_share.runtime.policy_factory import make_clock, make_matching_policy
from ride_share.sim.hooks import NoopHooks


@dataclass
class App:
    config: RideShareModel
    dispatcher: TripDispatcher
    clock: Clock
    records: RecordSet
    events: MemorySink | None = None


def load_records(model: RideShareModel) -> RecordSet:
    if model.synthetic is not None:
        s = model.synthetic
        return generate_records(
            s.passengers, s.drivers, s.trips, seed=s.seed, busy_fraction=s.busy_fraction
        )
    return load_directory(
        model.data.directory,
        passengers_file=model.data.passengers_file,
        drivers_file=model.data.drivers_file,
        trips_file=model.data.trips_file,
    )


def build(
    cfg: RideShareModel | Mapping | None = None,
    *,
    records: RecordSet | None = None,
    use_logging: bool = True,
    logger: logging.Logger | None = None,
) -> App:
    # 0) Validate config
    if cfg is None:
        model = RideShareModel()
    else:
        model = cfg if isinstance(cfg, RideShareModel) else RideShareModel.model_validate(cfg)

    # 1) Clock & policy
    clock = make_clock(model.clock)
    matching = make_matching_policy(model.matching)

    # 2) Hooks; business events are kept in memory for the caller
    events = MemorySink() if use_logging else None
    hooks = (
        DispatchLogging(
            run_id=model.run_id,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            logger=logger,
            recorder=Recorder(events),
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Records -> entities -> wired dispatcher
    records = records if records is not None else load_records(model)
    passengers, drivers, trips = records.to_entities()
    dispatcher = TripDispatcher.from_entities(
        passengers, drivers, trips, matching=matching, clock=clock, hooks=hooks
    )

    return App(model, dispatcher, clock, records, events)
