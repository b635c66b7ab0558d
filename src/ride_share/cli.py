# ride_share/cli.py
import argparse
import sys

from ride_share.app.build import build
from ride_share.errors import RideShareError
from ride_share.io.dispatch_logging import default_json_logger
from ride_share.io.loader import write_directory
from ride_share.io.synthetic import generate_records


def _summary(args) -> int:
    app = build({"data": {"directory": args.data}}, use_logging=False)
    d = app.dispatcher
    print(f"passengers={len(d.passengers)} drivers={len(d.drivers)} trips={len(d.trips)}")
    print(f"available drivers: {', '.join(str(x.id) for x in d.available_drivers()) or '-'}")
    for p in d.passengers:
        spent = p.net_expenditures()
        secs = p.total_time_spent()
        print(
            f"  passenger {p.id:>4} {p.name:<24} trips={len(p.trips):<3} "
            f"spent={'-' if spent is None else spent} "
            f"time={'-' if secs is None else f'{secs / 60:.1f}min'}"
        )
    return 0


def _request(args) -> int:
    cfg = {"data": {"directory": args.data}}
    logger = None
    if args.log_level != "OFF":
        cfg["log"] = {"level": args.log_level}
        # stdout carries the command result; logs go to stderr
        logger = default_json_logger("ride_share.cli", level=args.log_level, stream=sys.stderr)
        logger.propagate = False
    app = build(cfg, use_logging=logger is not None, logger=logger)
    trip = app.dispatcher.request_trip(args.passenger)
    print(
        f"trip {trip.id}: passenger {trip.passenger_id} with driver {trip.driver_id} "
        f"from {trip.start_time.isoformat()}"
    )
    return 0


def _generate(args) -> int:
    records = generate_records(
        args.passengers, args.drivers, args.trips, seed=args.seed, busy_fraction=args.busy
    )
    out = write_directory(records, args.out_dir)
    print(f"wrote {len(records.passengers)}/{len(records.drivers)}/{len(records.trips)} to {out}")
    return 0


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ride-share", description="In-memory trip dispatcher")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("summary", help="show loaded passengers, drivers and trips")
    p.add_argument("--data", default="support", help="directory holding the CSV files")
    p.set_defaults(func=_summary)

    p = sub.add_parser("request", help="request a trip for a passenger")
    p.add_argument("--passenger", type=int, required=True)
    p.add_argument("--data", default="support")
    p.add_argument("--log-level", default="OFF", choices=["OFF", "DEBUG", "INFO", "WARNING", "ERROR"])
    p.set_defaults(func=_request)

    p = sub.add_parser("generate", help="write a synthetic data set")
    p.add_argument("out_dir")
    p.add_argument("--seed", type=int, default=123)
    p.add_argument("--passengers", type=int, default=20)
    p.add_argument("--drivers", type=int, default=5)
    p.add_argument("--trips", type=int, default=60)
    p.add_argument("--busy", type=float, default=0.2, help="share of drivers left mid-trip")
    p.set_defaults(func=_generate)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = make_parser().parse_args(argv)
    try:
        return args.func(args)
    except (RideShareError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
