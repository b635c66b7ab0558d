# src/ride_share/io/loader.py
import csv
import os
from dataclasses import dataclass, field
from pathlib import Path

from ride_share.domain.entities.driver import Driver
from ride_share.domain.entities.passenger import Passenger
from ride_share.domain.entities.trip import Trip
from ride_share.errors import InvalidRecord
from ride_share.io.records import (
    DriverRecord,
    PassengerRecord,
    Table,
    TripRecord,
    parse_record,
)

PASSENGERS_FILE = "passengers.csv"
DRIVERS_FILE = "drivers.csv"
TRIPS_FILE = "trips.csv"


@dataclass
class RecordSet:
    passengers: list[PassengerRecord] = field(default_factory=list)
    drivers: list[DriverRecord] = field(default_factory=list)
    trips: list[TripRecord] = field(default_factory=list)

    def to_entities(self) -> tuple[list[Passenger], list[Driver], list[Trip]]:
        return (
            [r.to_entity() for r in self.passengers],
            [r.to_entity() for r in self.drivers],
            [r.to_entity() for r in self.trips],
        )


def read_table(path: str | os.PathLike, table: Table) -> list:
    """
    Parse one CSV file (header row = field names) into validated records.
    Line numbers in errors count the header as line 1.
    """
    out = []
    seen: set[int] = set()
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for line, row in enumerate(reader, start=2):
            rec = parse_record(table, row, line=line)
            if rec.id in seen:
                raise InvalidRecord(table, [("id", f"duplicate id {rec.id}")], line=line)
            seen.add(rec.id)
            out.append(rec)
    return out


def load_directory(
    directory: str | os.PathLike,
    *,
    passengers_file: str = PASSENGERS_FILE,
    drivers_file: str = DRIVERS_FILE,
    trips_file: str = TRIPS_FILE,
) -> RecordSet:
    base = Path(directory)
    paths = {
        "passengers": base / passengers_file,
        "drivers": base / drivers_file,
        "trips": base / trips_file,
    }
    for p in paths.values():
        if not p.is_file():
            raise FileNotFoundError(p)
    return RecordSet(
        passengers=read_table(paths["passengers"], "passengers"),
        drivers=read_table(paths["drivers"], "drivers"),
        trips=read_table(paths["trips"], "trips"),
    )


def write_directory(records: RecordSet, directory: str | os.PathLike) -> Path:
    """Write a RecordSet as three CSV files that load_directory reads back."""
    base = Path(directory)
    base.mkdir(parents=True, exist_ok=True)

    with open(base / PASSENGERS_FILE, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["id", "name", "phone_num"])
        for r in records.passengers:
            w.writerow([r.id, r.name, r.phone_num])

    with open(base / DRIVERS_FILE, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["id", "name", "vin", "status"])
        for r in records.drivers:
            w.writerow([r.id, r.name, r.vin, r.status.value])

    with open(base / TRIPS_FILE, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["id", "driver_id", "passenger_id", "start_time", "end_time", "cost", "rating"])
        for r in records.trips:
            w.writerow(
                [
                    r.id,
                    r.driver_id,
                    r.passenger_id,
                    r.start_time.isoformat(),
                    r.end_time.isoformat() if r.end_time else "",
                    "" if r.cost is None else str(r.cost),
                    "" if r.rating is None else r.rating,
                ]
            )
    return base
