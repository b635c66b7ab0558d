# src/ride_share/io/records.py
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ride_share.domain.entities.driver import Driver, DriverStatus
from ride_share.domain.entities.passenger import Passenger
from ride_share.domain.entities.trip import MAX_RATING, MIN_RATING, Trip
from ride_share.errors import InvalidRecord
from ride_share.sim.clock import as_utc

VIN_LENGTH = 17

# "2018-05-25 11:52:40 -0700" as written in the CSV exports
CSV_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"

Table = Literal["passengers", "drivers", "trips"]


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class PassengerRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)
    id: int = Field(gt=0)
    name: str
    phone_num: str = Field(validation_alias=AliasChoices("phone_num", "phone_number"))

    def to_entity(self) -> Passenger:
        return Passenger(id=self.id, name=self.name, phone_number=self.phone_num)


class DriverRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)
    id: int = Field(gt=0)
    name: str
    vin: str = Field(min_length=VIN_LENGTH, max_length=VIN_LENGTH)
    status: DriverStatus = DriverStatus.AVAILABLE

    @field_validator("status", mode="before")
    @classmethod
    def _status_upper(cls, v):
        v = _blank_to_none(v)
        if v is None:
            return DriverStatus.AVAILABLE
        if isinstance(v, str):
            # CSV exports sometimes carry Ruby symbols (":AVAILABLE")
            return v.strip().lstrip(":").upper()
        return v

    def to_entity(self) -> Driver:
        return Driver(id=self.id, name=self.name, vin=self.vin, status=self.status)


class TripRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)
    id: int = Field(gt=0)
    passenger_id: int = Field(gt=0)
    driver_id: int = Field(gt=0)
    start_time: datetime
    end_time: datetime | None = None
    cost: Decimal | None = Field(default=None, ge=0)
    rating: int | None = Field(default=None, ge=MIN_RATING, le=MAX_RATING)

    @field_validator("end_time", "cost", "rating", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        # CSV has no null: an empty cell means "absent"
        return _blank_to_none(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _csv_time(cls, v):
        if isinstance(v, str):
            try:
                return datetime.strptime(v.strip(), CSV_TIME_FORMAT)
            except ValueError:
                return v  # let pydantic try ISO 8601
        return v

    @model_validator(mode="after")
    def _ends_after_start(self):
        self.start_time = as_utc(self.start_time)
        if self.end_time is not None:
            self.end_time = as_utc(self.end_time)
            if self.end_time < self.start_time:
                raise ValueError("end_time is before start_time")
        return self

    def to_entity(self) -> Trip:
        return Trip(
            id=self.id,
            passenger_id=self.passenger_id,
            driver_id=self.driver_id,
            start_time=self.start_time,
            end_time=self.end_time,
            cost=self.cost,
            rating=self.rating,
        )


RECORD_TYPES: dict[str, type[BaseModel]] = {
    "passengers": PassengerRecord,
    "drivers": DriverRecord,
    "trips": TripRecord,
}


def parse_record(table: Table, raw: Mapping, *, line: int | None = None):
    """Validate one raw field mapping, raising InvalidRecord on any bad field."""
    try:
        model = RECORD_TYPES[table]
    except KeyError:
        raise ValueError(f"Unknown table {table!r}") from None
    try:
        return model.model_validate(dict(raw))
    except ValidationError as e:
        errors = [(".".join(str(x) for x in err["loc"]) or "<record>", err["msg"]) for err in e.errors()]
        raise InvalidRecord(table, errors, line=line) from e
