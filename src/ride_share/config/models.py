import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DataModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    directory: str = "support"
    passengers_file: str = "passengers.csv"
    drivers_file: str = "drivers.csv"
    trips_file: str = "trips.csv"

    @field_validator("directory")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- CLOCKS ---------------------


class WallClockModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["wall"] = "wall"


class SimClockModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["sim"] = "sim"
    epoch: tuple[int, int, int, int, int, int]


ClockUnion = Annotated[WallClockModel | SimClockModel, Field(discriminator="kind")]


# ------------------ POLICIES -----------------------------


class MatchingPolicyLongestIdleModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["longest_idle"] = "longest_idle"


MatchingPolicyUnion = Annotated[MatchingPolicyLongestIdleModel, Field(discriminator="kind")]


# ------------------ DATA SOURCES -----------------------------


class SyntheticModel(BaseModel):
    """Generate records instead of reading CSV files."""

    model_config = ConfigDict(extra="forbid")
    seed: int = 123
    passengers: int = Field(default=20, ge=0)
    drivers: int = Field(default=5, ge=0)
    trips: int = Field(default=60, ge=0)
    busy_fraction: float = Field(default=0.2, ge=0.0, le=1.0)


# ------------------------------------------------------------------


class RideShareModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "ride-share"
    run_id: str = "local"
    data: DataModel = DataModel()
    log: LogModel = LogModel()
    clock: ClockUnion = Field(default_factory=WallClockModel)
    matching: MatchingPolicyUnion = Field(default_factory=MatchingPolicyLongestIdleModel)
    synthetic: SyntheticModel | None = None
