# ride_share/errors.py


class RideShareError(Exception):
    """Base class for every error raised by the ride-share core."""


class InvalidIdentifier(RideShareError, ValueError):
    def __init__(self, value, kind: str = "entity"):
        self.value = value
        self.kind = kind
        super().__init__(f"invalid {kind} id {value!r}: ids are positive integers")


class NotFound(RideShareError, LookupError):
    def __init__(self, kind: str, ident: int):
        self.kind = kind
        self.ident = ident
        super().__init__(f"no {kind} with id {ident}")


class NoAvailableDriver(RideShareError):
    def __init__(self, passenger_id: int | None = None):
        self.passenger_id = passenger_id
        super().__init__("no drivers available")


class UnresolvedReference(RideShareError):
    """A trip points at a passenger or driver that was never loaded."""

    def __init__(self, trip_id: int, kind: str, ident: int):
        self.trip_id = trip_id
        self.kind = kind
        self.ident = ident
        super().__init__(f"trip {trip_id} references unknown {kind} {ident}")


class InvalidTrip(RideShareError, ValueError):
    pass


class InvalidRecord(RideShareError, ValueError):
    """
    A raw record failed validation at the loader boundary.
    `errors` holds (field, message) pairs.
    """

    def __init__(self, table: str, errors: list[tuple[str, str]], line: int | None = None):
        self.table = table
        self.errors = errors
        self.line = line
        where = f"{table}:{line}" if line is not None else table
        detail = "; ".join(f"{f}: {m}" for f, m in errors)
        super().__init__(f"invalid {where} record ({detail})")
