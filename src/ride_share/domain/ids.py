# ride_share/domain/ids.py
from ride_share.errors import InvalidIdentifier


def require_id(value, kind: str = "entity") -> int:
    # bool is an int subclass; True must not pass as id 1
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidIdentifier(value, kind)
    return value
