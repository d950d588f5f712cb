from collections.abc import Iterable, Mapping


def _field(flight, name: str) -> str:
    if isinstance(flight, Mapping):
        value = flight.get(name)
    else:
        value = getattr(flight, name, None)
    return "" if value is None else str(value)


def matches(flight, origin: str | None = None, destination: str | None = None) -> bool:
    """Case-insensitive substring match; an empty or missing filter matches everything."""
    o = (origin or "").strip().lower()
    d = (destination or "").strip().lower()
    return o in _field(flight, "origin").lower() and d in _field(flight, "destination").lower()


def filter_flights(flights: Iterable, origin: str | None = None, destination: str | None = None) -> list:
    return [f for f in flights if matches(f, origin, destination)]
