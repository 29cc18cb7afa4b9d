"""Parsing and formatting of Go-style duration strings.

Suite files express latency bounds the way the original tool did, e.g.
``"250ms"``, ``"1.5s"`` or ``"1m30s"``.
"""

import re
from datetime import timedelta
from decimal import Decimal

UNIT_MICROSECONDS: dict[str, Decimal] = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """Convert a duration from its persisted form into a timedelta.

    Strings use Go syntax. Bare integers are nanoseconds, which is how the
    original YAML decoder treated them; floats are seconds.

    Raises:
        ValueError: If the value is not a valid duration

    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration {value!r}")
    if isinstance(value, int):
        return timedelta(microseconds=value / 1000)
    if isinstance(value, float):
        return timedelta(seconds=value)

    text = value.strip()
    sign = 1
    if text[:1] in {"+", "-"}:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total = Decimal(0)
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        total += Decimal(number) * UNIT_MICROSECONDS[unit]
        position = match.end()

    return timedelta(microseconds=float(sign * total))


def format_duration(value: timedelta) -> str:
    """Render a duration compactly, e.g. ``1.5s``, ``12.345ms`` or ``1m30s``."""
    micros = value // timedelta(microseconds=1)
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros == 0:
        return "0s"
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim(Decimal(micros) / 1_000)}ms"

    minutes, rest = divmod(micros, 60_000_000)
    seconds = _trim(Decimal(rest) / 1_000_000)
    if minutes == 0:
        return f"{sign}{seconds}s"
    hours, minutes = divmod(minutes, 60)
    prefix = f"{hours}h{minutes}m" if hours else f"{minutes}m"
    return f"{sign}{prefix}{seconds}s"


def _trim(value: Decimal) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text or "0"
