from __future__ import annotations

from .errors import MalformedPreambleError
from .types import Preamble

FIELDS = (
    "format",
    "type",
    "point_count",
    "waveform_count",
    "x_increment",
    "x_origin",
    "x_reference",
    "y_increment",
    "y_origin",
    "y_reference",
)
INT_FIELDS = {"format", "type", "point_count", "waveform_count"}


def parse_preamble(line: str) -> Preamble:
    """Zerlegt die 10-Felder-Antwort von ``WAVEFORM:PREAMBLE?``."""

    parts = [p.strip() for p in line.strip().split(",")]
    if len(parts) != len(FIELDS):
        raise MalformedPreambleError(
            f"Preamble hat {len(parts)} Felder, erwartet {len(FIELDS)}: {line!r}", line=line
        )

    values: dict[str, int | float] = {}
    for name, text in zip(FIELDS, parts, strict=True):
        try:
            values[name] = int(text) if name in INT_FIELDS else float(text)
        except ValueError as e:
            raise MalformedPreambleError(
                f"Preamble-Feld {name}={text!r} nicht lesbar", line=line
            ) from e

    if values["point_count"] < 0 or values["waveform_count"] < 0:
        raise MalformedPreambleError(f"Negative Punktanzahl in Preamble: {line!r}", line=line)

    return Preamble(**values)
