from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from .types import AcquisitionResult


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def default_output_path(directory: Path, now: datetime | None = None) -> Path:
    now = now or datetime.now()
    return directory / f"waveform_{now:%Y%m%d_%H%M%S}.txt"


def format_lines(
    path: Path,
    result: AcquisitionResult,
    comment: str | None = None,
    timestamp: datetime | None = None,
) -> list[str]:
    timestamp = timestamp or datetime.now(timezone.utc)
    units = [wf.units for wf in result.channels]
    names = [wf.name for wf in result.channels]

    lines = [
        result.instrument_id,
        str(path),
        timestamp.astimezone(timezone.utc).isoformat(),
        " ".join(str(wf.channel) for wf in result.channels),
        " ".join(["int", "second", *units]),
    ]
    if comment:
        lines.append(comment)
    lines.append(" ".join(["n", "t", *names]))

    columns = [wf.samples for wf in result.channels]
    for i, t in enumerate(result.time_axis()):
        row = [str(i + 1), f"{t:.6e}", *(f"{col[i]:.6e}" for col in columns)]
        lines.append(" ".join(row))
    return lines


def write_text(
    path: Path,
    result: AcquisitionResult,
    comment: str | None = None,
    timestamp: datetime | None = None,
) -> None:
    """Schreibt die Erfassung als Textdatei. Datei darf nicht existieren.

    Es wird erst in eine temporäre Datei im Zielverzeichnis geschrieben und
    diese dann umbenannt; bei einem Fehler bleibt kein halbes File liegen.
    """

    if path.exists():
        raise FileExistsError(f"Ausgabedatei existiert bereits: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    lines = format_lines(path, result, comment=comment, timestamp=timestamp)

    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(line + "\n")
        # mkstemp legt 0600 an; Zieldatei soll der umask folgen.
        os.chmod(tmp, 0o666 & ~_current_umask())
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise
