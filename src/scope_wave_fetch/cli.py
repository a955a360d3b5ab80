from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .acquisition import MAX_POINTS, AcquisitionRequest, acquire
from .errors import AcquisitionError, ValidationError
from .io import default_output_path, write_text
from .stats import summarize
from .transport import DEFAULT_PORT, DEFAULT_TIMEOUT, Session


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="scope-wave-fetch",
        description=(
            "Liest Waveforms (16-Bit, Rohdaten) von einem Oszilloskop über TCP/SCPI "
            "und speichert sie skaliert als Textdatei."
        ),
    )

    p.add_argument("host", help="Hostname oder IP-Adresse des Oszilloskops.")
    p.add_argument("--port", type=int, default=DEFAULT_PORT)
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Timeout je Lesevorgang in s.")
    p.add_argument("-c", "--channels", type=int, nargs="+", default=[1], metavar="N")
    p.add_argument(
        "-n",
        "--names",
        nargs="+",
        default=[],
        metavar="NAME",
        help="Spaltennamen, einer je Kanal (Standard: CH<n>).",
    )
    p.add_argument("-p", "--points", default=MAX_POINTS, help="Punktanzahl oder MAX.")
    p.add_argument(
        "-o",
        "--output",
        metavar="PFAD",
        help="Ausgabedatei oder -verzeichnis. Datei darf nicht existieren.",
    )
    p.add_argument("--comment", help="Optionale Kommentarzeile für den Dateikopf.")
    p.add_argument(
        "--strict-timebase",
        action="store_true",
        help="Abbrechen, wenn die Zeitbasis eines Kanals vom ersten abweicht.",
    )
    p.add_argument("--plot", action="store_true", help="Plot-Fenster öffnen.")
    p.add_argument("--png", metavar="DATEI", help="Optional: Plot als PNG speichern.")
    p.add_argument("-v", "--verbose", action="store_true", help="Mehr Ausgaben (Debug).")

    return p.parse_args(argv)


def resolve_output(output: str | None) -> Path:
    if not output:
        return default_output_path(Path("."))
    path = Path(output)
    if path.is_dir() or output.endswith(("/", "\\")):
        return default_output_path(path)
    return path


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    request = AcquisitionRequest(channels=args.channels, names=args.names, points=args.points)
    out = resolve_output(args.output)
    try:
        request.validate()
        if out.exists():
            raise ValidationError(f"Ausgabedatei existiert bereits: {out}")
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        with Session.connect(args.host, args.port, timeout=args.timeout) as session:
            result = acquire(session, request, strict_timebase=args.strict_timebase)
        write_text(out, result, comment=args.comment)
    except (AcquisitionError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    print(result.instrument_id)
    for wf in result.channels:
        print(f"{wf.name} [{wf.units}]: {summarize(wf.samples)}")
    print(f"Wrote: {out} (N={result.point_count})")

    if not (args.plot or args.png):
        return

    import matplotlib.pyplot as plt

    from .viewer import Viewer

    viewer = Viewer(result)
    if args.png:
        try:
            Path(args.png).parent.mkdir(parents=True, exist_ok=True)
            viewer.save(args.png)
            print(f"Wrote PNG: {args.png}")
        except OSError as e:
            print(f"ERROR: Konnte PNG nicht schreiben: {e}", file=sys.stderr)
            sys.exit(2)

    if args.plot:
        plt.show()
