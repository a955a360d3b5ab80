from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .block import read_block
from .errors import ChannelMismatchError, ValidationError
from .preamble import parse_preamble
from .scaling import scale_block
from .transport import Session
from .types import AcquisitionResult, ChannelWaveform, Preamble

logger = logging.getLogger(__name__)

POINT_CHOICES = (
    100, 250, 500, 1000, 2000, 5000, 10000, 20000, 50000,
    100000, 200000, 500000, 1000000, 2000000, 4000000, 8000000,
)
MAX_POINTS = "MAX"


def parse_points(value: str | int) -> int | str:
    """Wandelt eine Punktanzahl (oder ``MAX``) um und prüft sie gegen die erlaubten Werte."""

    if isinstance(value, str):
        text = value.strip()
        if text.upper() == MAX_POINTS:
            return MAX_POINTS
        try:
            value = int(text)
        except ValueError as e:
            raise ValidationError(f"Ungültige Punktanzahl: {text!r}") from e
    if value not in POINT_CHOICES:
        allowed = ", ".join(str(p) for p in POINT_CHOICES)
        raise ValidationError(f"Punktanzahl {value} nicht erlaubt (erlaubt: {allowed}, {MAX_POINTS})")
    return value


@dataclass(slots=True)
class AcquisitionRequest:
    channels: list[int]
    names: list[str] = field(default_factory=list)
    points: int | str = MAX_POINTS

    def validate(self) -> AcquisitionRequest:
        if not self.channels:
            raise ValidationError("Mindestens ein Kanal muss angegeben werden.")
        for ch in self.channels:
            if ch < 1:
                raise ValidationError(f"Ungültige Kanalnummer: {ch}")
        if len(set(self.channels)) != len(self.channels):
            raise ValidationError(f"Kanal mehrfach angegeben: {self.channels}")
        if not self.names:
            self.names = [f"CH{ch}" for ch in self.channels]
        if len(self.names) != len(self.channels):
            raise ValidationError(
                f"{len(self.names)} Namen für {len(self.channels)} Kanäle angegeben."
            )
        self.points = parse_points(self.points)
        return self


def configure_waveform(session: Session, points: int | str) -> None:
    session.send_command("WAVeform:POINts:MODE RAW")
    session.send_command("WAVEFORM:FORMAT WORD")
    session.send_command("WAVEFORM:BYTEORDER MSBFirst")
    session.send_command(f"WAVEFORM:POINTS {points}")


def acquire_channel(session: Session, channel: int, name: str) -> tuple[ChannelWaveform, Preamble]:
    units = session.query(f":CHANnel{channel}:UNITs?").strip()
    session.send_command(f"WAVEFORM:SOURCE CHANNEL{channel}")
    preamble = parse_preamble(session.query("WAVEFORM:PREAMBLE?"))

    session.send_command("WAVEFORM:DATA?")
    samples = scale_block(read_block(session), preamble)

    if len(samples) != preamble.point_count:
        logger.warning(
            "Kanal %d: %d Samples empfangen, Preamble meldet %d",
            channel, len(samples), preamble.point_count,
        )
    logger.info("Kanal %d (%s): %d Samples [%s]", channel, name, len(samples), units)
    return ChannelWaveform(channel=channel, name=name, units=units, samples=samples), preamble


def _same_timebase(a: Preamble, b: Preamble) -> bool:
    return (a.x_increment, a.x_origin, a.x_reference) == (b.x_increment, b.x_origin, b.x_reference)


def acquire(session: Session, request: AcquisitionRequest, strict_timebase: bool = False) -> AcquisitionResult:
    """Holt alle angeforderten Kanäle nacheinander über eine Sitzung.

    Die Zeitbasis des ersten Kanals gilt für alle Kanäle. Weicht ein späterer
    Kanal davon ab, wird gewarnt (oder mit ``strict_timebase`` abgebrochen).
    Ungleiche Sample-Anzahlen führen immer zu ``ChannelMismatchError``.
    """

    request.validate()
    result = AcquisitionResult(instrument_id=session.query("*IDN?").strip())
    configure_waveform(session, request.points)

    first: Preamble | None = None
    for channel, name in zip(request.channels, request.names, strict=True):
        waveform, preamble = acquire_channel(session, channel, name)
        if first is None:
            first = preamble
            result.time_increment = preamble.x_increment
            result.time_origin = preamble.x_origin
            result.time_reference = preamble.x_reference
        elif not _same_timebase(first, preamble):
            msg = f"Kanal {channel}: Zeitbasis weicht vom ersten Kanal ab"
            if strict_timebase:
                raise ChannelMismatchError(msg)
            logger.warning(msg)
        result.channels.append(waveform)

    counts = {wf.channel: len(wf.samples) for wf in result.channels}
    if len(set(counts.values())) > 1:
        raise ChannelMismatchError(f"Unterschiedliche Sample-Anzahl je Kanal: {counts}", counts=counts)

    return result
