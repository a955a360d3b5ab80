from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class Preamble:
    """Kalibrierdaten einer Kanal-Erfassung (Antwort auf WAVEFORM:PREAMBLE?)."""

    format: int
    type: int
    point_count: int
    waveform_count: int
    x_increment: float
    x_origin: float
    x_reference: float
    y_increment: float
    y_origin: float
    y_reference: float


@dataclass(slots=True, frozen=True)
class BlockPayload:
    declared_length: int
    data: bytes


@dataclass(slots=True, frozen=True)
class ChannelWaveform:
    channel: int
    name: str
    units: str
    samples: list[float]


@dataclass(slots=True)
class AcquisitionResult:
    """Alle Kanäle einer Erfassung; die Zeitbasis stammt vom ersten Kanal."""

    instrument_id: str
    channels: list[ChannelWaveform] = field(default_factory=list)
    time_increment: float = 0.0
    time_origin: float = 0.0
    time_reference: float = 0.0

    @property
    def point_count(self) -> int:
        if not self.channels:
            return 0
        return len(self.channels[0].samples)

    def time_axis(self) -> list[float]:
        return [
            (i - self.time_reference) * self.time_increment + self.time_origin
            for i in range(self.point_count)
        ]
