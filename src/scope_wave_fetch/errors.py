"""
Fehlerklassen für die Waveform-Erfassung.

Alle Fehler sind fatal für die laufende Erfassung; es gibt keine
Wiederholversuche. Gemeinsame Basis ist ``AcquisitionError``.
"""

from __future__ import annotations


class AcquisitionError(Exception):
    """Basis aller Fehler dieses Pakets."""


class InstrumentConnectionError(AcquisitionError, ConnectionError):
    """Verbindung zum Gerät konnte nicht aufgebaut werden.

    Attributes:
        url: Verbindungs-URL (z.B. ``socket://scope:5025``)
        original_error: Auslösende Exception der Transportschicht
    """

    def __init__(self, message: str, url: str | None = None, original_error: Exception | None = None):
        super().__init__(message)
        self.url = url
        self.original_error = original_error


class TransportError(AcquisitionError):
    """Lese-/Schreibfehler oder Timeout während einer laufenden Sitzung."""

    def __init__(self, message: str, operation: str | None = None, original_error: Exception | None = None):
        super().__init__(message)
        self.operation = operation
        self.original_error = original_error


class FramingError(AcquisitionError):
    """Block-Header ungültig oder mehr Daten als deklariert (Protokoll-Desync)."""


class MalformedPreambleError(AcquisitionError):
    """Preamble-Zeile nicht auswertbar."""

    def __init__(self, message: str, line: str | None = None):
        super().__init__(message)
        self.line = line


class AlignmentError(AcquisitionError):
    """Payload-Länge ist ungerade und lässt sich nicht in 16-Bit-Worte teilen."""


class ChannelMismatchError(AcquisitionError):
    """Kanäle einer Erfassung sind nicht zueinander konsistent.

    Attributes:
        counts: Anzahl Samples je Kanalnummer
    """

    def __init__(self, message: str, counts: dict[int, int] | None = None):
        super().__init__(message)
        self.counts = counts or {}


class ValidationError(AcquisitionError, ValueError):
    """Ungültige Anfrage; wird vor jeglichem Netzwerkzugriff gemeldet."""
