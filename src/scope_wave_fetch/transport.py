from __future__ import annotations

import logging

import serial

from .errors import InstrumentConnectionError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5025
DEFAULT_TIMEOUT = 10.0
TERMINATOR = b"\n"
CHUNK_SIZE = 65536


class Session:
    """Eine Text+Binär-Verbindung zum Gerät, strikt Befehl → Antwort.

    Läuft über pyserial, TCP über den ``socket://``-URL-Handler. Der Timeout
    gilt für jeden einzelnen Lesevorgang; ein hängendes Gerät führt daher zu
    ``TransportError`` und nicht zu einem Hänger.
    """

    def __init__(self, port: serial.SerialBase, url: str = "") -> None:
        self.port = port
        self.url = url

    @classmethod
    def connect(cls, host: str, port: int = DEFAULT_PORT, timeout: float = DEFAULT_TIMEOUT) -> Session:
        return cls.from_url(f"socket://{host}:{port}", timeout=timeout)

    @classmethod
    def from_url(cls, url: str, timeout: float = DEFAULT_TIMEOUT) -> Session:
        logger.debug("Öffne %s (timeout=%.1fs)", url, timeout)
        try:
            port = serial.serial_for_url(url, timeout=timeout)
        except (serial.SerialException, ValueError) as e:
            raise InstrumentConnectionError(
                f"Keine Verbindung zu {url}: {e}", url=url, original_error=e
            ) from e
        return cls(port, url=url)

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self.port.is_open:
            logger.debug("Schließe %s", self.url)
            self.port.close()

    def send_command(self, text: str) -> None:
        logger.debug("-> %s", text)
        try:
            self.port.write(text.encode("ascii") + TERMINATOR)
            self.port.flush()
        except serial.SerialException as e:
            raise TransportError(f"Senden von {text!r} fehlgeschlagen: {e}", "write", e) from e

    def read_line(self) -> str:
        try:
            raw = self.port.read_until(TERMINATOR)
        except serial.SerialException as e:
            raise TransportError(f"Lesen fehlgeschlagen: {e}", "read_line", e) from e
        if not raw.endswith(TERMINATOR):
            raise TransportError(
                f"Timeout: keine vollständige Antwortzeile erhalten ({len(raw)} Bytes).", "read_line"
            )
        line = raw[: -len(TERMINATOR)].decode("ascii", errors="replace").rstrip("\r")
        logger.debug("<- %s", line)
        return line

    def read_exact(self, n: int) -> bytes:
        """Liest genau ``n`` Bytes, in so vielen Teilstücken wie nötig."""

        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = self.port.read(min(CHUNK_SIZE, n - len(buf)))
            except serial.SerialException as e:
                raise TransportError(f"Lesen fehlgeschlagen: {e}", "read_exact", e) from e
            if not chunk:
                raise TransportError(
                    f"Timeout: nur {len(buf)} von {n} Bytes vom Gerät erhalten.", "read_exact"
                )
            buf += chunk
        return bytes(buf)

    def query(self, text: str) -> str:
        self.send_command(text)
        return self.read_line()
