from __future__ import annotations

import logging

from .errors import FramingError
from .transport import TERMINATOR, Session
from .types import BlockPayload

logger = logging.getLogger(__name__)

AWAITING_HEADER = "awaiting_header"
AWAITING_PAYLOAD = "awaiting_payload"
COMPLETE = "complete"

TRAILERS = (TERMINATOR, b"\r" + TERMINATOR)


class BlockDecoder:
    """Parst einen Datenblock ``#<L><B...><payload>`` stückweise.

    ``feed()`` nimmt beliebig zerteilte Daten entgegen (auch Header und
    Payload in einem Stück) und liefert den ``BlockPayload``, sobald genau
    ``B`` Bytes da sind. Innerhalb der Payload wird nur nach Länge
    geschnitten, nie nach Zeilenende.
    """

    def __init__(self) -> None:
        self.buf = bytearray()
        self.state = AWAITING_HEADER
        self.n_digits: int | None = None
        self.length: int | None = None
        self.trailer = b""
        self.terminated = False

    @property
    def remaining(self) -> int:
        """Anzahl Bytes, die als nächstes gelesen werden sollen."""

        if self.state == AWAITING_HEADER:
            if self.n_digits is None:
                return 2 - len(self.buf)
            return 2 + self.n_digits - len(self.buf)
        if self.state == AWAITING_PAYLOAD:
            assert self.length is not None
            return self.length - len(self.buf)
        return 0

    def feed(self, data: bytes) -> BlockPayload | None:
        if self.state == COMPLETE:
            self._accept_trailer(bytes(data))
            return None

        self.buf += data

        if self.state == AWAITING_HEADER and not self._parse_header():
            return None

        assert self.length is not None
        if len(self.buf) < self.length:
            return None

        payload = bytes(self.buf[: self.length])
        extra = bytes(self.buf[self.length :])
        self.buf = bytearray()
        self.state = COMPLETE
        self._accept_trailer(extra)
        return BlockPayload(declared_length=self.length, data=payload)

    def _parse_header(self) -> bool:
        if self.buf[:1] not in (b"", b"#"):
            raise FramingError(f"Datenblock beginnt nicht mit '#': {bytes(self.buf[:8])!r}")
        if len(self.buf) < 2:
            return False

        if self.n_digits is None:
            digit = self.buf[1:2]
            if not digit.isdigit() or digit == b"0":
                raise FramingError(f"Ungültige Längenangabe im Block-Header: {bytes(digit)!r}")
            self.n_digits = int(digit)

        end = 2 + self.n_digits
        if len(self.buf) < end:
            return False

        field = bytes(self.buf[2:end])
        if not field.isdigit():
            raise FramingError(f"Ungültiges Längenfeld im Block-Header: {field!r}")
        self.length = int(field)
        self.buf = self.buf[end:]
        self.state = AWAITING_PAYLOAD
        logger.debug("Block-Header: %d Längenziffern, %d Bytes Payload", self.n_digits, self.length)
        return True

    def _accept_trailer(self, extra: bytes) -> None:
        # Nach der Payload darf höchstens ein Zeilenende (\n oder \r\n) folgen.
        if not extra:
            return
        trailer = self.trailer + extra
        if self.terminated or not any(t.startswith(trailer) for t in TRAILERS):
            raise FramingError(
                f"Mehr Daten als deklariert ({self.length} Bytes): {extra[:16]!r}"
            )
        self.trailer = trailer
        self.terminated = trailer in TRAILERS


def read_block(session: Session) -> BlockPayload:
    """Liest einen vollständigen Datenblock samt abschließendem Zeilenende.

    Das Zeilenende ist hier Pflicht; fehlt es, läuft ``read_exact`` in den
    Timeout (``TransportError``).
    """

    decoder = BlockDecoder()
    block = None
    while block is None:
        block = decoder.feed(session.read_exact(decoder.remaining))
    while not decoder.terminated:
        decoder.feed(session.read_exact(1))
    return block
