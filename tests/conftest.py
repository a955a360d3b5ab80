"""Fake-Oszilloskop als TCP-Server auf localhost.

Beantwortet die Befehle, die die Erfassung sendet, aus vorgegebenen
Antworten je Kanal und protokolliert alle empfangenen Befehle.
"""

from __future__ import annotations

import re
import socketserver
import threading
from dataclasses import dataclass, field

import pytest

IDN = "KEYSIGHT TECHNOLOGIES,DSO-X 3034T,MY00000000,07.50"
PREAMBLE_1000 = "4,1,1000,1,2.0e-9,-1.0e-6,500,0.004,0.0,0"


def envelope(payload: bytes, n_digits: int | None = None) -> bytes:
    n_digits = n_digits or len(str(len(payload)))
    return b"#" + str(n_digits).encode() + str(len(payload)).zfill(n_digits).encode() + payload


@dataclass
class FakeChannel:
    units: str
    preamble: str
    block: bytes


@dataclass
class FakeInstrument:
    channels: dict[int, FakeChannel] = field(default_factory=dict)
    idn: str = IDN
    commands: list[str] = field(default_factory=list)
    connections: int = 0
    source: int | None = None

    def respond(self, cmd: str) -> bytes | None:
        self.commands.append(cmd)
        if cmd == "*IDN?":
            return self.idn.encode() + b"\n"
        m = re.fullmatch(r":CHANnel(\d+):UNITs\?", cmd)
        if m:
            return self.channels[int(m.group(1))].units.encode() + b"\n"
        m = re.fullmatch(r"WAVEFORM:SOURCE CHANNEL(\d+)", cmd)
        if m:
            self.source = int(m.group(1))
            return None
        if cmd == "WAVEFORM:PREAMBLE?":
            return self.channels[self.source].preamble.encode() + b"\n"
        if cmd == "WAVEFORM:DATA?":
            return self.channels[self.source].block + b"\n"
        return None


class _Handler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        instrument: FakeInstrument = self.server.instrument  # type: ignore[attr-defined]
        instrument.connections += 1
        for raw in self.rfile:
            reply = instrument.respond(raw.decode("ascii").strip())
            if reply is not None:
                self.wfile.write(reply)
                self.wfile.flush()


class _Server(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True


@pytest.fixture
def instrument():
    inst = FakeInstrument()
    server = _Server(("127.0.0.1", 0), _Handler)
    server.instrument = inst  # type: ignore[attr-defined]
    t = threading.Thread(target=server.serve_forever, daemon=True)
    t.start()
    inst.address = server.server_address  # type: ignore[attr-defined]
    try:
        yield inst
    finally:
        server.shutdown()
        server.server_close()
