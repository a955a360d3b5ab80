from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from pathlib import Path

import pytest

from scope_wave_fetch.io import default_output_path, write_text
from scope_wave_fetch.types import AcquisitionResult, ChannelWaveform

TS = datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)


def _result() -> AcquisitionResult:
    return AcquisitionResult(
        instrument_id="ACME,SCOPE,1,1.0",
        channels=[
            ChannelWaveform(1, "U", "VOLT", [1.0, 2.0, 3.0]),
            ChannelWaveform(3, "I", "AMP", [-0.5, 0.0, 0.5]),
        ],
        time_increment=1e-6,
        time_origin=-1e-6,
        time_reference=1.0,
    )


def test_time_axis():
    assert _result().time_axis() == [
        (0 - 1.0) * 1e-6 + -1e-6,
        (1 - 1.0) * 1e-6 + -1e-6,
        (2 - 1.0) * 1e-6 + -1e-6,
    ]


def test_write_text(tmp_path: Path):
    out = tmp_path / "sub" / "wave.txt"
    write_text(out, _result(), comment="Testlauf", timestamp=TS)
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[:7] == [
        "ACME,SCOPE,1,1.0",
        str(out),
        "2024-05-17T12:30:00+00:00",
        "1 3",
        "int second VOLT AMP",
        "Testlauf",
        "n t U I",
    ]
    assert lines[7] == "1 -2.000000e-06 1.000000e+00 -5.000000e-01"
    assert lines[9].startswith("3 0.000000e+00 ")
    assert len(lines) == 10
    assert [p.name for p in out.parent.iterdir()] == ["wave.txt"]


def test_write_text_without_comment(tmp_path: Path):
    out = tmp_path / "wave.txt"
    write_text(out, _result(), timestamp=TS)
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[5] == "n t U I"


def test_write_text_refuses_existing(tmp_path: Path):
    out = tmp_path / "wave.txt"
    out.write_text("alt")
    with pytest.raises(FileExistsError):
        write_text(out, _result())
    assert out.read_text() == "alt"


def test_default_output_path():
    p = default_output_path(Path("data"), datetime(2024, 1, 2, 3, 4, 5))
    assert p == Path("data") / "waveform_20240102_030405.txt"


@pytest.mark.skipif(os.name != "posix", reason="Dateirechte nur unter POSIX")
def test_write_text_follows_umask(tmp_path: Path):
    old = os.umask(0o022)
    try:
        out = tmp_path / "wave.txt"
        write_text(out, _result(), timestamp=TS)
    finally:
        os.umask(old)
    assert stat.S_IMODE(out.stat().st_mode) == 0o644
