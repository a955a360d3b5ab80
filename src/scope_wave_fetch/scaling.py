from __future__ import annotations

import struct
from collections.abc import Iterable

from .errors import AlignmentError
from .types import BlockPayload, Preamble


def unpack_words(payload: BlockPayload) -> list[int]:
    """16-Bit-Worte, vorzeichenlos, MSB zuerst."""

    if len(payload.data) % 2:
        raise AlignmentError(
            f"Payload-Länge {len(payload.data)} ist ungerade, keine 16-Bit-Worte möglich."
        )
    return [w for (w,) in struct.iter_unpack(">H", payload.data)]


def scale_words(
    words: Iterable[int], y_increment: float, y_reference: float, y_origin: float
) -> list[float]:
    return [y_increment * (w - y_reference) + y_origin for w in words]


def scale_block(payload: BlockPayload, preamble: Preamble) -> list[float]:
    return scale_words(
        unpack_words(payload), preamble.y_increment, preamble.y_reference, preamble.y_origin
    )
