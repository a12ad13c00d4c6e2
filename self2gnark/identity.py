"""
Decode identity attributes packed into disclosure-proof public signals.

The disclosure circuits reveal MRZ bytes by packing them into the first
public signals: element ``i`` carries ``bytes_per_element[i]`` bytes,
little-endian, so byte ``j`` of element ``i`` is
``(element >> (8 * j)) & 0xFF``. Bytes of consecutive elements are
concatenated and the fields are read from fixed offsets.

Two layouts are known:

- ``ID_CARD_LAYOUT`` (TD1 MRZ, 4 elements of [31, 31, 31, 1] bytes). This is
  the default for every attestation kind.
- ``PASSPORT_LAYOUT`` (TD3 MRZ, 3 elements of [31, 31, 31] bytes).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from .errors import MalformedJSON
from .registry import AttestationKind

log = logging.getLogger(__name__)

FIELD_ISSUING_STATE = "issuing_state"
FIELD_DOB = "dob"
FIELD_NATIONALITY = "nationality"
FIELD_SURNAME = "surname"
FIELD_GIVEN_NAME = "given_name"
FIELD_OLDER_THAN = "older_than"

_PAD = "\x00 "


@dataclass(frozen=True)
class SignalLayout:
    """Byte packing of revealed MRZ data and where each field sits in it."""

    name: str
    bytes_per_element: Tuple[int, ...]
    min_bytes: int
    fields: Tuple[Tuple[str, int, int], ...]
    name_range: Tuple[int, int]

    @property
    def total_bytes(self) -> int:
        return sum(self.bytes_per_element)


ID_CARD_LAYOUT = SignalLayout(
    name="id-card",
    bytes_per_element=(31, 31, 31, 1),
    min_bytes=92,
    fields=(
        (FIELD_ISSUING_STATE, 2, 5),
        (FIELD_DOB, 30, 36),
        (FIELD_NATIONALITY, 45, 48),
        (FIELD_OLDER_THAN, 90, 92),
    ),
    name_range=(60, 90),
)

PASSPORT_LAYOUT = SignalLayout(
    name="passport",
    bytes_per_element=(31, 31, 31),
    min_bytes=90,
    fields=(
        (FIELD_ISSUING_STATE, 2, 5),
        (FIELD_NATIONALITY, 54, 57),
        (FIELD_DOB, 57, 63),
        (FIELD_OLDER_THAN, 88, 90),
    ),
    name_range=(5, 44),
)

LAYOUTS: Mapping[str, SignalLayout] = {
    ID_CARD_LAYOUT.name: ID_CARD_LAYOUT,
    PASSPORT_LAYOUT.name: PASSPORT_LAYOUT,
}


def layout_for(attestation_id: int) -> SignalLayout:
    """Passport proofs use the TD3 layout; every other kind the TD1 one."""
    if attestation_id == AttestationKind.E_PASSPORT:
        return PASSPORT_LAYOUT
    return ID_CARD_LAYOUT


def _element(value: Union[str, int], index: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        n = value
    else:
        try:
            n = int(str(value).strip(), 10)
        except ValueError as e:
            raise MalformedJSON(
                f"public signal {index} is not a decimal integer", field_name=f"publicSignals[{index}]", cause=e
            ) from e
    if n < 0:
        raise MalformedJSON(f"public signal {index} is negative", field_name=f"publicSignals[{index}]")
    return n


def unpack_bytes(
    signals: Sequence[Union[str, int]],
    bytes_per_element: Sequence[int] = ID_CARD_LAYOUT.bytes_per_element,
) -> bytes:
    """
    Concatenate the little-endian low bytes of the leading signals.

    Only ``min(len(bytes_per_element), len(signals))`` elements are read;
    bits above the requested width are dropped.
    """
    out = bytearray()
    for i in range(min(len(bytes_per_element), len(signals))):
        count = bytes_per_element[i]
        n = _element(signals[i], i)
        mask = (1 << (8 * count)) - 1
        out += (n & mask).to_bytes(count, "little")
    return bytes(out)


def _text(raw: bytes) -> str:
    # MRZ bytes are ASCII; anything else is kept 1:1
    return raw.decode("latin-1")


def split_name(raw: str) -> Tuple[str, Optional[str]]:
    """
    Split an MRZ name field ``SURNAME<<GIVEN<NAMES<<<`` into
    (surname, given names) with filler removed.
    """
    trimmed = raw.rstrip("\x00 <")
    parts = trimmed.split("<<", 1)
    surname = parts[0].rstrip("<")
    if len(parts) > 1:
        return surname, parts[1].rstrip("<").replace("<", " ")
    return surname, None


def decode_buffer(buf: bytes, layout: SignalLayout = ID_CARD_LAYOUT) -> Dict[str, str]:
    """Extract the layout's fields from an unpacked byte buffer."""
    if len(buf) < layout.min_bytes:
        return {}
    result: Dict[str, str] = {}
    for name, start, end in layout.fields:
        result[name] = _text(buf[start:end]).rstrip(_PAD)
    start, end = layout.name_range
    surname, given = split_name(_text(buf[start:end]))
    result[FIELD_SURNAME] = surname
    if given is not None:
        result[FIELD_GIVEN_NAME] = given
    return result


def decode_identity(
    signals: Sequence[Union[str, int]],
    layout: SignalLayout = ID_CARD_LAYOUT,
) -> Dict[str, str]:
    """
    Decode identity fields from public signals.

    Fewer signals than the layout has elements, or too few bytes to reach
    ``layout.min_bytes``, yields an empty mapping.
    """
    if len(signals) < len(layout.bytes_per_element):
        log.debug("Only %d signals; layout %s needs %d", len(signals), layout.name, len(layout.bytes_per_element))
        return {}
    buf = unpack_bytes(signals, layout.bytes_per_element)
    log.debug("Decoded %d bytes from public signals (layout=%s)", len(buf), layout.name)
    return decode_buffer(buf, layout)


__all__ = [
    "SignalLayout",
    "ID_CARD_LAYOUT",
    "PASSPORT_LAYOUT",
    "LAYOUTS",
    "layout_for",
    "unpack_bytes",
    "split_name",
    "decode_buffer",
    "decode_identity",
    "FIELD_ISSUING_STATE",
    "FIELD_DOB",
    "FIELD_NATIONALITY",
    "FIELD_SURNAME",
    "FIELD_GIVEN_NAME",
    "FIELD_OLDER_THAN",
]
