import pytest

from self2gnark.errors import MalformedJSON
from self2gnark.identity import (ID_CARD_LAYOUT, PASSPORT_LAYOUT,
                                 decode_buffer, decode_identity, layout_for,
                                 split_name, unpack_bytes)
from self2gnark.registry import AttestationKind
from self2gnark.tests import id_card_buffer, id_card_signals, pack_bytes


def test_issuing_state_usa():
    buf = bytearray(94)
    buf[2:5] = b"USA"
    signals = pack_bytes(bytes(buf))
    assert len(signals) == 4
    assert decode_identity(signals)["issuing_state"] == "USA"


def test_all_fields_round_trip():
    signals = id_card_signals(
        issuing_state="D", dob="850315", nationality="DEU", name="MUSTERMANN<<ERIKA<ANNA", older_than="21"
    )
    assert decode_identity(signals) == {
        "issuing_state": "D",
        "dob": "850315",
        "nationality": "DEU",
        "surname": "MUSTERMANN",
        "given_name": "ERIKA ANNA",
        "older_than": "21",
    }


def test_signals_past_the_layout_are_ignored():
    base = id_card_signals()
    extended = id_card_signals(extra=["12345", "999999999999"])
    assert decode_identity(extended) == decode_identity(base)


def test_three_signals_yield_empty_mapping():
    signals = id_card_signals()[:3]
    assert decode_identity(signals) == {}


def test_no_signals_yield_empty_mapping():
    assert decode_identity([]) == {}


def test_decoding_is_deterministic():
    signals = id_card_signals(name="SMITH<<JANE")
    assert decode_identity(signals) == decode_identity(list(signals))


def test_unpack_keeps_only_low_bytes():
    # 0x0102 in a 1-byte slot keeps 0x02
    assert unpack_bytes(["258"], [1]) == b"\x02"
    assert unpack_bytes([0x030201], [3]) == b"\x01\x02\x03"


def test_unpack_rejects_non_decimal():
    with pytest.raises(MalformedJSON):
        unpack_bytes(["0xzz"], [31])
    with pytest.raises(MalformedJSON):
        unpack_bytes(["-1"], [31])


def test_pack_unpack_buffer():
    buf = id_card_buffer()
    assert unpack_bytes(pack_bytes(buf)) == buf


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("DOE<<JOHN<PAUL<<<<<", ("DOE", "JOHN PAUL")),
        ("DOE<<<<<<<<", ("DOE", None)),
        ("VAN<DER<BERG<<ANNA", ("VAN<DER<BERG", "ANNA")),
        ("SMITH<<JANE\x00\x00  ", ("SMITH", "JANE")),
        ("", ("", None)),
    ],
)
def test_split_name(raw, expected):
    assert split_name(raw) == expected


def test_name_without_given_names_has_no_given_key():
    out = decode_identity(id_card_signals(name="DOE"))
    assert out["surname"] == "DOE"
    assert "given_name" not in out


def test_trailing_padding_is_trimmed():
    out = decode_identity(id_card_signals(issuing_state="D", older_than="0"))
    assert out["issuing_state"] == "D"
    assert out["older_than"] == "0"


def test_short_buffer_gate():
    assert decode_buffer(b"\x00" * 91, ID_CARD_LAYOUT) == {}
    assert decode_buffer(id_card_buffer()[:92], ID_CARD_LAYOUT)["older_than"] == "18"


def test_passport_layout():
    buf = bytearray(93)
    buf[2:5] = b"UTO"
    name = b"ERIKSSON<<ANNA<MARIA"
    buf[5:44] = name.ljust(39, b"<")
    buf[54:57] = b"UTO"
    buf[57:63] = b"740812"
    buf[88:90] = b"18"
    signals = pack_bytes(bytes(buf), PASSPORT_LAYOUT.bytes_per_element)
    assert decode_identity(signals, PASSPORT_LAYOUT) == {
        "issuing_state": "UTO",
        "nationality": "UTO",
        "dob": "740812",
        "surname": "ERIKSSON",
        "given_name": "ANNA MARIA",
        "older_than": "18",
    }


def test_layout_for_kind():
    assert layout_for(AttestationKind.E_PASSPORT) is PASSPORT_LAYOUT
    assert layout_for(AttestationKind.EU_ID_CARD) is ID_CARD_LAYOUT
    assert layout_for(AttestationKind.AADHAAR) is ID_CARD_LAYOUT
    assert ID_CARD_LAYOUT.total_bytes == 94
