import json

import pytest

from self2gnark.adapters import (CanonicalProof, CompactProof,
                                 load_captured_proof, load_json,
                                 normalize_proof, normalize_proof_json,
                                 parse_attestation_id, parse_public_signals,
                                 parse_raw_proof, parse_vk_info)
from self2gnark.errors import (InputReadFailure, MalformedJSON,
                               UnknownProofFormat)
from self2gnark.tests import write_json

COMPACT = {
    "a": ["11", "12"],
    "b": [["21", "22"], ["23", "24"]],
    "c": ["31", "32"],
    "protocol": "groth16",
    "curve": "bn128",
}

CANONICAL = {
    "pi_a": ["11", "12", "1"],
    "pi_b": [["21", "22"], ["23", "24"], ["1", "0"]],
    "pi_c": ["31", "32", "1"],
    "protocol": "groth16",
}


def test_compact_is_detected_and_extended():
    raw = parse_raw_proof(COMPACT)
    assert isinstance(raw, CompactProof)

    canon = normalize_proof(raw)
    assert canon.pi_a == COMPACT["a"] + ["1"]
    assert canon.pi_c == COMPACT["c"] + ["1"]
    assert canon.pi_b == COMPACT["b"] + [["1", "0"]]
    # original rows keep their order, the identity row goes last
    assert canon.pi_b[0] == ["21", "22"]
    assert canon.pi_b[1] == ["23", "24"]
    assert canon.protocol == "groth16"


def test_normalize_does_not_mutate_input():
    before = json.loads(json.dumps(COMPACT))
    normalize_proof_json(COMPACT)
    assert COMPACT == before


def test_canonical_passes_through_unchanged():
    canon = normalize_proof_json(CANONICAL)
    assert isinstance(canon, CanonicalProof)
    assert canon.pi_a == CANONICAL["pi_a"]
    assert canon.pi_b == CANONICAL["pi_b"]
    assert canon.pi_c == CANONICAL["pi_c"]


def test_normalize_is_idempotent():
    once = normalize_proof_json(COMPACT)
    twice = normalize_proof_json(once.to_json())
    assert twice == once
    assert twice.to_json() == once.to_json()


def test_canonical_wins_when_both_groups_present():
    both = dict(COMPACT)
    both.update(CANONICAL)
    raw = parse_raw_proof(both)
    assert isinstance(raw, CanonicalProof)
    assert normalize_proof(raw).pi_a == CANONICAL["pi_a"]


def test_empty_canonical_group_falls_back_to_compact():
    obj = dict(COMPACT)
    obj["pi_a"] = []
    assert isinstance(parse_raw_proof(obj), CompactProof)


@pytest.mark.parametrize("obj", [{}, {"protocol": "groth16"}, {"a": [], "pi_a": []}])
def test_unknown_format(obj):
    with pytest.raises(UnknownProofFormat):
        parse_raw_proof(obj)


def test_detection_is_logged(caplog):
    caplog.set_level("INFO", logger="self2gnark")
    normalize_proof_json(COMPACT)
    assert "Self Protocol format" in caplog.text
    caplog.clear()
    normalize_proof_json(CANONICAL)
    assert "snarkjs format" in caplog.text


def test_non_numeric_scalar_is_malformed():
    bad = dict(COMPACT)
    bad["a"] = [{"x": 1}, "12"]
    with pytest.raises(MalformedJSON):
        parse_raw_proof(bad)


def test_public_signals_accept_ints_and_strings():
    assert parse_public_signals(["1", 2, "3"]) == ["1", "2", "3"]
    with pytest.raises(MalformedJSON):
        parse_public_signals({"0": "1"})


def test_vk_info():
    info = parse_vk_info({"curve": "bn128", "nPublic": 2, "IC": [[], [], []], "protocol": "groth16"})
    assert (info.curve, info.n_public, info.ic_count, info.protocol) == ("bn128", 2, 3, "groth16")
    with pytest.raises(MalformedJSON):
        parse_vk_info({"curve": "bn128", "nPublic": "2", "IC": []})
    with pytest.raises(MalformedJSON):
        parse_vk_info({"curve": "bn128", "nPublic": 2})
    with pytest.raises(MalformedJSON):
        parse_vk_info([])


@pytest.mark.parametrize("raw,expected", [(2, 2), ("3", 3), (" 1 ", 1), ("passport", 0), (None, 0), (True, 0)])
def test_attestation_id(raw, expected):
    assert parse_attestation_id(raw) == expected


def test_load_captured_proof(tmp_path):
    p = write_json(
        tmp_path / "proofs" / "abc.json",
        {
            "attestationId": "2",
            "proof": COMPACT,
            "publicSignals": ["1", "2"],
            "proofId": "abc",
            "capturedAt": "2026-01-01T00:00:00Z",
        },
    )
    cap = load_captured_proof(p)
    assert cap.attestation_id == 2
    assert cap.public_signals == ["1", "2"]
    assert cap.proof_id == "abc"
    assert cap.captured_at == "2026-01-01T00:00:00Z"
    assert cap.path == p


def test_captured_proof_requires_signals(tmp_path):
    p = write_json(tmp_path / "x.json", {"attestationId": 1, "proof": COMPACT})
    with pytest.raises(MalformedJSON):
        load_captured_proof(p)


def test_missing_file_is_input_read_failure(tmp_path):
    with pytest.raises(InputReadFailure):
        load_json(tmp_path / "nope.json")


def test_invalid_json_is_malformed(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(MalformedJSON):
        load_json(p)
