"""
self2gnark.tests helpers

Shared fixtures builders for self2gnark/* tests. Nothing here needs circuit
artifacts: valid Groth16 proofs are synthesized from known trapdoor scalars.

Exports:
- TEST_ROOT
- write_json(path, obj) -> Path
- pack_bytes(buf, bytes_per_element) -> list[str]
- g1_json(P) / g2_json(Q) -> snarkjs coordinate lists
- Groth16Fixture / make_groth16_fixture(public_signals, seed=...)
- captured_proof_doc(fixture, attestation_id, ...) -> dict
- id_card_buffer(...) -> bytes (94-byte TD1 MRZ buffer)
- id_card_signals(...) -> list[str]

Synthesis
---------
With A = a*G1, B = b*G2, alpha1 = al*G1, beta2 = be*G2, gamma2 = ga*G2,
delta2 = de*G2 and IC[i] = k_i*G1, the verification equation holds iff

    a*b = al*be + x*ga + c*de   (mod r),   x = k_0 + sum_i s_i * k_{i+1}

so C = c*G1 with c = (a*b - al*be - x*ga) / de is a valid proof.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from self2gnark.identity import ID_CARD_LAYOUT
from self2gnark.verifiers.pairing_bn254 import (curve_order, g1_generator,
                                                g2_generator, multiply,
                                                normalize_g1, normalize_g2)

TEST_ROOT: Path = Path(__file__).resolve().parent


def write_json(path: Union[str, Path], obj: Any) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(obj, indent=2), encoding="utf-8")
    return p


def pack_bytes(buf: bytes, bytes_per_element: Sequence[int] = ID_CARD_LAYOUT.bytes_per_element) -> List[str]:
    """Pack ``buf`` into decimal-string signals (little-endian, zero padded)."""
    out: List[str] = []
    offset = 0
    for count in bytes_per_element:
        chunk = buf[offset:offset + count].ljust(count, b"\x00")
        out.append(str(int.from_bytes(chunk, "little")))
        offset += count
    return out


def g1_json(P: Any) -> List[str]:
    x, y = normalize_g1(P)
    return [str(x), str(y), "1"]


def g2_json(Q: Any) -> List[List[str]]:
    (x0, x1), (y0, y1) = normalize_g2(Q)
    return [[str(x0), str(x1)], [str(y0), str(y1)], ["1", "0"]]


@dataclass
class Groth16Fixture:
    vk: Dict[str, Any]
    proof: Dict[str, Any]
    public_signals: List[str]
    scalars: Dict[str, int] = field(default_factory=dict)

    def compact_proof(self) -> Dict[str, Any]:
        """The same proof in the identity app's a/b/c shape."""
        return {
            "a": self.proof["pi_a"][:2],
            "b": self.proof["pi_b"][:2],
            "c": self.proof["pi_c"][:2],
            "protocol": "groth16",
            "curve": "bn128",
        }


def make_groth16_fixture(public_signals: Sequence[Union[str, int]], *, seed: int = 7) -> Groth16Fixture:
    r = curve_order()
    G1, G2 = g1_generator(), g2_generator()
    signals = [str(s) for s in public_signals]

    a, b = seed + 11, seed + 13
    al, be, ga, de = seed + 17, seed + 19, seed + 23, seed + 29
    ks = [seed + 101 + 2 * i for i in range(len(signals) + 1)]

    x = ks[0]
    for i, s in enumerate(signals):
        x = (x + int(s) * ks[i + 1]) % r
    c = ((a * b - al * be - x * ga) * pow(de, -1, r)) % r

    vk = {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": len(signals),
        "vk_alpha_1": g1_json(multiply(G1, al)),
        "vk_beta_2": g2_json(multiply(G2, be)),
        "vk_gamma_2": g2_json(multiply(G2, ga)),
        "vk_delta_2": g2_json(multiply(G2, de)),
        "IC": [g1_json(multiply(G1, k)) for k in ks],
    }
    proof = {
        "pi_a": g1_json(multiply(G1, a)),
        "pi_b": g2_json(multiply(G2, b)),
        "pi_c": g1_json(multiply(G1, c)),
        "protocol": "groth16",
        "curve": "bn128",
    }
    return Groth16Fixture(
        vk=vk,
        proof=proof,
        public_signals=signals,
        scalars={"a": a, "b": b, "c": c, "alpha": al, "beta": be, "gamma": ga, "delta": de},
    )


def captured_proof_doc(
    fixture: Groth16Fixture,
    attestation_id: Union[int, str],
    *,
    compact: bool = True,
    proof_id: str = "proof-0001",
    captured_at: str = "2026-01-01T00:00:00Z",
) -> Dict[str, Any]:
    return {
        "attestationId": attestation_id,
        "proof": fixture.compact_proof() if compact else dict(fixture.proof),
        "publicSignals": list(fixture.public_signals),
        "proofId": proof_id,
        "capturedAt": captured_at,
    }


def id_card_buffer(
    *,
    issuing_state: str = "USA",
    dob: str = "900101",
    nationality: str = "USA",
    name: str = "DOE<<JOHN<PAUL",
    older_than: str = "18",
) -> bytes:
    """94-byte buffer with the TD1 fields at their revealed offsets."""
    buf = bytearray(ID_CARD_LAYOUT.total_bytes)
    buf[2:5] = issuing_state.encode("ascii")[:3].ljust(3, b"\x00")
    buf[30:36] = dob.encode("ascii")[:6].ljust(6, b"\x00")
    buf[45:48] = nationality.encode("ascii")[:3].ljust(3, b"\x00")
    buf[60:90] = name.encode("ascii")[:30].ljust(30, b"<")
    buf[90:92] = older_than.encode("ascii")[:2].ljust(2, b"\x00")
    return bytes(buf)


def id_card_signals(extra: Optional[Sequence[str]] = None, **fields: str) -> List[str]:
    """Four packed signals for ``id_card_buffer(**fields)`` plus ``extra``."""
    return pack_bytes(id_card_buffer(**fields), ID_CARD_LAYOUT.bytes_per_element) + list(extra or [])


__all__ = [
    "TEST_ROOT",
    "write_json",
    "pack_bytes",
    "g1_json",
    "g2_json",
    "Groth16Fixture",
    "make_groth16_fixture",
    "captured_proof_doc",
    "id_card_buffer",
    "id_card_signals",
]
