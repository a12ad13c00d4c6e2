"""
self2gnark.adapters.self_loader
===============================

Helpers to **load and normalize** the JSON artifacts handed to the verifier:

- captured proofs saved by the identity app
  (``{attestationId, proof, publicSignals, proofId, capturedAt}``)
- standalone snarkjs ``proof.json`` / ``public.json`` / verification keys

This module does **not** verify proofs; it parses files/JSON, detects which
of the two proof wire shapes is in use and converts it into the canonical
(snarkjs) shape the verifier consumes.

Proof wire shapes
-----------------
Compact (what the identity protocol sends; no projective coordinate):
{
  "a": [ "x", "y" ],
  "b": [[ "x0","x1" ], [ "y0","y1" ]],
  "c": [ "x", "y" ],
  "protocol": "groth16",
  "curve": "bn128"
}

Canonical (snarkjs):
{
  "pi_a": [ "x", "y", "1" ],
  "pi_b": [[ "x0","x1" ], [ "y0","y1" ], [ "1","0" ]],
  "pi_c": [ "x", "y", "1" ],
  "protocol": "groth16"
}

When both groups are present the canonical one wins.

Exports
-------
- load_json(path, what=...) -> Any
- CompactProof / CanonicalProof (RawProof = either)
- parse_raw_proof(obj) -> RawProof
- normalize_proof(raw) -> CanonicalProof
- parse_public_signals(obj) -> list[str]
- VerificationKeyInfo / parse_vk_info(obj)
- CapturedProof / load_captured_proof(path)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

from ..errors import InputReadFailure, MalformedJSON, UnknownProofFormat

log = logging.getLogger(__name__)

# Projective identity appended to compact points.
G1_PROJECTIVE_ONE: List[str] = ["1"]
G2_PROJECTIVE_ONE: List[str] = ["1", "0"]


# -----------------------------------------------------------------------------
# I/O helpers
# -----------------------------------------------------------------------------

def load_json(path: Union[str, Path], *, what: str = "input") -> Any:
    """
    Read and parse a JSON file.

    Raises InputReadFailure when the file cannot be read and MalformedJSON
    when its content is not JSON.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadFailure(f"failed to read {what}", path=str(p), cause=e) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedJSON(f"failed to parse {what} JSON: {e.msg}", path=str(p), cause=e) from e


# -----------------------------------------------------------------------------
# Proof shapes
# -----------------------------------------------------------------------------

def _scalar(x: Any, where: str) -> str:
    # bool is an int subclass; never a coordinate
    if isinstance(x, bool) or not isinstance(x, (str, int)):
        raise MalformedJSON(f"'{where}' must contain decimal strings", field_name=where)
    return str(x)


def _coords(v: Any, where: str) -> List[str]:
    if not isinstance(v, list):
        raise MalformedJSON(f"'{where}' must be an array", field_name=where)
    return [_scalar(x, where) for x in v]


def _rows(v: Any, where: str) -> List[List[str]]:
    if not isinstance(v, list):
        raise MalformedJSON(f"'{where}' must be an array of arrays", field_name=where)
    return [_coords(r, where) for r in v]


def _present(obj: Mapping[str, Any], key: str) -> bool:
    v = obj.get(key)
    return isinstance(v, list) and len(v) > 0


@dataclass(frozen=True)
class CompactProof:
    """Proof points without the trailing projective coordinate."""

    a: List[str]
    b: List[List[str]]
    c: List[str]
    protocol: str = ""
    curve: str = ""

    kind: ClassVar[str] = "compact"


@dataclass(frozen=True)
class CanonicalProof:
    """snarkjs-shaped proof; every point carries its projective coordinate."""

    pi_a: List[str]
    pi_b: List[List[str]]
    pi_c: List[str]
    protocol: str = ""
    curve: str = ""

    kind: ClassVar[str] = "canonical"

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "pi_a": list(self.pi_a),
            "pi_b": [list(r) for r in self.pi_b],
            "pi_c": list(self.pi_c),
            "protocol": self.protocol,
        }
        if self.curve:
            out["curve"] = self.curve
        return out


RawProof = Union[CompactProof, CanonicalProof]


def parse_raw_proof(obj: Any) -> RawProof:
    """
    Classify a proof JSON object as canonical or compact.

    A non-empty ``pi_a`` makes it canonical; otherwise a non-empty ``a`` makes
    it compact; otherwise UnknownProofFormat is raised.
    """
    if not isinstance(obj, Mapping):
        raise MalformedJSON("proof must be a JSON object", field_name="proof")
    protocol = obj.get("protocol") or ""
    curve = obj.get("curve") or ""
    if not isinstance(protocol, str) or not isinstance(curve, str):
        raise MalformedJSON("proof 'protocol'/'curve' must be strings", field_name="proof")

    if _present(obj, "pi_a"):
        return CanonicalProof(
            pi_a=_coords(obj["pi_a"], "pi_a"),
            pi_b=_rows(obj.get("pi_b") or [], "pi_b"),
            pi_c=_coords(obj.get("pi_c") or [], "pi_c"),
            protocol=protocol,
            curve=curve,
        )
    if _present(obj, "a"):
        return CompactProof(
            a=_coords(obj["a"], "a"),
            b=_rows(obj.get("b") or [], "b"),
            c=_coords(obj.get("c") or [], "c"),
            protocol=protocol,
            curve=curve,
        )
    raise UnknownProofFormat()


def normalize_proof(raw: RawProof) -> CanonicalProof:
    """
    Return the canonical form of ``raw``.

    Compact proofs get ``"1"`` appended to ``a`` and ``c`` and the row
    ``["1","0"]`` appended after the existing rows of ``b``. Canonical proofs
    are returned unchanged.
    """
    if isinstance(raw, CanonicalProof):
        log.info("Detected snarkjs format (pi_a/pi_b/pi_c)")
        return raw
    log.info("Detected Self Protocol format (a/b/c); converting to snarkjs (pi_a/pi_b/pi_c)")
    return CanonicalProof(
        pi_a=list(raw.a) + G1_PROJECTIVE_ONE,
        pi_b=[list(r) for r in raw.b] + [list(G2_PROJECTIVE_ONE)],
        pi_c=list(raw.c) + G1_PROJECTIVE_ONE,
        protocol=raw.protocol,
        curve=raw.curve,
    )


def normalize_proof_json(obj: Any) -> CanonicalProof:
    """parse_raw_proof + normalize_proof."""
    return normalize_proof(parse_raw_proof(obj))


# -----------------------------------------------------------------------------
# Public signals & verification key
# -----------------------------------------------------------------------------

def parse_public_signals(obj: Any) -> List[str]:
    """Public signals must be a JSON array of decimal strings (ints tolerated)."""
    if not isinstance(obj, list):
        raise MalformedJSON("publicSignals must be an array", field_name="publicSignals")
    return [_scalar(v, "publicSignals") for v in obj]


@dataclass(frozen=True)
class VerificationKeyInfo:
    """The parts of a snarkjs verification key this tool validates against."""

    curve: str
    n_public: int
    ic_count: int
    protocol: str = ""


def parse_vk_info(obj: Any) -> VerificationKeyInfo:
    if not isinstance(obj, Mapping):
        raise MalformedJSON("verification key must be a JSON object", field_name="vk")
    n_public = obj.get("nPublic")
    if isinstance(n_public, bool) or not isinstance(n_public, int) or n_public < 0:
        raise MalformedJSON("verification key 'nPublic' must be a non-negative integer", field_name="nPublic")
    ic = obj.get("IC")
    if not isinstance(ic, list):
        raise MalformedJSON("verification key 'IC' must be an array", field_name="IC")
    curve = obj.get("curve")
    if not isinstance(curve, str):
        raise MalformedJSON("verification key 'curve' must be a string", field_name="curve")
    protocol = obj.get("protocol") or ""
    return VerificationKeyInfo(curve=curve, n_public=n_public, ic_count=len(ic), protocol=str(protocol))


# -----------------------------------------------------------------------------
# Captured proofs
# -----------------------------------------------------------------------------

def parse_attestation_id(raw: Any) -> int:
    """
    attestationId may be an int or a numeric string. Anything else maps to 0,
    which no attestation kind uses.
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    log.warning("attestationId %r is not numeric; treating it as unknown", raw)
    return 0


@dataclass(frozen=True)
class CapturedProof:
    attestation_id: int
    proof: Mapping[str, Any]
    public_signals: List[str]
    proof_id: str = ""
    captured_at: str = ""
    path: Optional[Path] = field(default=None, compare=False)


def parse_captured_proof(obj: Any, *, path: Optional[Path] = None) -> CapturedProof:
    if not isinstance(obj, Mapping):
        raise MalformedJSON("captured proof must be a JSON object", path=str(path) if path else None)
    proof = obj.get("proof")
    if not isinstance(proof, Mapping):
        raise MalformedJSON("captured proof is missing 'proof'", field_name="proof")
    if "publicSignals" not in obj:
        raise MalformedJSON("captured proof is missing 'publicSignals'", field_name="publicSignals")
    return CapturedProof(
        attestation_id=parse_attestation_id(obj.get("attestationId")),
        proof=proof,
        public_signals=parse_public_signals(obj["publicSignals"]),
        proof_id=str(obj.get("proofId") or ""),
        captured_at=str(obj.get("capturedAt") or ""),
        path=path,
    )


def load_captured_proof(path: Union[str, Path]) -> CapturedProof:
    p = Path(path)
    return parse_captured_proof(load_json(p, what="captured proof"), path=p)


__all__ = [
    "G1_PROJECTIVE_ONE",
    "G2_PROJECTIVE_ONE",
    "load_json",
    "CompactProof",
    "CanonicalProof",
    "RawProof",
    "parse_raw_proof",
    "normalize_proof",
    "normalize_proof_json",
    "parse_public_signals",
    "VerificationKeyInfo",
    "parse_vk_info",
    "parse_attestation_id",
    "CapturedProof",
    "parse_captured_proof",
    "load_captured_proof",
]
