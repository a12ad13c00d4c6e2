"""
self2gnark.verifiers.groth16_bn254
==================================

Groth16 verifier for BN254 (altbn128), fed with the canonical snarkjs JSON
layout produced by `self2gnark.adapters.normalize_proof`.

Verification equation (standard form)
-------------------------------------
    e(A, B) == e(alpha1, beta2) * e(VK_x, gamma2) * e(C, delta2)

implemented as a product check in GT:
    e(A, B) * e(-alpha1, beta2) * e(-VK_x, gamma2) * e(-C, delta2) == 1

with VK_x = IC[0] + sum_i inputs[i] * IC[i+1].

JSON compatibility (snarkjs)
----------------------------
- Verifying key:
  {
    "protocol": "groth16", "curve": "bn128", "nPublic": n,
    "vk_alpha_1": [ax, ay, "1"],
    "vk_beta_2":  [[bx0, bx1], [by0, by1], ["1", "0"]],
    "vk_gamma_2": ..., "vk_delta_2": ...,
    "IC": [[ic0x, ic0y, "1"], ...]          # length = 1 + nPublic
  }
- Proof:
  { "pi_a": [ax, ay, "1"], "pi_b": [[..],[..],["1","0"]], "pi_c": [cx, cy, "1"] }

G2 elements are Fq2 encoded as [c0, c1] for c0 + c1 * u. The trailing
projective coordinate is optional; when present the point is divided by it.

Conversion and verification are separate steps:
- `convert(...)` raises ConversionFailure for anything that cannot become a
  valid curve point / scalar (bad number, wrong shape, off-curve point,
  G2 point outside the order-r subgroup, unsupported curve, IC/nPublic
  disagreement).
- `verify(bundle)` returns False for a proof that does not satisfy the
  equation and raises VerificationError if the pairing check itself blows up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Union

from ..errors import ConversionFailure, VerificationError
from .pairing_bn254 import (add, check_pairing_product, curve_order,
                            field_modulus, is_infinity, is_on_curve_g1,
                            is_on_curve_g2, make_g1, make_g2, multiply,
                            neg)

G1Point = Any
G2Point = Any

SUPPORTED_CURVES = ("bn128", "bn254", "altbn128", "alt_bn128")
PROTOCOL = "groth16"

_FR = curve_order()
_FP = field_modulus()


# ---------------------------
# Utilities
# ---------------------------


def _to_int(z: Union[int, str], where: str) -> int:
    if isinstance(z, bool):
        raise ConversionFailure(f"{where}: boolean is not a field element")
    if isinstance(z, int):
        return z
    s = str(z).strip().lower()
    try:
        if s.startswith("0x"):
            return int(s, 16)
        return int(s, 10)
    except ValueError as e:
        raise ConversionFailure(f"{where}: malformed field element {z!r}", cause=e) from e


def _fq(z: Union[int, str], where: str) -> int:
    v = _to_int(z, where)
    if not 0 <= v < _FP:
        raise ConversionFailure(f"{where}: coordinate outside the base field")
    return v


def _fr(z: Union[int, str], where: str) -> int:
    v = _to_int(z, where)
    if v < 0:
        raise ConversionFailure(f"{where}: negative scalar")
    return v % _FR


def _g1(coords: Any, where: str) -> G1Point:
    if not isinstance(coords, (list, tuple)) or len(coords) not in (2, 3):
        raise ConversionFailure(f"{where}: G1 point must be [x, y] or [x, y, z]")
    x, y = _fq(coords[0], where), _fq(coords[1], where)
    z = _fq(coords[2], where) if len(coords) == 3 else 1
    if z == 0 or (x == 0 and y == 0):
        P = make_g1(0, 0, 0)
    else:
        P = make_g1(x, y, z)
    if not is_on_curve_g1(P):
        raise ConversionFailure(f"{where}: point is not on G1")
    return P


def _fq2(pair: Any, where: str) -> tuple:
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        raise ConversionFailure(f"{where}: Fq2 element must be [c0, c1]")
    return _fq(pair[0], where), _fq(pair[1], where)


def _g2(rows: Any, where: str) -> G2Point:
    if not isinstance(rows, (list, tuple)) or len(rows) not in (2, 3):
        raise ConversionFailure(f"{where}: G2 point must be [[x0,x1],[y0,y1]] with optional [z0,z1]")
    x, y = _fq2(rows[0], where), _fq2(rows[1], where)
    z = _fq2(rows[2], where) if len(rows) == 3 else (1, 0)
    if z == (0, 0) or (x == (0, 0) and y == (0, 0)):
        Q = make_g2((0, 0), (0, 0), (0, 0))
    else:
        Q = make_g2(x, y, z)
    if not is_on_curve_g2(Q):
        raise ConversionFailure(f"{where}: point is not on G2")
    # the twist has a large cofactor; on-curve alone does not imply order r
    if not is_infinity(Q) and not is_infinity(multiply(Q, _FR)):
        raise ConversionFailure(f"{where}: point is not in the G2 subgroup")
    return Q


def _field(obj: Mapping[str, Any], key: str) -> Any:
    try:
        return obj[key]
    except KeyError as e:
        raise ConversionFailure(f"missing '{key}'", cause=e) from e


# ---------------------------
# Data classes
# ---------------------------


@dataclass(frozen=True)
class VerifyingKey:
    alpha1: G1Point
    beta2: G2Point
    gamma2: G2Point
    delta2: G2Point
    IC: List[G1Point]  # [IC0, IC1, ..., ICn]

    @property
    def n_public(self) -> int:
        return len(self.IC) - 1


@dataclass(frozen=True)
class Proof:
    A: G1Point
    B: G2Point
    C: G1Point


@dataclass(frozen=True)
class Groth16Bundle:
    """Converted proof, key and public inputs (reduced modulo r)."""

    proof: Proof
    vk: VerifyingKey
    public_inputs: List[int]


# ---------------------------
# Loaders (snarkjs JSON)
# ---------------------------


def load_vk(vk_json: Mapping[str, Any]) -> VerifyingKey:
    """Parse a snarkjs verifying key into curve points."""
    curve = str(vk_json.get("curve") or "").lower()
    if curve and curve not in SUPPORTED_CURVES:
        raise ConversionFailure(f"unsupported curve '{curve}' (expected bn128)", ctx={"curve": curve})
    protocol = str(vk_json.get("protocol") or "").lower()
    if protocol and protocol != PROTOCOL:
        raise ConversionFailure(f"unsupported protocol '{protocol}'", ctx={"protocol": protocol})

    ic_raw = _field(vk_json, "IC")
    if not isinstance(ic_raw, list) or not ic_raw:
        raise ConversionFailure("vk.IC must be a non-empty list of G1 points")
    n_public = vk_json.get("nPublic")
    if n_public is not None and (isinstance(n_public, bool) or not isinstance(n_public, int)):
        raise ConversionFailure("vk.nPublic must be an integer", ctx={"nPublic": n_public})
    if n_public is not None and len(ic_raw) != n_public + 1:
        raise ConversionFailure(
            f"IC length {len(ic_raw)} != nPublic + 1 ({n_public + 1})",
            ctx={"ic": len(ic_raw), "nPublic": n_public},
        )

    return VerifyingKey(
        alpha1=_g1(_field(vk_json, "vk_alpha_1"), "vk_alpha_1"),
        beta2=_g2(_field(vk_json, "vk_beta_2"), "vk_beta_2"),
        gamma2=_g2(_field(vk_json, "vk_gamma_2"), "vk_gamma_2"),
        delta2=_g2(_field(vk_json, "vk_delta_2"), "vk_delta_2"),
        IC=[_g1(pt, f"IC[{i}]") for i, pt in enumerate(ic_raw)],
    )


def load_proof(proof_json: Mapping[str, Any]) -> Proof:
    """Parse a canonical (pi_a/pi_b/pi_c) proof into curve points."""
    protocol = str(proof_json.get("protocol") or "").lower()
    if protocol and protocol != PROTOCOL:
        raise ConversionFailure(f"unsupported proof protocol '{protocol}'", ctx={"protocol": protocol})
    return Proof(
        A=_g1(_field(proof_json, "pi_a"), "pi_a"),
        B=_g2(_field(proof_json, "pi_b"), "pi_b"),
        C=_g1(_field(proof_json, "pi_c"), "pi_c"),
    )


def public_inputs_to_fr(inputs: Sequence[Union[int, str]]) -> List[int]:
    return [_fr(v, f"publicSignals[{i}]") for i, v in enumerate(inputs)]


def convert(
    vk_json: Mapping[str, Any],
    proof_json: Mapping[str, Any],
    public_inputs: Sequence[Union[int, str]],
) -> Groth16Bundle:
    """Turn snarkjs JSON into a Groth16Bundle or raise ConversionFailure."""
    vk = load_vk(vk_json)
    proof = load_proof(proof_json)
    inputs = public_inputs_to_fr(public_inputs)
    if len(vk.IC) != len(inputs) + 1:
        raise ConversionFailure(f"IC length {len(vk.IC)} != 1 + len(inputs) {len(inputs)}")
    return Groth16Bundle(proof=proof, vk=vk, public_inputs=inputs)


# ---------------------------
# Core verification
# ---------------------------


def compute_vk_x(IC: Sequence[G1Point], inputs: Sequence[int]) -> G1Point:
    """VK_x = IC[0] + sum_i inputs[i] * IC[i+1] in G1."""
    acc = IC[0]
    for i, s in enumerate(inputs):
        if s != 0:
            acc = add(acc, multiply(IC[i + 1], s))
    return acc


def verify(bundle: Groth16Bundle) -> bool:
    """
    Run the pairing check over a converted bundle.

    Returns the verdict; raises VerificationError if the check cannot run.
    """
    vk, pf = bundle.vk, bundle.proof
    try:
        vkx = compute_vk_x(vk.IC, bundle.public_inputs)
        pairs = [
            (pf.A, pf.B),
            (neg(vk.alpha1), vk.beta2),
            (neg(vkx), vk.gamma2),
            (neg(pf.C), vk.delta2),
        ]
        return bool(check_pairing_product(pairs))
    except Exception as e:  # noqa: BLE001 - backend failures are reported as VerificationError
        raise VerificationError(f"pairing check failed to run: {e}", cause=e) from e


def verify_groth16(
    vk_json: Mapping[str, Any],
    proof_json: Mapping[str, Any],
    public_inputs: Sequence[Union[int, str]],
) -> bool:
    """convert() + verify() in one call."""
    return verify(convert(vk_json, proof_json, public_inputs))


__all__ = [
    "SUPPORTED_CURVES",
    "VerifyingKey",
    "Proof",
    "Groth16Bundle",
    "load_vk",
    "load_proof",
    "public_inputs_to_fr",
    "convert",
    "compute_vk_x",
    "verify",
    "verify_groth16",
]
