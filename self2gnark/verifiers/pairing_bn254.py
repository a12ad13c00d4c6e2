"""
self2gnark.verifiers.pairing_bn254
==================================

Curve helpers for BN254 ("bn128" in snarkjs) on top of `py_ecc`.

`py_ecc.optimized_bn128` (projective points) is used when importable,
otherwise the affine reference module `py_ecc.bn128`. Callers never look
inside points: they build them with `make_g1`/`make_g2`, read them back with
`normalize_g1`/`normalize_g2` and combine them with `add`/`multiply`/`neg`.

Pairings are written e(P, Q) with P in G1 and Q in G2; py_ecc takes the
arguments the other way round.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple

try:
    from py_ecc import optimized_bn128 as _bn  # type: ignore

    _PROJECTIVE = True
except ImportError:  # pragma: no cover
    from py_ecc import bn128 as _bn  # type: ignore

    _PROJECTIVE = False

FQ = _bn.FQ
FQ2 = _bn.FQ2
add = _bn.add
multiply = _bn.multiply
neg = _bn.neg

BACKEND_NAME: str = _bn.__name__

G1Point = Any
G2Point = Any

__all__ = [
    "FQ",
    "FQ2",
    "BACKEND_NAME",
    "add",
    "multiply",
    "neg",
    "curve_order",
    "field_modulus",
    "g1_generator",
    "g2_generator",
    "make_g1",
    "make_g2",
    "is_infinity",
    "is_on_curve_g1",
    "is_on_curve_g2",
    "normalize_g1",
    "normalize_g2",
    "check_pairing_product",
]


def curve_order() -> int:
    """Order r of G1/G2; public inputs live in Z/rZ."""
    return int(_bn.curve_order)


def field_modulus() -> int:
    """Base field modulus p."""
    return int(_bn.field_modulus)


def g1_generator() -> G1Point:
    return _bn.G1


def g2_generator() -> G2Point:
    return _bn.G2


def _int(c: Any) -> int:
    # FQ2 coefficients are FQ or plain int depending on the backend
    return int(getattr(c, "n", c))


def _zero(z: Any) -> bool:
    coeffs = getattr(z, "coeffs", None)
    if coeffs is not None:
        return all(_int(c) == 0 for c in coeffs)
    return _int(z) == 0


def is_infinity(P: Any) -> bool:
    """None (affine backend) or a projective triple with Z == 0."""
    if P is None:
        return True
    return isinstance(P, tuple) and len(P) == 3 and _zero(P[2])


def make_g1(x: int, y: int, z: int = 1) -> G1Point:
    """G1 point from projective integer coordinates; z == 0 is infinity."""
    if z % field_modulus() == 0:
        return _bn.Z1 if _PROJECTIVE else None
    X, Y, Z = FQ(x), FQ(y), FQ(z)
    return (X, Y, Z) if _PROJECTIVE else (X / Z, Y / Z)


def make_g2(x: Tuple[int, int], y: Tuple[int, int], z: Tuple[int, int] = (1, 0)) -> G2Point:
    """G2 point from (c0, c1) pairs meaning c0 + c1*u; z == (0, 0) is infinity."""
    p = field_modulus()
    if z[0] % p == 0 and z[1] % p == 0:
        return _bn.Z2 if _PROJECTIVE else None
    X, Y, Z = FQ2(list(x)), FQ2(list(y)), FQ2(list(z))
    return (X, Y, Z) if _PROJECTIVE else (X / Z, Y / Z)


def is_on_curve_g1(P: G1Point) -> bool:
    return is_infinity(P) or bool(_bn.is_on_curve(P, _bn.b))


def is_on_curve_g2(Q: G2Point) -> bool:
    return is_infinity(Q) or bool(_bn.is_on_curve(Q, _bn.b2))


def _to_affine(P: Any) -> Tuple[Any, Any]:
    if _PROJECTIVE:
        return _bn.normalize(P)
    return P[0], P[1]


def normalize_g1(P: G1Point) -> Optional[Tuple[int, int]]:
    """Affine (x, y) as ints, or None at infinity."""
    if is_infinity(P):
        return None
    x, y = _to_affine(P)
    return _int(x), _int(y)


def normalize_g2(Q: G2Point) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    """Affine ((x_c0, x_c1), (y_c0, y_c1)) as ints, or None at infinity."""
    if is_infinity(Q):
        return None
    x, y = _to_affine(Q)
    return (_int(x.coeffs[0]), _int(x.coeffs[1])), (_int(y.coeffs[0]), _int(y.coeffs[1]))


def check_pairing_product(pairs: Iterable[Tuple[G1Point, G2Point]]) -> bool:
    """
    True iff prod e(P_i, Q_i) == 1 in GT.

    Every point is checked against its curve first (ValueError otherwise).
    Terms with a point at infinity contribute 1 and are skipped.
    """
    one = _bn.FQ12.one()
    acc = one
    for P, Q in pairs:
        if not is_on_curve_g1(P):
            raise ValueError("G1 point is not on curve")
        if not is_on_curve_g2(Q):
            raise ValueError("G2 point is not on curve")
        if is_infinity(P) or is_infinity(Q):
            continue
        acc = acc * _bn.pairing(Q, P)
    return acc == one
