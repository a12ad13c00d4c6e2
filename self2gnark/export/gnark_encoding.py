"""
self2gnark.export.gnark_encoding
================================

Byte encodings of BN254 Groth16 objects as gnark writes them, so that the
exported files can be read back by gnark-based verifiers (e.g. inside a
zkVM guest).

Encoding rules
--------------
- Fp / Fr elements: 32 bytes, big-endian.
- G1 raw: X || Y (64 bytes). Infinity: 64 zero bytes.
- G1 compressed: X (32 bytes) with the two top bits of byte 0 used as flags:
    0b10 → Y is the lexicographically smallest root
    0b11 → Y is the lexicographically largest root
    0b01 → point at infinity (rest zero)
- G2 raw: X.A1 || X.A0 || Y.A1 || Y.A0 (128 bytes), where A0 + A1*u.
- G2 compressed: X.A1 || X.A0 (64 bytes) with the same flags.
- Slices: big-endian uint32 length prefix, then the elements.

An Fp element is "largest" when it is greater than (p - 1) / 2; an Fp2
element compares A1, or A0 when A1 is zero.

Proof (raw): Ar(G1) || Bs(G2) || Krs(G1) || uint32(#commitments) ||
commitments || commitment PoK(G1). Circom proofs carry no commitments, so
only the first 256 bytes are meaningful; `proof_blob` returns exactly those.

Verifying key (compressed):
  [alpha]1, [beta]1, [beta]2, [gamma]2, [delta]1, [delta]2,
  uint32(len K), K..., [][]uint64 public/commitment index table,
  uint32(#commitment keys), commitment keys...
Circom keys have no G1 copies of beta/delta, so those encode as infinity.
"""

from __future__ import annotations

import struct
from typing import Iterable, Optional, Sequence, Tuple

from ..verifiers.groth16_bn254 import Proof, VerifyingKey
from ..verifiers.pairing_bn254 import (G1Point, G2Point, curve_order,
                                       field_modulus, normalize_g1,
                                       normalize_g2)

SIZE_FIELD = 32
SIZE_G1_COMPRESSED = 32
SIZE_G1_RAW = 64
SIZE_G2_COMPRESSED = 64
SIZE_G2_RAW = 128

# Ar + Bs + Krs
PROOF_POINTS_SIZE = SIZE_G1_RAW + SIZE_G2_RAW + SIZE_G1_RAW

M_MASK = 0b11 << 6
M_COMPRESSED_SMALLEST = 0b10 << 6
M_COMPRESSED_LARGEST = 0b11 << 6
M_COMPRESSED_INFINITY = 0b01 << 6

_P = field_modulus()
_R = curve_order()
_HALF_P = (_P - 1) // 2


# ---------------------------
# Field helpers
# ---------------------------


def fp_bytes(v: int) -> bytes:
    return (v % _P).to_bytes(SIZE_FIELD, "big")


def fr_bytes(v: int) -> bytes:
    """Scalar-field element as 32-byte big-endian, reduced modulo r."""
    return (v % _R).to_bytes(SIZE_FIELD, "big")


def fp_lexicographically_largest(v: int) -> bool:
    return (v % _P) > _HALF_P


def fp2_lexicographically_largest(c0: int, c1: int) -> bool:
    if c1 % _P == 0:
        return fp_lexicographically_largest(c0)
    return fp_lexicographically_largest(c1)


def uint32(n: int) -> bytes:
    return struct.pack(">I", n)


# ---------------------------
# Points
# ---------------------------


def _g1_affine(P: G1Point) -> Optional[Tuple[int, int]]:
    return normalize_g1(P)


def _g2_affine(Q: G2Point) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    return normalize_g2(Q)


def g1_raw(P: G1Point) -> bytes:
    aff = _g1_affine(P)
    if aff is None:
        return bytes(SIZE_G1_RAW)
    x, y = aff
    return fp_bytes(x) + fp_bytes(y)


def g1_compressed(P: G1Point) -> bytes:
    aff = _g1_affine(P)
    out = bytearray(SIZE_G1_COMPRESSED)
    if aff is None:
        out[0] = M_COMPRESSED_INFINITY
        return bytes(out)
    x, y = aff
    out[:] = fp_bytes(x)
    out[0] |= M_COMPRESSED_LARGEST if fp_lexicographically_largest(y) else M_COMPRESSED_SMALLEST
    return bytes(out)


def g2_raw(Q: G2Point) -> bytes:
    aff = _g2_affine(Q)
    if aff is None:
        return bytes(SIZE_G2_RAW)
    (x0, x1), (y0, y1) = aff
    return fp_bytes(x1) + fp_bytes(x0) + fp_bytes(y1) + fp_bytes(y0)


def g2_compressed(Q: G2Point) -> bytes:
    aff = _g2_affine(Q)
    out = bytearray(SIZE_G2_COMPRESSED)
    if aff is None:
        out[0] = M_COMPRESSED_INFINITY
        return bytes(out)
    (x0, x1), (y0, y1) = aff
    out[:] = fp_bytes(x1) + fp_bytes(x0)
    out[0] |= M_COMPRESSED_LARGEST if fp2_lexicographically_largest(y0, y1) else M_COMPRESSED_SMALLEST
    return bytes(out)


def g1_slice_compressed(points: Sequence[G1Point]) -> bytes:
    return uint32(len(points)) + b"".join(g1_compressed(P) for P in points)


def uint64_slice_slice(rows: Iterable[Sequence[int]]) -> bytes:
    rows = list(rows)
    out = bytearray(uint32(len(rows)))
    for row in rows:
        out += uint32(len(row))
        for v in row:
            out += struct.pack(">Q", v)
    return bytes(out)


# ---------------------------
# Groth16 objects
# ---------------------------


def proof_raw_bytes(proof: Proof) -> bytes:
    """Full uncompressed proof encoding (no commitments, PoK at infinity)."""
    return (
        g1_raw(proof.A)
        + g2_raw(proof.B)
        + g1_raw(proof.C)
        + uint32(0)
        + bytes(SIZE_G1_RAW)
    )


def proof_blob(proof: Proof) -> bytes:
    """The three proof points only: exactly PROOF_POINTS_SIZE bytes."""
    return proof_raw_bytes(proof)[:PROOF_POINTS_SIZE]


def vk_compressed_bytes(vk: VerifyingKey) -> bytes:
    infinity_g1 = bytes([M_COMPRESSED_INFINITY]) + bytes(SIZE_G1_COMPRESSED - 1)
    return (
        g1_compressed(vk.alpha1)
        + infinity_g1  # [beta]1
        + g2_compressed(vk.beta2)
        + g2_compressed(vk.gamma2)
        + infinity_g1  # [delta]1
        + g2_compressed(vk.delta2)
        + g1_slice_compressed(vk.IC)
        + uint64_slice_slice([])
        + uint32(0)
    )


def public_inputs_blob(inputs: Iterable[int]) -> bytes:
    return b"".join(fr_bytes(v) for v in inputs)


__all__ = [
    "SIZE_FIELD",
    "SIZE_G1_COMPRESSED",
    "SIZE_G1_RAW",
    "SIZE_G2_COMPRESSED",
    "SIZE_G2_RAW",
    "PROOF_POINTS_SIZE",
    "M_MASK",
    "M_COMPRESSED_SMALLEST",
    "M_COMPRESSED_LARGEST",
    "M_COMPRESSED_INFINITY",
    "fp_bytes",
    "fr_bytes",
    "fp_lexicographically_largest",
    "fp2_lexicographically_largest",
    "uint32",
    "g1_raw",
    "g1_compressed",
    "g2_raw",
    "g2_compressed",
    "g1_slice_compressed",
    "uint64_slice_slice",
    "proof_raw_bytes",
    "proof_blob",
    "vk_compressed_bytes",
    "public_inputs_blob",
]
