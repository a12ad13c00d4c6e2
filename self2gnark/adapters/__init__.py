"""
self2gnark.adapters
===================

Loaders that turn the JSON artifacts produced by the identity app (or by
snarkjs directly) into the canonical shapes consumed by
`self2gnark.verifiers`. See `self_loader` for the accepted formats.
"""

from __future__ import annotations

from .self_loader import (G1_PROJECTIVE_ONE, G2_PROJECTIVE_ONE, CanonicalProof,
                          CapturedProof, CompactProof, RawProof,
                          VerificationKeyInfo, load_captured_proof, load_json,
                          normalize_proof, normalize_proof_json,
                          parse_attestation_id, parse_captured_proof,
                          parse_public_signals, parse_raw_proof,
                          parse_vk_info)

__all__ = [
    "G1_PROJECTIVE_ONE",
    "G2_PROJECTIVE_ONE",
    "CanonicalProof",
    "CapturedProof",
    "CompactProof",
    "RawProof",
    "VerificationKeyInfo",
    "load_captured_proof",
    "load_json",
    "normalize_proof",
    "normalize_proof_json",
    "parse_attestation_id",
    "parse_captured_proof",
    "parse_public_signals",
    "parse_raw_proof",
    "parse_vk_info",
]
