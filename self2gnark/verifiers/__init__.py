# self2gnark/verifiers/__init__.py
"""
self2gnark verifiers: high-level facade

Two calls sit between the loaders and the exporters:

- `validate_arity(signals, vk)` raises PublicSignalMismatch when the number of
  public signals differs from the key's ``nPublic``. Run it before verifying.
- `verify_proof(proof, vk, signals)` converts the canonical proof, key and
  signals into curve points (ConversionFailure on bad input), runs the
  Groth16 pairing check and reports the verdict with timings.

A ``False`` verdict is a legitimate answer, not an exception.

Usage
-----
>>> from self2gnark.verifiers import validate_arity, verify_proof
>>> validate_arity(signals, vk_json)
>>> outcome = verify_proof(canonical_proof, vk_json, signals)
>>> outcome.ok
True
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from ..adapters.self_loader import (CanonicalProof, VerificationKeyInfo,
                                    parse_vk_info)
from ..errors import PublicSignalMismatch
from . import groth16_bn254
from .groth16_bn254 import Groth16Bundle

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of a verification attempt."""

    ok: bool
    elapsed: float
    conversion_elapsed: float = 0.0
    bundle: Optional[Groth16Bundle] = None

    def __bool__(self) -> bool:  # allows: if outcome: ...
        return self.ok


def validate_arity(
    public_signals: Sequence[Any],
    vk: Union[VerificationKeyInfo, Mapping[str, Any]],
) -> None:
    """Raise PublicSignalMismatch iff len(public_signals) != vk nPublic."""
    info = vk if isinstance(vk, VerificationKeyInfo) else parse_vk_info(vk)
    if len(public_signals) != info.n_public:
        raise PublicSignalMismatch(len(public_signals), info.n_public)


def verify_proof(
    proof: Union[CanonicalProof, Mapping[str, Any]],
    vk: Mapping[str, Any],
    public_signals: Sequence[Union[int, str]],
) -> VerificationOutcome:
    """
    Convert and verify a canonical Groth16 proof.

    Raises
    ------
    ConversionFailure
        If the proof, key or signals cannot be turned into curve points.
    VerificationError
        If the pairing check itself fails to run.
    """
    proof_json = proof.to_json() if isinstance(proof, CanonicalProof) else proof

    start = time.perf_counter()
    bundle = groth16_bn254.convert(vk, proof_json, public_signals)
    conversion_elapsed = time.perf_counter() - start
    log.info("Conversion: %.3fs", conversion_elapsed)

    start = time.perf_counter()
    ok = groth16_bn254.verify(bundle)
    elapsed = time.perf_counter() - start
    log.debug("Pairing check finished in %.3fs (ok=%s)", elapsed, ok)

    return VerificationOutcome(ok=ok, elapsed=elapsed, conversion_elapsed=conversion_elapsed, bundle=bundle)


__all__ = [
    "Groth16Bundle",
    "VerificationOutcome",
    "validate_arity",
    "verify_proof",
]
