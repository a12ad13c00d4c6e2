"""
self2gnark
==========

Verify Groth16 (BN254) identity-disclosure proofs captured from the Self
protocol, decode the identity attributes they reveal, and export the proof,
verifying key and public inputs in gnark's binary encoding for downstream
verifiers.

Pipeline
--------
    load inputs → normalize proof → check arity → verify
        → (optional) decode identity → (optional) export artifacts

Quick use
---------
>>> from self2gnark import RunOptions, run
>>> result = run(RunOptions(proof_path=Path("proofs/abc.json"), decode=True))
>>> result.verified, result.identity

Command line: ``self2gnark --help`` or ``python -m self2gnark --help``.
"""

from .errors import (ArtifactWriteFailure, ConversionFailure, ErrorCode,
                     InputReadFailure, MalformedJSON, PublicSignalMismatch,
                     Self2GnarkError, UnknownAttestationID, UnknownProofFormat,
                     UsageError, VerificationError)
from .identity import decode_identity
from .pipeline import RunOptions, RunResult, run
from .registry import AttestationKind, resolve_vk_path
from .verifiers import validate_arity, verify_proof
from .version import __version__

__all__ = [
    "__version__",
    "run",
    "RunOptions",
    "RunResult",
    "decode_identity",
    "resolve_vk_path",
    "AttestationKind",
    "validate_arity",
    "verify_proof",
    "ErrorCode",
    "Self2GnarkError",
    "InputReadFailure",
    "MalformedJSON",
    "UnknownProofFormat",
    "UnknownAttestationID",
    "PublicSignalMismatch",
    "ConversionFailure",
    "VerificationError",
    "ArtifactWriteFailure",
    "UsageError",
]
