"""
Typed exceptions for self2gnark.

Design goals
- Structured: machine-readable code + human message + contextual fields.
- Composable: wrap lower-level exceptions with preserved causes.
- One subtype per failure class of the pipeline, so the CLI can report all
  of them uniformly while tests assert on the exact kind.

The specific subtypes exported here are:
  - Self2GnarkError (base)
  - InputReadFailure
  - MalformedJSON
  - UnknownProofFormat
  - UnknownAttestationID
  - PublicSignalMismatch
  - ConversionFailure
  - VerificationError
  - ArtifactWriteFailure
  - UsageError

A proof that is well formed but does not verify is *not* an error; the
verifier returns False for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    """Canonical error codes."""

    UNKNOWN = "UNKNOWN"

    INPUT_READ = "INPUT_READ"
    MALFORMED_JSON = "MALFORMED_JSON"
    UNKNOWN_PROOF_FORMAT = "UNKNOWN_PROOF_FORMAT"
    UNKNOWN_ATTESTATION_ID = "UNKNOWN_ATTESTATION_ID"
    PUBLIC_SIGNAL_MISMATCH = "PUBLIC_SIGNAL_MISMATCH"
    CONVERSION = "CONVERSION"
    VERIFICATION = "VERIFICATION"
    ARTIFACT_WRITE = "ARTIFACT_WRITE"
    USAGE = "USAGE"


@dataclass
class Self2GnarkError(Exception):
    """
    Base structured error.

    Fields:
      code:  stable machine code (ErrorCode | str)
      msg:   human-readable summary
      ctx:   small dict of contextual fields (paths, counts, ids)
      cause: optional underlying exception (not serialized)
    """

    code: ErrorCode | str = ErrorCode.UNKNOWN
    msg: str = "self2gnark error"
    ctx: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        parts = [f"[{_code_str(self.code)}] {self.msg}"]
        if self.ctx:
            parts.append(f"ctx={self.ctx}")
        if self.cause:
            parts.append(f"cause={self.cause!r}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": _code_str(self.code), "msg": self.msg, "ctx": self.ctx}


def _code_str(code: ErrorCode | str) -> str:
    return code.value if isinstance(code, ErrorCode) else str(code)


def _merge(base: Dict[str, Any], extra: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if extra:
        base.update(extra)
    return base


class InputReadFailure(Self2GnarkError):
    """A required input file is missing or unreadable."""

    def __init__(
        self,
        msg: str = "failed to read input",
        *,
        path: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if path is not None:
            base["path"] = str(path)
        super().__init__(code=ErrorCode.INPUT_READ, msg=msg, ctx=_merge(base, ctx), cause=cause)


class MalformedJSON(Self2GnarkError):
    """Input JSON is not parseable or violates the expected schema."""

    def __init__(
        self,
        msg: str = "malformed JSON input",
        *,
        path: Optional[str] = None,
        field_name: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if path is not None:
            base["path"] = str(path)
        if field_name is not None:
            base["field"] = field_name
        super().__init__(code=ErrorCode.MALFORMED_JSON, msg=msg, ctx=_merge(base, ctx), cause=cause)


class UnknownProofFormat(Self2GnarkError):
    """Neither the compact (a/b/c) nor the canonical (pi_a/pi_b/pi_c) group is present."""

    def __init__(
        self,
        msg: str = "unknown proof format: neither 'a' nor 'pi_a' found",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(code=ErrorCode.UNKNOWN_PROOF_FORMAT, msg=msg, ctx=dict(ctx or {}))


class UnknownAttestationID(Self2GnarkError):
    """Attestation tag outside the known table and no explicit key given."""

    def __init__(self, attestation_id: int, *, ctx: Optional[Mapping[str, Any]] = None) -> None:
        self.attestation_id = attestation_id
        super().__init__(
            code=ErrorCode.UNKNOWN_ATTESTATION_ID,
            msg=f"unknown attestation ID {attestation_id}; provide --vk explicitly",
            ctx=_merge({"attestation_id": attestation_id}, ctx),
        )


class PublicSignalMismatch(Self2GnarkError):
    """The number of public signals differs from the key's nPublic."""

    def __init__(self, got: int, expected: int) -> None:
        self.got = got
        self.expected = expected
        super().__init__(
            code=ErrorCode.PUBLIC_SIGNAL_MISMATCH,
            msg=f"proof has {got} public signals but vkey expects {expected}; wrong vkey?",
            ctx={"got": got, "expected": expected},
        )


class ConversionFailure(Self2GnarkError):
    """Proof or key cannot be turned into curve points for the verifier."""

    def __init__(
        self,
        msg: str = "failed to convert proof/key for verification",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.CONVERSION, msg=msg, ctx=dict(ctx or {}), cause=cause)


class VerificationError(Self2GnarkError):
    """The pairing check itself failed to run (distinct from a False verdict)."""

    def __init__(
        self,
        msg: str = "verification error",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.VERIFICATION, msg=msg, ctx=dict(ctx or {}), cause=cause)


class ArtifactWriteFailure(Self2GnarkError):
    """Exporting a binary/JSON artifact failed."""

    def __init__(
        self,
        msg: str = "failed to write artifact",
        *,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if path is not None:
            base["path"] = str(path)
        super().__init__(code=ErrorCode.ARTIFACT_WRITE, msg=msg, ctx=base, cause=cause)


class UsageError(Self2GnarkError):
    """Invalid combination of command-line inputs."""

    def __init__(self, msg: str) -> None:
        super().__init__(code=ErrorCode.USAGE, msg=msg)


__all__ = [
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
