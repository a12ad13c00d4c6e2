"""
End-to-end run: load inputs, normalize, check arity, verify, then
optionally decode identity fields and export gnark artifacts.

Stages run strictly in that order. Decoding and export only happen after a
positive verdict; an invalid proof returns a RunResult with
``verified=False`` and nothing else filled in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .adapters.self_loader import (CapturedProof, load_captured_proof,
                                   load_json, normalize_proof,
                                   parse_public_signals, parse_raw_proof,
                                   parse_vk_info)
from .config import ToolConfig, load_config
from .errors import InputReadFailure, MalformedJSON, UsageError
from .export.artifacts import ExportedArtifacts, export_artifacts
from .identity import LAYOUTS, SignalLayout, decode_identity, layout_for
from .registry import (DEFAULT_REGISTRY, AttestationKind,
                       AttestationRegistry, resolve_vk_path)
from .verifiers import validate_arity, verify_proof

log = logging.getLogger(__name__)

LAYOUT_AUTO = "auto"
LAYOUT_CHOICES = tuple(LAYOUTS) + (LAYOUT_AUTO,)


@dataclass(frozen=True)
class RunOptions:
    """Inputs of one run, as given on the command line."""

    proof_path: Optional[Path] = None
    vk_path: Optional[Path] = None
    vk_dir: Optional[Path] = None
    proof_only_path: Optional[Path] = None
    public_signals_path: Optional[Path] = None
    export_dir: Optional[Path] = None
    decode: bool = False
    layout: str = "id-card"


@dataclass(frozen=True)
class LoadedInputs:
    attestation_id: int
    proof: Mapping[str, Any]
    public_signals: List[str]
    vk: Mapping[str, Any]
    vk_path: Path
    captured: Optional[CapturedProof] = None


@dataclass(frozen=True)
class RunResult:
    verified: bool
    elapsed: float
    attestation_id: int
    vk_path: Path
    proof_format: str
    n_public: int
    conversion_elapsed: float = 0.0
    proof_id: str = ""
    captured_at: str = ""
    identity: Optional[Dict[str, str]] = None
    artifacts: Optional[ExportedArtifacts] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.verified,
            "verified": self.verified,
            "elapsed_ms": round(self.elapsed * 1000.0, 3),
            "conversion_ms": round(self.conversion_elapsed * 1000.0, 3),
            "attestation_id": self.attestation_id,
            "proof_id": self.proof_id or None,
            "captured_at": self.captured_at or None,
            "proof_format": self.proof_format,
            "vk": str(self.vk_path),
            "n_public": self.n_public,
            "identity": self.identity,
            "artifacts": self.artifacts.to_dict() if self.artifacts else None,
        }


def _load_vk(path: Path, *, auto: bool) -> Mapping[str, Any]:
    try:
        obj = load_json(path, what="verification key")
    except InputReadFailure as e:
        if not auto:
            raise
        raise InputReadFailure(
            f"failed to read auto-selected vkey (use --vk to override): {e.msg}",
            path=str(path),
            cause=e,
        ) from e
    if not isinstance(obj, Mapping):
        raise MalformedJSON("verification key must be a JSON object", path=str(path))
    return obj


def load_inputs(
    options: RunOptions,
    *,
    config: ToolConfig,
    registry: AttestationRegistry = DEFAULT_REGISTRY,
) -> LoadedInputs:
    """
    Read the proof, public signals and verification key named by ``options``.

    Captured-proof mode (``proof_path``) selects the key from the attestation
    tag unless ``vk_path`` is given. Standalone mode (``proof_only_path``)
    needs both ``public_signals_path`` and ``vk_path``.
    """
    if options.proof_path is not None:
        captured = load_captured_proof(options.proof_path)
        aid = captured.attestation_id
        log.info("Proof ID: %s", captured.proof_id)
        log.info("Captured at: %s", captured.captured_at)
        log.info("Attestation ID: %d (%s)", aid, registry.display_name(aid))

        if options.vk_path is not None:
            vk_path, auto = Path(options.vk_path), False
        else:
            vk_dir = options.vk_dir if options.vk_dir is not None else config.default_vk_dir(options.proof_path)
            vk_path, auto = resolve_vk_path(aid, vk_dir, registry), True
            log.info("Auto-selected vkey: %s", vk_path)

        return LoadedInputs(
            attestation_id=aid,
            proof=captured.proof,
            public_signals=captured.public_signals,
            vk=_load_vk(vk_path, auto=auto),
            vk_path=vk_path,
            captured=captured,
        )

    if options.proof_only_path is not None:
        if options.public_signals_path is None or options.vk_path is None:
            raise UsageError("--proof-only requires --public-signals and --vk")
        proof = load_json(options.proof_only_path, what="proof")
        if not isinstance(proof, Mapping):
            raise MalformedJSON("proof must be a JSON object", path=str(options.proof_only_path))
        signals = parse_public_signals(load_json(options.public_signals_path, what="public signals"))
        vk_path = Path(options.vk_path)
        return LoadedInputs(
            attestation_id=0,
            proof=proof,
            public_signals=signals,
            vk=_load_vk(vk_path, auto=False),
            vk_path=vk_path,
        )

    raise UsageError("either --proof or --proof-only is required")


def select_layout(name: str, attestation_id: int) -> SignalLayout:
    if name == LAYOUT_AUTO:
        return layout_for(attestation_id)
    try:
        return LAYOUTS[name]
    except KeyError as e:
        raise UsageError(f"unknown layout '{name}' (choose from {', '.join(LAYOUT_CHOICES)})") from e


def run(
    options: RunOptions,
    *,
    config: Optional[ToolConfig] = None,
    registry: AttestationRegistry = DEFAULT_REGISTRY,
) -> RunResult:
    """
    Execute one verification run.

    Raises a Self2GnarkError subtype for every failure except a proof that
    simply does not verify.
    """
    cfg = config if config is not None else load_config()
    inputs = load_inputs(options, config=cfg, registry=registry)

    raw = parse_raw_proof(inputs.proof)
    proof = normalize_proof(raw)
    if proof.protocol:
        log.info("Proof protocol: %s", proof.protocol)

    info = parse_vk_info(inputs.vk)
    log.info("VK: curve=%s, nPublic=%d, IC=%d", info.curve, info.n_public, info.ic_count)
    log.info("Public signals: %d", len(inputs.public_signals))
    validate_arity(inputs.public_signals, info)

    outcome = verify_proof(proof, inputs.vk, inputs.public_signals)

    captured = inputs.captured
    result = dict(
        elapsed=outcome.elapsed,
        conversion_elapsed=outcome.conversion_elapsed,
        attestation_id=inputs.attestation_id,
        vk_path=inputs.vk_path,
        proof_format=raw.kind,
        n_public=info.n_public,
        proof_id=captured.proof_id if captured else "",
        captured_at=captured.captured_at if captured else "",
    )
    if not outcome.ok:
        return RunResult(verified=False, **result)

    identity: Optional[Dict[str, str]] = None
    if options.decode:
        layout = select_layout(options.layout, inputs.attestation_id)
        if inputs.attestation_id == AttestationKind.AADHAAR:
            log.warning("AADHAAR signals use a different layout; MRZ offsets may not apply")
        identity = decode_identity(inputs.public_signals, layout)

    artifacts: Optional[ExportedArtifacts] = None
    if options.export_dir is not None:
        artifacts = export_artifacts(
            options.export_dir,
            outcome.bundle,
            attestation_id=inputs.attestation_id,
            identity=identity,
        )

    return RunResult(verified=True, identity=identity, artifacts=artifacts, **result)


__all__ = [
    "LAYOUT_AUTO",
    "LAYOUT_CHOICES",
    "RunOptions",
    "LoadedInputs",
    "RunResult",
    "load_inputs",
    "select_layout",
    "run",
]
