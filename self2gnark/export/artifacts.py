"""
Write the gnark binary artifacts for a verified proof.

Files written to the output directory:

    proof.bin           Ar || Bs || Krs, raw encoding (256 bytes)
    vk.bin              compressed verifying key
    public_inputs.bin   one 32-byte big-endian scalar per public signal
    identity.json       {"attestation_id": ..., <decoded identity fields>}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..errors import ArtifactWriteFailure
from ..verifiers.groth16_bn254 import Groth16Bundle
from .gnark_encoding import proof_blob, public_inputs_blob, vk_compressed_bytes

log = logging.getLogger(__name__)

PROOF_FILE = "proof.bin"
VK_FILE = "vk.bin"
PUBLIC_INPUTS_FILE = "public_inputs.bin"
IDENTITY_FILE = "identity.json"


@dataclass(frozen=True)
class ExportedArtifacts:
    directory: Path
    proof: Path
    vk: Path
    public_inputs: Path
    identity: Path
    sizes: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directory": str(self.directory),
            "files": {
                PROOF_FILE: str(self.proof),
                VK_FILE: str(self.vk),
                PUBLIC_INPUTS_FILE: str(self.public_inputs),
                IDENTITY_FILE: str(self.identity),
            },
            "sizes": dict(self.sizes),
        }


def identity_document(attestation_id: int, identity: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    doc: Dict[str, Any] = {"attestation_id": attestation_id}
    for k, v in (identity or {}).items():
        doc[k] = v
    return doc


def _write(path: Path, data: bytes) -> int:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise ArtifactWriteFailure(f"failed to write {path.name}: {e}", path=str(path), cause=e) from e
    return len(data)


def export_artifacts(
    out_dir: Union[str, Path],
    bundle: Groth16Bundle,
    *,
    attestation_id: int,
    identity: Optional[Mapping[str, str]] = None,
) -> ExportedArtifacts:
    """
    Encode ``bundle`` and write the four artifact files under ``out_dir``.

    The directory (and its parents) is created if missing. Any filesystem
    error is raised as ArtifactWriteFailure.
    """
    out = Path(out_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArtifactWriteFailure(f"cannot create output directory: {e}", path=str(out), cause=e) from e

    doc = identity_document(attestation_id, identity)
    identity_bytes = json.dumps(doc, indent=2, sort_keys=True, ensure_ascii=False).encode("utf-8")

    paths = {
        PROOF_FILE: out / PROOF_FILE,
        VK_FILE: out / VK_FILE,
        PUBLIC_INPUTS_FILE: out / PUBLIC_INPUTS_FILE,
        IDENTITY_FILE: out / IDENTITY_FILE,
    }
    sizes = {
        PROOF_FILE: _write(paths[PROOF_FILE], proof_blob(bundle.proof)),
        VK_FILE: _write(paths[VK_FILE], vk_compressed_bytes(bundle.vk)),
        PUBLIC_INPUTS_FILE: _write(paths[PUBLIC_INPUTS_FILE], public_inputs_blob(bundle.public_inputs)),
        IDENTITY_FILE: _write(paths[IDENTITY_FILE], identity_bytes),
    }

    log.info("Exported gnark artifacts to %s", out)
    for name, size in sizes.items():
        log.info("  %s (%d bytes)", name, size)

    return ExportedArtifacts(
        directory=out,
        proof=paths[PROOF_FILE],
        vk=paths[VK_FILE],
        public_inputs=paths[PUBLIC_INPUTS_FILE],
        identity=paths[IDENTITY_FILE],
        sizes=sizes,
    )


__all__ = [
    "PROOF_FILE",
    "VK_FILE",
    "PUBLIC_INPUTS_FILE",
    "IDENTITY_FILE",
    "ExportedArtifacts",
    "identity_document",
    "export_artifacts",
]
