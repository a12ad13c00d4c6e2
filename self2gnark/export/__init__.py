"""
self2gnark.export
=================

gnark-compatible encodings of BN254 Groth16 objects and the artifact writer
used by ``--export-gnark``.
"""

from .artifacts import (IDENTITY_FILE, PROOF_FILE, PUBLIC_INPUTS_FILE,
                        VK_FILE, ExportedArtifacts, export_artifacts,
                        identity_document)
from .gnark_encoding import (PROOF_POINTS_SIZE, g1_compressed, g1_raw,
                             g2_compressed, g2_raw, proof_blob,
                             public_inputs_blob, vk_compressed_bytes)

__all__ = [
    "IDENTITY_FILE",
    "PROOF_FILE",
    "PUBLIC_INPUTS_FILE",
    "VK_FILE",
    "ExportedArtifacts",
    "export_artifacts",
    "identity_document",
    "PROOF_POINTS_SIZE",
    "g1_compressed",
    "g1_raw",
    "g2_compressed",
    "g2_raw",
    "proof_blob",
    "public_inputs_blob",
    "vk_compressed_bytes",
]
