"""
self2gnark.registry
===================

Fixed table of attestation kinds carried alongside captured proofs, and the
verification-key auto-selector built on it.

Kinds (defaults)
----------------
- 1 → E-PASSPORT  → vc_and_disclose.json
- 2 → EU_ID_CARD  → vc_and_disclose_id.json
- 3 → AADHAAR     → vc_and_disclose_aadhaar.json

The table is immutable data: build an `AttestationRegistry` once and pass it
to `resolve_vk_path`. Resolution only computes a path; opening and
validating the key is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union

from ..errors import UnknownAttestationID


class AttestationKind(IntEnum):
    E_PASSPORT = 1
    EU_ID_CARD = 2
    AADHAAR = 3


@dataclass(frozen=True)
class AttestationSpec:
    """Binding of an attestation tag → display name + key file name."""

    kind: AttestationKind
    name: str
    vk_file: str


DEFAULT_SPECS: Tuple[AttestationSpec, ...] = (
    AttestationSpec(AttestationKind.E_PASSPORT, "E-PASSPORT", "vc_and_disclose.json"),
    AttestationSpec(AttestationKind.EU_ID_CARD, "EU_ID_CARD", "vc_and_disclose_id.json"),
    AttestationSpec(AttestationKind.AADHAAR, "AADHAAR", "vc_and_disclose_aadhaar.json"),
)


class AttestationRegistry:
    """Read-only lookup over a set of AttestationSpec entries."""

    def __init__(self, specs: Iterable[AttestationSpec] = DEFAULT_SPECS) -> None:
        self._by_id: Mapping[int, AttestationSpec] = MappingProxyType(
            {int(s.kind): s for s in specs}
        )

    def get(self, attestation_id: int) -> Optional[AttestationSpec]:
        return self._by_id.get(int(attestation_id))

    def resolve(self, attestation_id: int) -> AttestationSpec:
        spec = self.get(attestation_id)
        if spec is None:
            raise UnknownAttestationID(attestation_id)
        return spec

    def display_name(self, attestation_id: int) -> str:
        spec = self.get(attestation_id)
        return spec.name if spec else ""

    def ids(self) -> Tuple[int, ...]:
        return tuple(sorted(self._by_id))

    def __contains__(self, attestation_id: object) -> bool:
        return isinstance(attestation_id, int) and attestation_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)


DEFAULT_REGISTRY = AttestationRegistry()


def resolve_vk_path(
    attestation_id: int,
    vk_dir: Union[str, Path],
    registry: AttestationRegistry = DEFAULT_REGISTRY,
) -> Path:
    """
    Join ``vk_dir`` with the key file registered for ``attestation_id``.

    Raises UnknownAttestationID for tags outside the table.
    """
    spec = registry.resolve(attestation_id)
    return Path(vk_dir) / spec.vk_file


__all__ = [
    "AttestationKind",
    "AttestationSpec",
    "AttestationRegistry",
    "DEFAULT_SPECS",
    "DEFAULT_REGISTRY",
    "resolve_vk_path",
]
