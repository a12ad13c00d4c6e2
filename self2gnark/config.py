"""Environment-driven settings for the self2gnark tool.

Command-line flags always take precedence over what is loaded here.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_VK_DIRNAME = "self-vkeys"

ENV_VK_DIR = "SELF2GNARK_VK_DIR"
ENV_LOG_LEVEL = "SELF2GNARK_LOG_LEVEL"


@dataclass(frozen=True)
class ToolConfig:
    vk_dir: Optional[Path]
    log_level: str

    def default_vk_dir(self, proof_path: Path) -> Path:
        """Key directory used when --vk-dir is not given."""
        if self.vk_dir is not None:
            return self.vk_dir
        return proof_path.parent / ".." / DEFAULT_VK_DIRNAME


def load_config() -> ToolConfig:
    vk_dir = os.getenv(ENV_VK_DIR) or None
    level = (os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
    return ToolConfig(vk_dir=Path(vk_dir) if vk_dir else None, log_level=level)


__all__ = [
    "ToolConfig",
    "load_config",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_VK_DIRNAME",
    "ENV_VK_DIR",
    "ENV_LOG_LEVEL",
]
