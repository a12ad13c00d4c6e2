"""
Version of the self2gnark package.

It can be overridden at build time with the env var SELF2GNARK_VERSION.
"""

from __future__ import annotations

import os

__version__ = os.getenv("SELF2GNARK_VERSION", "0.1.0")

__all__ = ["__version__"]
