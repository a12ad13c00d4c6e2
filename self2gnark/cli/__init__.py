"""Command-line interface for self2gnark (``self2gnark`` / ``python -m self2gnark``)."""

from .main import app, build_app, configure_logging, run

__all__ = ["app", "build_app", "configure_logging", "run"]
