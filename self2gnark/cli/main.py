"""
self2gnark.cli.main
===================

Verify a captured identity proof (or a standalone snarkjs proof) with the
BN254 pairing check, then optionally decode the disclosed identity fields
and export gnark binary artifacts.

Examples:
  # From captured proof (auto-selects vkey by attestationId):
  self2gnark --proof ../proofs/<id>.json

  # From captured proof with explicit vkey:
  self2gnark --proof ../proofs/<id>.json --vk ../self-vkeys/vc_and_disclose.json

  # From standalone snarkjs files:
  self2gnark --proof-only proof.json --vk vkey.json --public-signals public_signals.json

  # Decode identity and export for a gnark verifier:
  self2gnark --proof ../proofs/<id>.json --decode --export-gnark out/

Exit status is 0 for a verified proof and 1 for an invalid proof or any error.
"""
from __future__ import annotations

import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ..config import ToolConfig, load_config
from ..errors import Self2GnarkError, UsageError
from ..pipeline import RunOptions, RunResult, run as run_pipeline
from ..registry import DEFAULT_REGISTRY
from ..version import __version__

LOGGER_NAME = "self2gnark"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

USAGE_EXAMPLES = """Usage:
  # From captured proof (auto-selects vkey by attestationId):
  self2gnark --proof ../proofs/<id>.json

  # From captured proof with explicit vkey:
  self2gnark --proof ../proofs/<id>.json --vk ../self-vkeys/vc_and_disclose.json

  # From standalone snarkjs files:
  self2gnark --proof-only proof.json --vk vkey.json --public-signals public_signals.json
"""

log = logging.getLogger(__name__)


class Layout(str, Enum):
    id_card = "id-card"
    passport = "passport"
    auto = "auto"


def configure_logging(level: str) -> logging.Logger:
    """
    Install a single stderr handler on the package logger. Calling it again
    replaces the handler it installed before. An unknown level name raises
    UsageError.
    """
    lvl = getattr(logging, level.upper(), None)
    if not isinstance(lvl, int):
        raise UsageError(f"unknown log level '{level}'")
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        if getattr(h, "_self2gnark", False):
            logger.removeHandler(h)
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter(LOG_FORMAT))
    h._self2gnark = True  # type: ignore[attr-defined]
    logger.addHandler(h)
    logger.setLevel(lvl)
    return logger


def _version_cb(value: bool) -> None:
    if value:
        typer.echo(f"self2gnark {__version__}")
        raise typer.Exit(0)


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1.0:
        return f"{seconds * 1000.0:.3f}ms"
    return f"{seconds:.3f}s"


def _human_report(console: Console, result: RunResult) -> None:
    if not result.verified:
        console.print(f"[bold red]PROOF INVALID[/] (took {_fmt_elapsed(result.elapsed)})")
        return
    console.print(f"[bold green]PROOF VERIFIED[/] in {_fmt_elapsed(result.elapsed)}")

    if result.identity is not None:
        t = Table(title="Identity", box=box.SIMPLE)
        t.add_column("Field")
        t.add_column("Value")
        for k, v in result.identity.items():
            t.add_row(k, v)
        console.print(t)

    if result.artifacts is not None:
        t = Table(title=f"Exported to {result.artifacts.directory}", box=box.SIMPLE)
        t.add_column("File")
        t.add_column("Bytes", justify="right")
        for name, size in result.artifacts.sizes.items():
            t.add_row(name, str(size))
        console.print(t)


def _print_json(obj: Dict[str, Any]) -> None:
    typer.echo(json.dumps(obj, indent=2, sort_keys=True))


def build_app() -> typer.Typer:
    app = typer.Typer(
        name="self2gnark",
        help="Verify Self identity Groth16 proofs and export them for gnark",
        add_completion=False,
    )

    @app.command()
    def main(
        proof: Optional[Path] = typer.Option(None, "--proof", help="Path to captured proof JSON file"),
        vk: Optional[Path] = typer.Option(
            None, "--vk", help="Path to verification key JSON file (overrides auto-detection)"
        ),
        vk_dir: Optional[Path] = typer.Option(
            None, "--vk-dir", help="Directory containing vkey files (default: <proof dir>/../self-vkeys)"
        ),
        proof_only: Optional[Path] = typer.Option(
            None, "--proof-only", help="Path to standalone proof JSON file (snarkjs format)"
        ),
        public_signals: Optional[Path] = typer.Option(
            None, "--public-signals", help="Path to standalone public signals JSON file"
        ),
        export_gnark: Optional[Path] = typer.Option(
            None, "--export-gnark", help="Directory to export proof.bin, vk.bin, public_inputs.bin, identity.json"
        ),
        decode: bool = typer.Option(False, "--decode", help="Decode identity fields from public signals"),
        layout: Layout = typer.Option(Layout.id_card, "--layout", help="Signal layout used by --decode"),
        json_out: bool = typer.Option(False, "--json", help="Print machine-readable JSON result"),
        log_level: Optional[str] = typer.Option(
            None, "--log-level", help="Log level (default: $SELF2GNARK_LOG_LEVEL or INFO)"
        ),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
        version: bool = typer.Option(
            False, "--version", "-V", help="Print version and exit", is_eager=True, callback=_version_cb
        ),
    ) -> None:
        """
        Verify a proof. Exits 0 when it verifies, 1 otherwise.
        """
        config: ToolConfig = load_config()
        try:
            configure_logging("WARNING" if quiet else (log_level or config.log_level))
        except UsageError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(1)

        if proof is None and proof_only is None:
            typer.echo(USAGE_EXAMPLES)
            raise typer.Exit(1)

        options = RunOptions(
            proof_path=proof,
            vk_path=vk,
            vk_dir=vk_dir,
            proof_only_path=proof_only,
            public_signals_path=public_signals,
            export_dir=export_gnark,
            decode=decode,
            layout=layout.value,
        )
        try:
            result = run_pipeline(options, config=config, registry=DEFAULT_REGISTRY)
        except Self2GnarkError as e:
            log.error("%s", e)
            if json_out:
                _print_json({"ok": False, "verified": False, "error": e.to_dict()})
            raise typer.Exit(1)

        if json_out:
            _print_json(result.to_dict())
        else:
            _human_report(Console(), result)
        if not result.verified:
            raise typer.Exit(1)

    return app


app = build_app()


def run() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":  # pragma: no cover
    run()
