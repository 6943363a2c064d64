"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdcrdt.config import Settings, load_config
from mdcrdt.core.pipeline import build_tree, render_html, run_seed
from mdcrdt.logging_utils import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then set up logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)


def seed_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown or text file to seed from")],
    out: Annotated[Optional[Path], typer.Option("--out", "-o", help="Update output file")] = None,
    plain: Annotated[bool, typer.Option("--plain", help="Seed a plain text document")] = False,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
    ):
    """Write the deterministic initial CRDT update for a file."""
    settings = _settings(overrides={"parser_config": parser, "log_level": log_level})
    try:
        out_path, digest = run_seed(path, out, not plain, settings)
    except RuntimeError as e:
        _fail(str(e))
    except Exception as e:
        _fail("Seeding failed", e)
    typer.echo(f"  {path} -> {out_path}")
    typer.echo(f"sha256 {digest}")


def html_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to render")],
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Print the editor HTML with blank-line runs restored."""
    settings = _settings(overrides={"parser_config": parser})
    typer.echo(render_html(_read(path), settings), nl=False)


def tree_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown or text file to convert")],
    plain: Annotated[bool, typer.Option("--plain", help="Build a plain text document")] = False,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Print the structured document tree as JSON."""
    settings = _settings(overrides={"parser_config": parser})
    tree = build_tree(_read(path), not plain, settings)
    typer.echo(json.dumps(tree.to_json(), indent=2, ensure_ascii=False))
