"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdcrdt.cli.commands import html_cmd, seed_cmd, tree_cmd


app = typer.Typer(name="mdcrdt", no_args_is_help=True, help="Deterministic collaborative document seeding from markdown")

app.command(name="seed")(seed_cmd)
app.command(name="html")(html_cmd)
app.command(name="tree")(tree_cmd)
