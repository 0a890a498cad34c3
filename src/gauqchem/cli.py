from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from gauqchem.errors import BridgeError
from gauqchem.gaussian.request import read_request
from gauqchem.log import attach_message_file, detach, get_logger
from gauqchem.qchem.render import write_input
from gauqchem.settings import load_settings
from gauqchem.workflow.translate import REPORT_PARSERS, translate, translate_files

app = typer.Typer(help="Gaussian External= bridge to Q-Chem")


def _fail(exc: Exception) -> None:
    get_logger().error(f"ERROR: {exc}")
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def external(
    layer: str = typer.Argument(..., help="ONIOM layer name passed by Gaussian (R, M, S, ...)"),
    input_file: Path = typer.Argument(..., help="Gaussian InputFile"),
    output_file: Path = typer.Argument(..., help="Gaussian OutputFile"),
    msg_file: Optional[Path] = typer.Argument(None, help="Gaussian MsgFile"),
    fchk_file: Optional[Path] = typer.Argument(None, help="Gaussian FChkFile (unused)"),
    matel_file: Optional[Path] = typer.Argument(None, help="Gaussian MatElFile (unused)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML settings file"),
):
    """Entry point for Gaussian: External="gauqchem external"."""
    handler = attach_message_file(msg_file)
    try:
        settings = load_settings(config)
        translate(input_file, output_file, settings, layer=layer)
    except (BridgeError, OSError) as exc:
        _fail(exc)
    finally:
        detach(handler)


@app.command()
def convert(
    request: Path = typer.Argument(..., help="Gaussian InputFile"),
    report: Path = typer.Argument(..., help="Q-Chem output (or .fchk with --source fchk)"),
    output: Path = typer.Argument(..., help="Where to write the Gaussian OutputFile"),
    source: str = typer.Option("output", "--source", "-s", help="output | fchk"),
):
    """Translate an existing Q-Chem report without running Q-Chem."""
    if source not in REPORT_PARSERS:
        raise typer.BadParameter(f"Unknown source '{source}'. Choose one of {list(REPORT_PARSERS)}")
    try:
        translate_files(request, report, output, source=source)
    except BridgeError as exc:
        _fail(exc)
    typer.secho(f"Wrote {output}", fg=typer.colors.GREEN)


@app.command()
def decode(request: Path = typer.Argument(..., help="Gaussian InputFile")):
    """Print the decoded request as JSON."""
    try:
        calc = read_request(request)
    except BridgeError as exc:
        _fail(exc)
    typer.echo(json.dumps(calc.to_dict(), indent=2))


@app.command()
def render(
    request: Path = typer.Argument(..., help="Gaussian InputFile"),
    out: Path = typer.Argument(..., help="Where to write the Q-Chem input"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML settings file"),
):
    """Write the Q-Chem input for a request without running it."""
    try:
        calc = read_request(request)
        settings = load_settings(config)
    except BridgeError as exc:
        _fail(exc)
    write_input(calc, settings, out)
    typer.secho(f"Wrote {out}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
