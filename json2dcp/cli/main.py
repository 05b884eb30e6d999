"""Command-line entry point converting a nextpnr JSON netlist to a checkpoint."""

from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from pydantic import ValidationError

from json2dcp.cli.helper import setup_logger
from json2dcp.core import Context, Transform
from json2dcp.utils.exceptions import ConversionError
from json2dcp.utils.settings import init_context

app = typer.Typer(
    help="Convert a routed nextpnr JSON netlist into a design checkpoint.",
    add_completion=False,
)


@app.command()
def convert(
    device: Annotated[
        str,
        typer.Argument(help="Part identifier, e.g. xczu2cg-sbva484-1-e."),
    ],
    design_json: Annotated[
        Path,
        typer.Argument(help="Routed JSON netlist written by nextpnr."),
    ],
    checkpoint: Annotated[
        Path,
        typer.Argument(help="Output checkpoint path."),
    ],
    device_dir: Annotated[
        Path | None,
        typer.Option(
            "--device-dir",
            "-d",
            help="Directory with <part>.yaml device descriptions (default: $J2D_DEVICE_DIR or cwd).",
        ),
    ] = None,
    env_file: Annotated[
        Path | None,
        typer.Option("--env-file", help="Read settings from this .env file."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase log verbosity (-v debug, -vv trace)."),
    ] = 0,
) -> None:
    """Convert DESIGN_JSON for DEVICE and write CHECKPOINT."""
    setup_logger(verbose)
    try:
        settings = init_context(device_dir=device_dir, dot_env=env_file)
    except ValidationError as e:
        logger.error(f"Invalid settings: {e}")
        raise typer.Exit(1) from None
    setup_logger(verbose, settings.log_level)

    try:
        context = Context()
        context.load_device(settings.device_dir, device)
        context.load_netlist(design_json)

        transform = Transform(context, settings.io_wrapper_types)
        transform.decode_routes()
        design, _ = transform.emit(settings.design_name)
        transform.write(design, checkpoint, settings.checkpoint_indent)
    except (ConversionError, FileNotFoundError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        raise typer.Exit(1) from None


def main() -> None:
    app()
