"""json2dcp command-line interface module.

Components:
- main: Typer application and entry point
- helper: CLI utility functions
"""

from json2dcp.cli.main import app, main

__all__ = ["app", "main"]
