"""Netlist input readers - parse nextpnr JSON documents into a module tree.

This module provides the input layer of the processing pipeline. Readers only
check the structural presence of the sections the builder needs; type
coercion and value validation are left to :mod:`json2dcp.core.builder`.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from json2dcp.utils.exceptions import ParseError


@dataclass
class NetlistModule:
    """
    Structural tree of the top-level module of a nextpnr JSON document.

    Attributes
    ----------
    name : str
        Module name.
    attributes : dict[str, Any]
        Module attributes (e.g. ``top``).
    netnames : dict[str, Any]
        Raw ``netnames`` section, net name to net details.
    cells : dict[str, Any]
        Raw ``cells`` section, cell name to cell details.
    creator : str
        Tool that wrote the document, empty when absent.
    """

    name: str
    attributes: dict[str, Any]
    netnames: dict[str, Any]
    cells: dict[str, Any]
    creator: str = ""


class Reader(ABC):
    """Abstract base for netlist input parsers."""

    @abstractmethod
    def read(self, path: Path) -> NetlistModule:
        """Parse input file and return the top-level module tree.

        Parameters
        ----------
        path : Path
            Path to the netlist document

        Returns
        -------
        NetlistModule
            Parsed top-level module
        """
        ...


class JSONReader(Reader):
    """nextpnr/Yosys JSON netlist reader."""

    def read(self, path: Path) -> NetlistModule:
        """Read a JSON netlist from disk.

        Parameters
        ----------
        path : Path
            Path to the JSON document

        Returns
        -------
        NetlistModule
            Parsed top-level module

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ParseError
            If the document is malformed or incomplete.
        """
        if not path.exists():
            raise FileNotFoundError(f"{path} does not exist")
        logger.info(f"Reading netlist {path}")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ParseError(f"Cannot read netlist {path}: {e}") from e
        return self.loads(data)

    def loads(self, text: str | bytes) -> NetlistModule:
        """Parse JSON netlist text.

        Parameters
        ----------
        text : str | bytes
            Raw document text, bytes are decoded as UTF-8

        Returns
        -------
        NetlistModule
            Parsed top-level module

        Raises
        ------
        ParseError
            If the text is not valid JSON, has no modules, or the selected
            module lacks a ``netnames`` or ``cells`` section.
        """
        try:
            o = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Invalid JSON netlist: {e}") from e

        if not isinstance(o, dict):
            raise ParseError("JSON netlist must be an object")

        modules = o.get("modules")
        if not isinstance(modules, dict) or not modules:
            raise ParseError("JSON netlist has no modules")

        name, module = select_top_module(modules)
        if not isinstance(module, dict):
            raise ParseError(f"Module {name} is not an object")

        for section in ("netnames", "cells"):
            if not isinstance(module.get(section), dict):
                raise ParseError(f"Module {name} has no {section} section")

        if len(modules) > 1:
            logger.warning(f"Netlist has {len(modules)} modules, using {name}")

        return NetlistModule(
            name=name,
            attributes=module.get("attributes", {}),
            netnames=module["netnames"],
            cells=module["cells"],
            creator=o.get("creator", ""),
        )


def select_top_module(modules: dict[str, Any]) -> tuple[str, Any]:
    """Pick the top-level module of a design.

    The module with a ``top`` attribute wins; without one the first module in
    document order is used.

    Parameters
    ----------
    modules : dict[str, Any]
        Non-empty ``modules`` section.

    Returns
    -------
    tuple[str, Any]
        Module name and its raw tree.
    """
    for name, module in modules.items():
        if isinstance(module, dict) and "top" in module.get("attributes", {}):
            return name, module
    return next(iter(modules.items()))


def create_reader(path: Path) -> Reader:
    """Create the reader for a netlist document.

    Any path is read as JSON; an unexpected extension only logs a warning.

    Parameters
    ----------
    path : Path
        Path to netlist document

    Returns
    -------
    Reader
        Appropriate reader instance
    """
    if path.suffix.lower() != ".json":
        logger.warning(f"Reading {path} as a JSON netlist despite its {path.suffix or 'missing'} extension")
    return JSONReader()
