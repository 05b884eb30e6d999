"""In-memory target design and its checkpoint writer.

The design mirrors the physical netlist object model: placed primitive
cells, named nets, pin connections and PIPs. A checkpoint is the JSON
serialization of that model.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from json2dcp.backend.device import DeviceDatabase, Pip
from json2dcp.utils.exceptions import DeviceLookupError, EmissionError


def escape_name(name: str) -> str:
    """Make a netlist name a legal target identifier.

    Backslashes become double underscores and forward slashes become single
    underscores.
    """
    return name.replace("\\", "__").replace("/", "_")


@dataclass
class DesignCell:
    """A placed primitive instance."""

    name: str
    type: str
    site: str
    pins: frozenset[str] | None = None


@dataclass
class DesignPin:
    """A connection of a net to a pin of a placed cell."""

    cell: str
    pin: str


@dataclass
class DesignNet:
    """A physical net with its pin connections and PIPs."""

    name: str
    pins: list[DesignPin] = field(default_factory=list)
    pips: list[Pip] = field(default_factory=list)

    def connect(self, cell: DesignCell, pin: str) -> DesignPin:
        """Connect a pin of a placed cell to this net.

        Raises
        ------
        EmissionError
            If the primitive does not have a pin with that name.
        """
        if cell.pins and pin not in cell.pins:
            raise EmissionError(f"Primitive {cell.type} of cell {cell.name} has no pin {pin}")
        design_pin = DesignPin(cell.name, pin)
        self.pins.append(design_pin)
        return design_pin

    def add_pip(self, pip: Pip) -> None:
        self.pips.append(pip)


class Design:
    """Target design for one part.

    Parameters
    ----------
    name : str
        Design name.
    device : DeviceDatabase
        Device the design is implemented on.

    Attributes
    ----------
    cells : dict[str, DesignCell]
        Placed cells keyed by name.
    nets : dict[str, DesignNet]
        Nets keyed by escaped name.
    """

    def __init__(self, name: str, device: DeviceDatabase) -> None:
        self.name = name
        self.device = device
        self.cells: dict[str, DesignCell] = {}
        self.nets: dict[str, DesignNet] = {}
        self._sites: dict[str, str] = {}

    @property
    def part(self) -> str:
        return self.device.part

    def create_and_place_cell(self, name: str, type_name: str, site: str | None) -> DesignCell:
        """Create a primitive instance and place it on a site.

        Parameters
        ----------
        name : str
            Cell name.
        type_name : str
            Primitive type.
        site : str | None
            Placement site, e.g. ``SLICE_X0Y0/A6LUT``.

        Returns
        -------
        DesignCell
            The placed cell.

        Raises
        ------
        EmissionError
            If the type is unknown, the site is missing or already taken, or
            the name is already used.
        """
        if name in self.cells:
            raise EmissionError(f"Cell {name} already exists in design {self.name}")
        if not site:
            raise EmissionError(f"Cell {name} ({type_name}) has no placement site")
        if site in self._sites:
            raise EmissionError(f"Site {site} of cell {name} is already used by {self._sites[site]}")
        try:
            pins = self.device.primitive_pins(type_name)
        except DeviceLookupError as e:
            raise EmissionError(f"Cannot create cell {name}: {e}") from e

        cell = DesignCell(name, type_name, site, pins)
        self.cells[name] = cell
        self._sites[site] = name
        return cell

    def create_net(self, name: str) -> DesignNet:
        """Create an empty net.

        Raises
        ------
        EmissionError
            If a net with that name already exists.
        """
        if name in self.nets:
            raise EmissionError(f"Net {name} already exists in design {self.name}")
        net = DesignNet(name)
        self.nets[name] = net
        return net

    def to_dict(self) -> dict:
        return {
            "design": self.name,
            "part": self.part,
            "cells": [{"name": c.name, "type": c.type, "site": c.site} for c in self.cells.values()],
            "nets": [
                {
                    "name": n.name,
                    "pins": [f"{p.cell}/{p.pin}" for p in n.pins],
                    "pips": [f"{p.tile}/{p.src}.{p.dst}" for p in n.pips],
                }
                for n in self.nets.values()
            ],
        }


def write_checkpoint(design: Design, path: Path, indent: int | None = None) -> None:
    """Serialize a design to a checkpoint file.

    Parameters
    ----------
    design : Design
        Design to write.
    path : Path
        Output checkpoint path.
    indent : int | None, optional
        JSON indentation, compact output when None.

    Raises
    ------
    EmissionError
        If the file cannot be written.
    """
    logger.info(f"Writing checkpoint {path}")
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(design.to_dict(), f, indent=indent)
    except OSError as e:
        raise EmissionError(f"Failed to write checkpoint {path}: {e}") from e
