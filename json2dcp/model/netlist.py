"""Netlist graph entities rebuilt from a nextpnr JSON document.

Ports and nets refer to each other by key rather than by object: a
:class:`Port` stores the bit index of its net and a :class:`Net` stores
:class:`PortRef` keys for its driver and users. The :class:`Netlist` is the
central registry that resolves both kinds of keys.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from json2dcp.utils.exceptions import ParseError, UnknownDirectionError


class PortDirection(Enum):
    """Signal direction of a cell port, valued by its JSON spelling."""

    INPUT = "input"
    OUTPUT = "output"
    INOUT = "inout"

    @classmethod
    def parse(cls, value: object) -> "PortDirection":
        """Parse a ``port_directions`` value.

        Parameters
        ----------
        value : object
            Raw value read from the JSON document.

        Returns
        -------
        PortDirection
            The matching direction.

        Raises
        ------
        UnknownDirectionError
            If the value is not one of ``input``, ``output`` or ``inout``.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownDirectionError(f"bad port direction {value!r}") from None


class PortRef(NamedTuple):
    """Registry key of a port: owning cell name and port name."""

    cell: str
    port: str

    def __str__(self) -> str:
        return f"{self.cell}.{self.port}"


@dataclass(frozen=True)
class RoutingHop:
    """A programmable interconnect point used by a net inside one tile.

    Attributes
    ----------
    tile : str
        Name of the tile the PIP belongs to.
    src : int
        Source wire index within the tile.
    dst : int
        Destination wire index within the tile.
    """

    tile: str
    src: int
    dst: int


@dataclass
class Port:
    """A named connection point on a cell.

    Attributes
    ----------
    cell : str
        Name of the owning cell, fixed at construction.
    name : str
        Port name on the mapped cell.
    direction : PortDirection
        Signal direction, fixed at construction.
    net : int | None
        Bit index of the connected net, None while unconnected.
    """

    cell: str
    name: str
    direction: PortDirection
    net: int | None = None

    @property
    def ref(self) -> PortRef:
        return PortRef(self.cell, self.name)

    @property
    def is_driver(self) -> bool:
        """Only output ports drive a net, inout ports are always users."""
        return self.direction is PortDirection.OUTPUT

    def connect(self, net: int) -> None:
        """Bind the port to a net. A port is bound at most once.

        Raises
        ------
        ParseError
            If the port is already connected.
        """
        if self.net is not None:
            raise ParseError(f"Port {self.ref} is already connected to net {self.net}")
        self.net = net


@dataclass
class Net:
    """A single signal of the design, keyed by its first bit index.

    Attributes
    ----------
    index : int
        Bit index taken from the first element of ``bits``.
    name : str
        Net name as found in ``netnames``.
    attributes : dict[str, str]
        Net attributes, values coerced to strings.
    driver : PortRef | None
        The output port driving this net.
    users : list[PortRef]
        Input and inout ports reading this net.
    routing : list[RoutingHop]
        Decoded inter-tile routing, filled by the route decoder.
    """

    index: int
    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    driver: PortRef | None = None
    users: list[PortRef] = field(default_factory=list)
    routing: list[RoutingHop] = field(default_factory=list)

    @property
    def endpoints(self) -> list[PortRef]:
        """Driver first (when present), then users in connection order."""
        if self.driver is None:
            return list(self.users)
        return [self.driver, *self.users]


@dataclass
class Cell:
    """A cell instance of the mapped design.

    Attributes
    ----------
    name : str
        Unique cell name.
    type : str
        Cell type as produced by synthesis and technology mapping.
    ports : dict[str, Port]
        Ports of the cell keyed by name.
    attributes : dict[str, str]
        Cell attributes, values coerced to strings.
    parameters : dict[str, str]
        Cell parameters, kept as raw strings.
    """

    name: str
    type: str
    ports: dict[str, Port] = field(default_factory=dict)
    attributes: dict[str, str] = field(default_factory=dict)
    parameters: dict[str, str] = field(default_factory=dict)

    def add_port(self, name: str, direction: PortDirection) -> Port:
        port = Port(self.name, name, direction)
        self.ports[name] = port
        return port


@dataclass
class Netlist:
    """Registry of all nets and cells of the top module.

    Attributes
    ----------
    module : str
        Name of the module the netlist was built from.
    nets : dict[int, Net]
        Nets keyed by bit index.
    cells : dict[str, Cell]
        Cells keyed by name.
    """

    module: str
    nets: dict[int, Net] = field(default_factory=dict)
    cells: dict[str, Cell] = field(default_factory=dict)

    def port(self, ref: PortRef) -> Port:
        """Resolve a port key to its :class:`Port`.

        Raises
        ------
        KeyError
            If the cell or the port does not exist.
        """
        return self.cells[ref.cell].ports[ref.port]

    def net_of(self, port: Port) -> Net | None:
        if port.net is None:
            return None
        return self.nets[port.net]

    def summary(self) -> dict[str, int]:
        """Count the entities of the netlist for reporting."""
        return {
            "cells": len(self.cells),
            "nets": len(self.nets),
            "ports": sum(len(c.ports) for c in self.cells.values()),
            "driven_nets": sum(1 for n in self.nets.values() if n.driver is not None),
        }
