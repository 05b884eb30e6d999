"""Conversion transforms - decode routes and emit the target design.

Transforms run after the netlist graph is complete. Route decoding attaches
hops to the nets; emission then walks the finished graph once and builds a
:class:`~json2dcp.backend.design.Design` from it.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from json2dcp.backend.design import Design, DesignCell, escape_name, write_checkpoint
from json2dcp.core.context import Context
from json2dcp.core.provenance import DEFAULT_WRAPPER_TYPES, CellDecision, Reconciler
from json2dcp.core.routing import RouteDecoder
from json2dcp.model.netlist import Net, PortRef


@dataclass
class EmissionReport:
    """
    What an emission pass produced and what it left out.

    Attributes
    ----------
    cells : Counter[CellDecision]
        Number of cells per emission decision.
    nets : int
        Number of nets created.
    connections : list[tuple[str, str, str]]
        ``(net, cell, pin)`` for every connection made.
    omitted_endpoints : list[PortRef]
        Endpoints of emitted cells without an original port name.
    pips : int
        Number of PIPs added.
    """

    cells: Counter = field(default_factory=Counter)
    nets: int = 0
    connections: list[tuple[str, str, str]] = field(default_factory=list)
    omitted_endpoints: list[PortRef] = field(default_factory=list)
    pips: int = 0

    def summary(self) -> str:
        return (
            f"{self.cells[CellDecision.EMIT]} cells emitted, "
            f"{sum(self.cells.values()) - self.cells[CellDecision.EMIT]} skipped, "
            f"{self.nets} nets, {len(self.connections)} connections, "
            f"{len(self.omitted_endpoints)} unmapped endpoints, {self.pips} PIPs"
        )


class Transform:
    """Conversion pipeline stage operating on a :class:`Context`.

    Parameters
    ----------
    context : Context
        The processing context holding netlist and device
    wrapper_types : frozenset[str], optional
        Cell types excluded from emission

    Attributes
    ----------
    context : Context
        Reference to the processing context
    reconciler : Reconciler
        Emission policy for cells and ports
    """

    def __init__(self, context: Context, wrapper_types: frozenset[str] = DEFAULT_WRAPPER_TYPES) -> None:
        self.context = context
        self.reconciler = Reconciler(wrapper_types)

    def decode_routes(self) -> int:
        """Transform: Decode the routing attribute of every net.

        Returns
        -------
        int
            Total number of hops kept

        Raises
        ------
        ParseError
            If a PIP descriptor is malformed
        DeviceLookupError
            If a PIP names a tile the device does not have
        """
        netlist, device = self.context.require()
        decoder = RouteDecoder(device)
        return sum(len(decoder.decode_net(net)) for net in netlist.nets.values())

    def emit(self, design_name: str = "top") -> tuple[Design, EmissionReport]:
        """Transform: Build the target design from the netlist.

        Routes must have been decoded with :meth:`decode_routes` first.

        Parameters
        ----------
        design_name : str, optional
            Name of the target design. Default ``top``.

        Returns
        -------
        tuple[Design, EmissionReport]
            The built design and a report of what was emitted

        Raises
        ------
        EmissionError
            If a primitive cannot be created, placed or connected
        """
        netlist, device = self.context.require()
        design = Design(design_name, device)
        report = EmissionReport()

        placed: dict[str, DesignCell] = {}
        for cell in netlist.cells.values():
            report.cells[self.reconciler.decide(cell)] += 1
            primitive = self.reconciler.primitive(cell)
            if primitive is None:
                continue
            logger.trace(f"Placing {cell.name} as {primitive.type} at {primitive.site}")
            placed[cell.name] = design.create_and_place_cell(cell.name, primitive.type, primitive.site)

        for net in netlist.nets.values():
            self._emit_net(net, design, placed, report)

        logger.info(f"Emitted design {design_name}: {report.summary()}")
        return design, report

    def _emit_net(self, net: Net, design: Design, placed: dict[str, DesignCell], report: EmissionReport) -> None:
        netlist, device = self.context.require()
        design_net = design.create_net(escape_name(net.name))
        report.nets += 1

        for ref in net.endpoints:
            if ref.cell not in placed:
                continue
            pin = self.reconciler.endpoint_pin(netlist.cells[ref.cell], ref)
            if pin is None:
                report.omitted_endpoints.append(ref)
                continue
            design_net.connect(placed[ref.cell], pin)
            report.connections.append((design_net.name, ref.cell, pin))

        for hop in net.routing:
            design_net.add_pip(device.get_tile(hop.tile).get_pip(hop.src, hop.dst))
            report.pips += 1

    def write(self, design: Design, output: Path, indent: int | None = None) -> None:
        """Export: Write a design checkpoint.

        Raises
        ------
        EmissionError
            If the checkpoint cannot be written
        """
        write_checkpoint(design, output, indent)
        logger.info(f"Checkpoint written to {output}")
