"""Decode the ``ROUTING`` attribute nextpnr attaches to routed nets.

The attribute is a flat ``;`` separated list read in groups of three fields:
wire name, PIP descriptor and a field this decoder does not use. A PIP
descriptor is either empty, a ``SITEPIP`` entry, or ``<tile>/<src>.<dst>``.
"""

from collections.abc import Iterator
from enum import Enum

from loguru import logger

from json2dcp.backend.device import DeviceDatabase
from json2dcp.model.netlist import Net, RoutingHop
from json2dcp.utils.exceptions import ParseError

ROUTING_ATTR = "ROUTING"
SITE_PIP_MARKER = "SITEPIP"
FIELDS_PER_HOP = 3


class HopDecision(Enum):
    """Outcome of decoding one routing group."""

    KEEP = "keep"
    OMIT_EMPTY = "omit_empty"
    OMIT_SITE_PIP = "omit_site_pip"
    OMIT_OUT_OF_BOUNDS = "omit_out_of_bounds"


def split_groups(routing: str) -> Iterator[tuple[str, str]]:
    """Yield ``(wire, pip)`` pairs from a routing string.

    A trailing group without a PIP field yields an empty PIP.
    """
    if not routing:
        return
    fields = routing.split(";")
    for i in range(0, len(fields), FIELDS_PER_HOP):
        wire = fields[i]
        pip = fields[i + 1] if i + 1 < len(fields) else ""
        yield wire, pip


def parse_pip(pip: str) -> RoutingHop:
    """Parse a ``<tile>/<src>.<dst>`` descriptor.

    Raises
    ------
    ParseError
        If the descriptor does not have that form.
    """
    tile, sep, wires = pip.partition("/")
    src, dot, dst = wires.partition(".")
    if not (tile and sep and dot) or not (src.isdecimal() and dst.isdecimal()):
        raise ParseError(f"Malformed PIP descriptor {pip!r}")
    return RoutingHop(tile, int(src), int(dst))


class RouteDecoder:
    """Decode routing strings against a device database.

    Parameters
    ----------
    device : DeviceDatabase
        Device supplying tile wire counts.
    """

    def __init__(self, device: DeviceDatabase) -> None:
        self.device = device

    def classify(self, pip: str) -> tuple[HopDecision, RoutingHop | None]:
        """Decide whether one PIP descriptor becomes a hop.

        Returns
        -------
        tuple[HopDecision, RoutingHop | None]
            The decision and the hop, the hop is None unless kept.

        Raises
        ------
        ParseError
            If the descriptor is malformed.
        DeviceLookupError
            If the tile does not exist on the device.
        """
        if not pip:
            return HopDecision.OMIT_EMPTY, None
        if pip.startswith(SITE_PIP_MARKER):
            return HopDecision.OMIT_SITE_PIP, None
        hop = parse_pip(pip)
        wire_count = self.device.get_tile(hop.tile).wire_count
        if hop.src >= wire_count or hop.dst >= wire_count:
            return HopDecision.OMIT_OUT_OF_BOUNDS, None
        return HopDecision.KEEP, hop

    def decode(self, routing: str) -> list[RoutingHop]:
        """Decode a routing string into its inter-tile hops, in field order."""
        hops: list[RoutingHop] = []
        for wire, pip in split_groups(routing):
            decision, hop = self.classify(pip)
            if hop is None:
                if decision is HopDecision.OMIT_OUT_OF_BOUNDS:
                    logger.debug(f"PIP {pip} on wire {wire} is out of bounds, skipped")
                continue
            hops.append(hop)
        return hops

    def decode_net(self, net: Net) -> list[RoutingHop]:
        """Decode the ``ROUTING`` attribute of a net and store the hops on it."""
        net.routing = self.decode(net.attributes.get(ROUTING_ATTR, ""))
        return net.routing
