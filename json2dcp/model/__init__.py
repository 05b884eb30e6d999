"""json2dcp data model module.

This module contains the netlist graph entities.

Components:
- netlist: Net, Cell, Port and the Netlist registry
"""

from json2dcp.model.netlist import (
    Cell,
    Net,
    Netlist,
    Port,
    PortDirection,
    PortRef,
    RoutingHop,
)

__all__ = [
    "Cell",
    "Net",
    "Netlist",
    "Port",
    "PortDirection",
    "PortRef",
    "RoutingHop",
]
