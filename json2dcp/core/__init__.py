"""Core netlist conversion pipeline.

This module provides the processing pipeline architecture for the converter:
- Reader: Parses the JSON document → NetlistModule
- Builder: Links nets, cells and ports → Netlist
- Context: Holds netlist and device state
- Transform: Decodes routes and emits the target design

Example Pipeline
----------------
::

    from json2dcp.core import Context, Transform

    context = Context()
    context.load_device(Path("devices"), "xczu2cg-sbva484-1-e")
    context.load_netlist(Path("top_routed.json"))

    transform = Transform(context)
    transform.decode_routes()
    design, report = transform.emit()
    transform.write(design, Path("top_routed.dcp"))
"""

from json2dcp.core.builder import build_netlist
from json2dcp.core.context import Context
from json2dcp.core.provenance import CellDecision, Primitive, Reconciler
from json2dcp.core.reader import JSONReader, NetlistModule, Reader, create_reader
from json2dcp.core.routing import HopDecision, RouteDecoder
from json2dcp.core.transform import EmissionReport, Transform

__all__ = [
    "CellDecision",
    "Context",
    "EmissionReport",
    "HopDecision",
    "JSONReader",
    "NetlistModule",
    "Primitive",
    "Reader",
    "Reconciler",
    "RouteDecoder",
    "Transform",
    "build_netlist",
    "create_reader",
]
