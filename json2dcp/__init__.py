"""Convert nextpnr JSON netlists into placed and routed design checkpoints.

Processing Pipeline
-------------------
1. **Reader**: Parse the JSON document → top-level module tree
2. **Builder**: Rebuild nets, cells and ports → Netlist
3. **Transform**: Reconcile identities, decode routes, emit → Design
4. **Checkpoint**: Serialize the Design
"""

from json2dcp.backend import Design, YamlDevice, escape_name, write_checkpoint
from json2dcp.core import Context, Reconciler, RouteDecoder, Transform, build_netlist
from json2dcp.model import Cell, Net, Netlist, Port, PortDirection, RoutingHop

__all__ = [
    "Cell",
    "Context",
    "Design",
    "Net",
    "Netlist",
    "Port",
    "PortDirection",
    "Reconciler",
    "RouteDecoder",
    "RoutingHop",
    "Transform",
    "YamlDevice",
    "build_netlist",
    "escape_name",
    "write_checkpoint",
]
