"""Netlist graph builder.

Turns the raw :class:`~json2dcp.core.reader.NetlistModule` tree into a
:class:`~json2dcp.model.netlist.Netlist`. Nets are built first because cell
connections refer to them by bit index.
"""

from typing import Any

from loguru import logger

from json2dcp.core.reader import NetlistModule
from json2dcp.model.netlist import Cell, Net, Netlist, PortDirection
from json2dcp.utils.exceptions import MissingNetReferenceError, ParseError

"""
Logic constants that may appear in a Yosys bit vector instead of a signal ID.
"""
CONSTANT_BITS = frozenset({"0", "1", "x", "z"})


def as_str(value: Any) -> str:
    """Coerce a scalar JSON value to its string form.

    Booleans use the JSON spelling, ``null`` becomes the empty string.

    Raises
    ------
    ParseError
        If the value is an object or an array.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ParseError(f"Expected a scalar value, got {type(value).__name__}")
    return str(value)


def as_section(section: Any, where: str) -> dict[str, Any]:
    """Return an optional object section, empty when absent.

    Raises
    ------
    ParseError
        If the section is present but not an object.
    """
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ParseError(f"{where} must be an object")
    return section


def as_str_map(section: Any, where: str) -> dict[str, str]:
    section = as_section(section, where)
    return {k: as_str(v) for k, v in section.items()}


def first_bit(bits: Any, where: str) -> int | None:
    """Return the signal ID of the first bit, None for a logic constant.

    Raises
    ------
    ParseError
        If ``bits`` is not an array or holds something other than an integer
        or a logic constant.
    """
    if not isinstance(bits, list):
        raise ParseError(f"{where}: bits must be an array")
    if not bits:
        return None
    bit = bits[0]
    if isinstance(bit, int) and not isinstance(bit, bool):
        return bit
    if isinstance(bit, str):
        if bit in CONSTANT_BITS:
            return None
        if bit.isdecimal():
            return int(bit)
    raise ParseError(f"{where}: invalid bit {bit!r}")


def build_netlist(module: NetlistModule) -> Netlist:
    """Build the netlist graph of a module in two passes.

    Parameters
    ----------
    module : NetlistModule
        Structural tree produced by a reader.

    Returns
    -------
    Netlist
        The linked netlist graph.

    Raises
    ------
    ParseError
        If a section has the wrong shape.
    UnknownDirectionError
        If a port direction is not input, output or inout.
    MissingNetReferenceError
        If a connection names a bit index that no net declares.
    """
    netlist = Netlist(module.name)
    _build_nets(netlist, module.netnames)
    _build_cells(netlist, module.cells)
    logger.debug(f"Built netlist {module.name}: {netlist.summary()}")
    return netlist


def _build_nets(netlist: Netlist, netnames: dict[str, Any]) -> None:
    for name, data in netnames.items():
        if not isinstance(data, dict):
            raise ParseError(f"Net {name} is not an object")
        if not data.get("bits"):
            raise ParseError(f"Net {name} has no bits")
        index = first_bit(data["bits"], f"Net {name}")
        if index is None:
            logger.trace(f"Net {name} is tied to a constant, skipped")
            continue
        if index in netlist.nets:
            logger.debug(f"Net {name} reuses bit {index} of {netlist.nets[index].name}")
        netlist.nets[index] = Net(
            index=index,
            name=name,
            attributes=as_str_map(data.get("attributes"), f"Net {name} attributes"),
        )


def _build_cells(netlist: Netlist, cells: dict[str, Any]) -> None:
    for name, data in cells.items():
        if not isinstance(data, dict):
            raise ParseError(f"Cell {name} is not an object")
        if "type" not in data:
            raise ParseError(f"Cell {name} has no type")
        cell = Cell(name, as_str(data["type"]))

        for port_name, direction in as_section(data.get("port_directions"), f"Cell {name} port_directions").items():
            cell.add_port(port_name, PortDirection.parse(direction))

        for port_name, bits in as_section(data.get("connections"), f"Cell {name} connections").items():
            port = cell.ports.get(port_name)
            if port is None:
                raise ParseError(f"Cell {name} connects undeclared port {port_name}")
            index = first_bit(bits, f"Cell {name} port {port_name}")
            if index is None:
                continue
            net = netlist.nets.get(index)
            if net is None:
                raise MissingNetReferenceError(f"Cell {name} port {port_name} references unknown net {index}")
            port.connect(index)
            if port.is_driver:
                if net.driver is not None:
                    logger.warning(f"Net {net.name} driver {net.driver} replaced by {port.ref}")
                net.driver = port.ref
            else:
                net.users.append(port.ref)

        cell.attributes = as_str_map(data.get("attributes"), f"Cell {name} attributes")
        cell.parameters = as_str_map(data.get("parameters"), f"Cell {name} parameters")
        netlist.cells[name] = cell
