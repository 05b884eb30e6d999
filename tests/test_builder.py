"""Tests for building the netlist graph."""

from collections.abc import Callable

import pytest

from json2dcp.core.builder import as_str, build_netlist, first_bit
from json2dcp.core.reader import JSONReader
from json2dcp.model.netlist import PortDirection, PortRef
from json2dcp.utils.exceptions import MissingNetReferenceError, ParseError, UnknownDirectionError


def build(text: str):
    return build_netlist(JSONReader().loads(text))


def test_build_links_driver_and_users(make_netlist: Callable, make_cell: Callable) -> None:
    netnames = {"a": {"bits": [2]}, "b": {"bits": [3, 4]}}
    cells = {
        "drv": make_cell("LUT4", {"I0": "input", "O": "output"}, {"I0": [2], "O": [3]}),
        "ld": make_cell("FF", {"D": "input", "Q": "output"}, {"D": [3], "Q": []}),
    }

    netlist = build(make_netlist(netnames, cells))

    assert set(netlist.nets) == {2, 3}
    assert netlist.nets[3].name == "b"
    assert netlist.nets[3].driver == PortRef("drv", "O")
    assert netlist.nets[3].users == [PortRef("ld", "D")]
    assert netlist.nets[2].driver is None
    assert netlist.nets[2].users == [PortRef("drv", "I0")]
    assert netlist.cells["ld"].ports["Q"].net is None
    assert netlist.port(PortRef("drv", "O")).net == 3
    assert netlist.net_of(netlist.cells["ld"].ports["D"]) is netlist.nets[3]


def test_inout_is_never_a_driver(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {
        "io": make_cell("IOB", {"PAD": "inout"}, {"PAD": [5]}),
        "buf": make_cell("OBUF", {"O": "output"}, {"O": [5]}),
    }
    netlist = build(make_netlist({"pad": {"bits": [5]}}, cells))

    assert netlist.cells["io"].ports["PAD"].direction is PortDirection.INOUT
    assert netlist.nets[5].driver == PortRef("buf", "O")
    assert netlist.nets[5].users == [PortRef("io", "PAD")]


def test_second_driver_overwrites(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {
        "d1": make_cell("LUT1", {"O": "output"}, {"O": [7]}),
        "d2": make_cell("LUT1", {"O": "output"}, {"O": [7]}),
    }
    netlist = build(make_netlist({"x": {"bits": [7]}}, cells))

    assert netlist.nets[7].driver == PortRef("d2", "O")
    assert netlist.nets[7].users == []


def test_unknown_direction(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {"c": make_cell("X", {"P": "bidirectional"}, {})}
    with pytest.raises(UnknownDirectionError, match="bidirectional"):
        build(make_netlist({}, cells))


def test_missing_net_reference(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {"c": make_cell("X", {"I": "input"}, {"I": [42]})}
    with pytest.raises(MissingNetReferenceError, match="42"):
        build(make_netlist({"a": {"bits": [2]}}, cells))


def test_connection_to_undeclared_port(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {"c": make_cell("X", {}, {"I": [2]})}
    with pytest.raises(ParseError, match="undeclared port I"):
        build(make_netlist({"a": {"bits": [2]}}, cells))


def test_cell_without_type(make_netlist: Callable) -> None:
    with pytest.raises(ParseError, match="has no type"):
        build(make_netlist({}, {"c": {"port_directions": {}, "connections": {}}}))


def test_net_without_bits(make_netlist: Callable) -> None:
    with pytest.raises(ParseError, match="has no bits"):
        build(make_netlist({"a": {"bits": []}}, {}))


def test_duplicate_bit_last_write_wins(make_netlist: Callable) -> None:
    netlist = build(make_netlist({"first": {"bits": [9]}, "second": {"bits": [9]}}, {}))
    assert netlist.nets[9].name == "second"


def test_constant_bits_are_not_nets(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {"c": make_cell("LUT1", {"I0": "input"}, {"I0": ["1"]})}
    netlist = build(make_netlist({"vcc": {"bits": ["1"]}, "a": {"bits": [2]}}, cells))

    assert set(netlist.nets) == {2}
    assert netlist.cells["c"].ports["I0"].net is None


def test_attributes_and_parameters_become_strings(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {
        "c": make_cell(
            "LUT6",
            {},
            {},
            attributes={"keep": True, "src": "top.v:3", "level": 2},
            parameters={"INIT": "0000000000000000000000000000000000000000000000000000000000000010", "W": 4},
        )
    }
    netlist = build(make_netlist({"a": {"bits": [2], "attributes": {"ROUTING": "", "cnt": 3}}}, cells))

    c = netlist.cells["c"]
    assert c.attributes == {"keep": "true", "src": "top.v:3", "level": "2"}
    assert c.parameters["W"] == "4"
    assert c.parameters["INIT"].endswith("10")
    assert netlist.nets[2].attributes == {"ROUTING": "", "cnt": "3"}


def test_summary(make_netlist: Callable, make_cell: Callable) -> None:
    cells = {"c": make_cell("LUT1", {"I0": "input", "O": "output"}, {"I0": [2], "O": [3]})}
    netlist = build(make_netlist({"a": {"bits": [2]}, "b": {"bits": [3]}}, cells))
    assert netlist.summary() == {"cells": 1, "nets": 2, "ports": 2, "driven_nets": 1}


@pytest.mark.parametrize(
    ("value", "expected"),
    [("abc", "abc"), (5, "5"), (True, "true"), (False, "false"), (None, "")],
)
def test_as_str(value: object, expected: str) -> None:
    assert as_str(value) == expected


def test_as_str_rejects_containers() -> None:
    with pytest.raises(ParseError):
        as_str({"a": 1})


def test_first_bit() -> None:
    assert first_bit([4, 5], "n") == 4
    assert first_bit(["x"], "n") is None
    assert first_bit([], "n") is None
    with pytest.raises(ParseError, match="invalid bit"):
        first_bit(["q"], "n")


@pytest.mark.parametrize("section", ["port_directions", "connections", "attributes", "parameters"])
def test_cell_section_must_be_object(make_netlist: Callable, section: str) -> None:
    data = {"type": "LUT1", "port_directions": {}, "connections": {}, section: ["I0"]}
    with pytest.raises(ParseError, match=f"Cell c {section} must be an object"):
        build(make_netlist({}, {"c": data}))
