"""Tests for provenance based identity reconciliation."""

import pytest

from json2dcp.core.provenance import CellDecision, Primitive, Reconciler
from json2dcp.model.netlist import Cell, PortRef


@pytest.fixture
def reconciler() -> Reconciler:
    return Reconciler()


def test_lut_is_emitted(reconciler: Reconciler) -> None:
    cell = Cell("lut", "LUT6", attributes={"X_ORIG_TYPE": "LUT6", "NEXTPNR_BEL": "SLICE_X0Y0/A6LUT"})

    assert reconciler.decide(cell) is CellDecision.EMIT
    assert reconciler.primitive(cell) == Primitive("lut", "LUT6", "SLICE_X0Y0/A6LUT")


@pytest.mark.parametrize("type_name", ["IOB_OUTBUF", "IOB_IBUFCTRL"])
def test_io_wrappers_are_never_emitted(reconciler: Reconciler, type_name: str) -> None:
    cell = Cell("io", type_name, attributes={"X_ORIG_TYPE": "OBUF", "NEXTPNR_BEL": "IOB_X0Y0/OUTBUF"})

    assert reconciler.decide(cell) is CellDecision.OMIT_WRAPPER
    assert reconciler.primitive(cell) is None


def test_cell_without_orig_type(reconciler: Reconciler) -> None:
    cell = Cell("gnd", "GND", attributes={"NEXTPNR_BEL": "X"})

    assert reconciler.decide(cell) is CellDecision.OMIT_NO_ORIG_TYPE
    assert not reconciler.decide(cell).emitted
    assert reconciler.primitive(cell) is None


def test_custom_wrapper_types() -> None:
    cell = Cell("io", "IOB_OUTBUF", attributes={"X_ORIG_TYPE": "OBUF"})
    assert Reconciler(frozenset({"MY_WRAPPER"})).decide(cell) is CellDecision.EMIT


def test_unplaced_cell_has_no_site(reconciler: Reconciler) -> None:
    cell = Cell("ff", "FDRE", attributes={"X_ORIG_TYPE": "FDRE"})
    assert reconciler.primitive(cell).site is None


def test_original_port(reconciler: Reconciler) -> None:
    cell = Cell("ff", "FDRE", attributes={"X_ORIG_TYPE": "FDRE", "X_ORIG_PORT_Q": "O"})

    assert reconciler.original_port(cell, "Q") == "O"
    assert reconciler.endpoint_pin(cell, PortRef("ff", "Q")) == "O"
    assert reconciler.endpoint_pin(cell, PortRef("ff", "D")) is None
