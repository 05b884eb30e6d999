"""Fixtures shared by all json2dcp tests."""

import json
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import yaml

from json2dcp.backend.device import YamlDevice
from json2dcp.utils.settings import reset_context

PART = "xc-test"

DEVICE_DATA = {
    "tiles": {
        "TILE1": {"wire_count": 10},
        "INT_X0Y0": {"wire_count": 100},
    },
    "primitives": {
        "LUT6": [],
        "FDRE": [],
        "CARRY8": ["CI", "CO7", "O0"],
    },
}


def _netlist_json(netnames: dict, cells: dict, **modules: dict) -> str:
    """Build the text of a single-module nextpnr JSON document."""
    doc = {
        "creator": "nextpnr",
        "modules": {"top": {"attributes": {"top": "1"}, "netnames": netnames, "cells": cells}, **modules},
    }
    return json.dumps(doc)


def _cell(
    type_name: str,
    ports: dict[str, str],
    connections: dict[str, list],
    attributes: dict | None = None,
    parameters: dict | None = None,
) -> dict:
    return {
        "hide_name": 0,
        "type": type_name,
        "parameters": parameters or {},
        "attributes": attributes or {},
        "port_directions": ports,
        "connections": connections,
    }


@pytest.fixture(autouse=True)
def clean_context() -> Generator[None]:
    """Make sure no settings leak between tests."""
    yield
    reset_context()


@pytest.fixture
def device() -> YamlDevice:
    return YamlDevice.from_dict(PART, DEVICE_DATA)


@pytest.fixture
def device_dir(tmp_path: Path) -> Path:
    """Directory holding the description of the test part."""
    d = tmp_path / "devices"
    d.mkdir()
    (d / f"{PART}.yaml").write_text(yaml.safe_dump(DEVICE_DATA))
    return d


@pytest.fixture
def routed_netlist() -> str:
    """One routed net between a mapped flip-flop and a LUT input."""
    netnames = {
        "n3": {
            "hide_name": 0,
            "bits": [3],
            "attributes": {"ROUTING": "w0;TILE1/0.1;r0;w1;SITEPIP:X;r1"},
        },
    }
    cells = {
        "A": _cell(
            "FDRE",
            {"Q": "output"},
            {"Q": [3]},
            {"X_ORIG_TYPE": "FDRE", "NEXTPNR_BEL": "SLICE_X0Y0/AFF", "X_ORIG_PORT_Q": "O"},
        ),
        "B": _cell(
            "LUT6",
            {"D": "input"},
            {"D": [3]},
            {"X_ORIG_TYPE": "LUT6", "NEXTPNR_BEL": "SLICE_X0Y0/A6LUT"},
        ),
    }
    return _netlist_json(netnames, cells)


@pytest.fixture
def make_netlist() -> Callable[..., str]:
    """Factory building the text of a JSON netlist."""
    return _netlist_json


@pytest.fixture
def make_cell() -> Callable[..., dict]:
    """Factory building the JSON tree of one cell."""
    return _cell
