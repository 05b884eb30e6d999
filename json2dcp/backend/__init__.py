"""json2dcp backend module.

This module contains the collaborators on the target side of the converter.

Components:
- device: Device database (tiles, wire counts, PIPs, primitive pins)
- design: Target design model and checkpoint writer
"""

from json2dcp.backend.design import Design, escape_name, write_checkpoint
from json2dcp.backend.device import DeviceDatabase, Pip, Tile, YamlDevice

__all__ = [
    "Design",
    "DeviceDatabase",
    "Pip",
    "Tile",
    "YamlDevice",
    "escape_name",
    "write_checkpoint",
]
