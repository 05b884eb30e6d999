"""Device database loaded from per-part YAML descriptions.

A device file ``<device_dir>/<part>.yaml`` looks like::

    tiles:
      INT_X0Y0:
        wire_count: 1024
    primitives:
      LUT6: [I0, I1, I2, I3, I4, I5, O6]
      FDRE: []

``primitives`` is optional. A primitive with an empty pin list accepts any
pin name.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import yaml
from loguru import logger

from json2dcp.utils.exceptions import DeviceLookupError


@dataclass(frozen=True)
class Pip:
    """Handle of a programmable interconnect point of a tile."""

    tile: str
    src: int
    dst: int


@dataclass(frozen=True)
class Tile:
    """
    A tile of the device fabric.

    Attributes
    ----------
    name : str
        Tile name.
    wire_count : int
        Number of wires the tile exposes; valid indices are below this value.
    """

    name: str
    wire_count: int

    def get_pip(self, src: int, dst: int) -> Pip:
        """Return the PIP between two wires of this tile.

        Raises
        ------
        DeviceLookupError
            If either wire index is not below ``wire_count``.
        """
        if not (0 <= src < self.wire_count and 0 <= dst < self.wire_count):
            raise DeviceLookupError(f"No PIP {src}.{dst} in tile {self.name} ({self.wire_count} wires)")
        return Pip(self.name, src, dst)


class DeviceDatabase(Protocol):
    """Interface the converter needs from a device database."""

    part: str

    def get_tile(self, name: str) -> Tile: ...

    def primitive_pins(self, type_name: str) -> frozenset[str] | None: ...


@dataclass
class YamlDevice:
    """
    Device database backed by a YAML description.

    Attributes
    ----------
    part : str
        Part identifier.
    tiles : dict[str, Tile]
        Tiles keyed by name.
    primitives : dict[str, frozenset[str]] | None
        Known primitive types and their pins, None when the file lists none.
    """

    part: str
    tiles: dict[str, Tile] = field(default_factory=dict)
    primitives: dict[str, frozenset[str]] | None = None

    @classmethod
    def from_dict(cls, part: str, data: dict) -> "YamlDevice":
        """Build a device from its parsed description.

        Raises
        ------
        DeviceLookupError
            If the description is not shaped as expected.
        """
        if not isinstance(data, dict) or not isinstance(data.get("tiles"), dict):
            raise DeviceLookupError(f"Device {part} has no tiles section")
        tiles: dict[str, Tile] = {}
        for name, info in data["tiles"].items():
            try:
                tiles[name] = Tile(name, int(info["wire_count"]))
            except (TypeError, KeyError, ValueError) as e:
                raise DeviceLookupError(f"Device {part} tile {name} has no valid wire_count") from e

        primitives = None
        if data.get("primitives") is not None:
            if not isinstance(data["primitives"], dict):
                raise DeviceLookupError(f"Device {part} primitives section must be a mapping")
            primitives = {}
            for type_name, pins in data["primitives"].items():
                if pins is not None and not isinstance(pins, list):
                    raise DeviceLookupError(f"Device {part} primitive {type_name} pins must be a list")
                primitives[type_name] = frozenset(pins or ())
        return cls(part, tiles, primitives)

    @classmethod
    def load(cls, device_dir: Path, part: str) -> "YamlDevice":
        """Load the description of a part from a device directory.

        Parameters
        ----------
        device_dir : Path
            Directory holding ``<part>.yaml`` files.
        part : str
            Part identifier.

        Returns
        -------
        YamlDevice
            The loaded device.

        Raises
        ------
        DeviceLookupError
            If no description exists for the part or it cannot be parsed.
        """
        path = device_dir / f"{part}.yaml"
        if not path.exists():
            raise DeviceLookupError(f"No device description for part {part} in {device_dir}")
        logger.info(f"Loading device {part} from {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise DeviceLookupError(f"Cannot parse device description {path}: {e}") from e
        device = cls.from_dict(part, data)
        logger.debug(f"Device {part}: {len(device.tiles)} tiles")
        return device

    def get_tile(self, name: str) -> Tile:
        """Return a tile by name.

        Raises
        ------
        DeviceLookupError
            If the device has no tile with that name.
        """
        try:
            return self.tiles[name]
        except KeyError:
            raise DeviceLookupError(f"Tile {name} not found on device {self.part}") from None

    def primitive_pins(self, type_name: str) -> frozenset[str] | None:
        """Return the pins of a primitive type.

        Returns
        -------
        frozenset[str] | None
            Declared pins, an empty set when any pin is accepted, or None if
            the device does not restrict primitive types.

        Raises
        ------
        DeviceLookupError
            If the device lists primitives and the type is not among them.
        """
        if self.primitives is None:
            return None
        try:
            return self.primitives[type_name]
        except KeyError:
            raise DeviceLookupError(f"Unknown primitive type {type_name} on device {self.part}") from None
