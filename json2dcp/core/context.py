"""Conversion context - holds state for the processing pipeline.

The context owns the netlist read from the input document and the device it
is converted for. Transforms read from it and attach their results.
"""

from pathlib import Path

from loguru import logger

from json2dcp.backend.device import DeviceDatabase, YamlDevice
from json2dcp.core.builder import build_netlist
from json2dcp.core.reader import Reader
from json2dcp.model.netlist import Netlist


class Context:
    """Conversion context - holds state for the processing pipeline.

    Parameters
    ----------
    device : DeviceDatabase | None, optional
        Device database. Can be loaded later with :meth:`load_device`.
    netlist_file : str | Path | None, optional
        Path to a JSON netlist. If provided, the netlist is loaded automatically.

    Attributes
    ----------
    device : DeviceDatabase | None
        Device the design is converted for
    netlist : Netlist | None
        Netlist graph built from the input document
    """

    def __init__(
        self,
        device: DeviceDatabase | None = None,
        netlist_file: str | Path | None = None,
    ) -> None:
        self.device = device
        self.netlist: Netlist | None = None
        self._reader: Reader | None = None

        if netlist_file:
            self.load_netlist(Path(netlist_file))

    def load_netlist(self, netlist_path: Path, reader: Reader | None = None) -> Netlist:
        """Read a netlist document and build its graph.

        Parameters
        ----------
        netlist_path : Path
            Path to the netlist document
        reader : Reader | None, optional
            Optional explicit reader. If None, auto-detects from file extension.

        Returns
        -------
        Netlist
            The built netlist graph

        Raises
        ------
        ParseError
            If the document is malformed or incomplete
        """
        if reader is None:
            from json2dcp.core.reader import create_reader

            reader = create_reader(netlist_path)

        self._reader = reader
        self.netlist = build_netlist(reader.read(netlist_path))
        logger.info(f"Loaded netlist {self.netlist.module}: {self.netlist.summary()}")
        return self.netlist

    def load_device(self, device_dir: Path, part: str) -> DeviceDatabase:
        """Load the device database of a part.

        Raises
        ------
        DeviceLookupError
            If the part has no description in ``device_dir``
        """
        self.device = YamlDevice.load(device_dir, part)
        return self.device

    def require(self) -> tuple[Netlist, DeviceDatabase]:
        """Return netlist and device, both must be loaded.

        Raises
        ------
        RuntimeError
            If either is missing
        """
        if self.netlist is None:
            raise RuntimeError("No netlist loaded")
        if self.device is None:
            raise RuntimeError("No device loaded")
        return self.netlist, self.device
