"""Recover pre-mapping identities from provenance attributes.

Technology mapping renames cells and ports. nextpnr records the original
primitive type, the chosen BEL and the original port names as cell
attributes, and these decide what is emitted into the target design.
"""

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from json2dcp.model.netlist import Cell, PortRef

ORIG_TYPE_ATTR = "X_ORIG_TYPE"
BEL_ATTR = "NEXTPNR_BEL"
ORIG_PORT_PREFIX = "X_ORIG_PORT_"

"""
I/O buffer wrapper cells that are already absorbed into the placed IOB sites.
"""
DEFAULT_WRAPPER_TYPES = frozenset({"IOB_OUTBUF", "IOB_IBUFCTRL"})


class CellDecision(Enum):
    """Outcome of the emission check for a cell."""

    EMIT = "emit"
    OMIT_NO_ORIG_TYPE = "omit_no_orig_type"
    OMIT_WRAPPER = "omit_wrapper"

    @property
    def emitted(self) -> bool:
        return self is CellDecision.EMIT


@dataclass(frozen=True)
class Primitive:
    """Reconciled identity of an emitted cell.

    Attributes
    ----------
    cell : str
        Name of the mapped cell.
    type : str
        Original primitive type from ``X_ORIG_TYPE``.
    site : str | None
        Placement site from ``NEXTPNR_BEL``, None when unplaced.
    """

    cell: str
    type: str
    site: str | None


class Reconciler:
    """Decide which cells and ports take part in emission.

    Parameters
    ----------
    wrapper_types : frozenset[str], optional
        Cell types never emitted even when they carry ``X_ORIG_TYPE``.
    """

    def __init__(self, wrapper_types: frozenset[str] = DEFAULT_WRAPPER_TYPES) -> None:
        self.wrapper_types = frozenset(wrapper_types)

    def decide(self, cell: Cell) -> CellDecision:
        """Check whether a cell is emitted as a physical primitive.

        Parameters
        ----------
        cell : Cell
            Cell to check.

        Returns
        -------
        CellDecision
            ``EMIT`` iff the cell carries ``X_ORIG_TYPE`` and is not an I/O
            buffer wrapper.
        """
        if ORIG_TYPE_ATTR not in cell.attributes:
            return CellDecision.OMIT_NO_ORIG_TYPE
        if cell.type in self.wrapper_types:
            return CellDecision.OMIT_WRAPPER
        return CellDecision.EMIT

    def primitive(self, cell: Cell) -> Primitive | None:
        """Return the reconciled identity of a cell, None if it is not emitted."""
        decision = self.decide(cell)
        if not decision.emitted:
            logger.trace(f"Cell {cell.name} ({cell.type}) skipped: {decision.value}")
            return None
        return Primitive(cell.name, cell.attributes[ORIG_TYPE_ATTR], cell.attributes.get(BEL_ATTR))

    @staticmethod
    def original_port(cell: Cell, port: str) -> str | None:
        """Look up the original name of a mapped port.

        Returns
        -------
        str | None
            Value of ``X_ORIG_PORT_<port>``, None when the port has no original
            counterpart and its connection is to be omitted.
        """
        return cell.attributes.get(ORIG_PORT_PREFIX + port)

    def endpoint_pin(self, cell: Cell, ref: PortRef) -> str | None:
        pin = self.original_port(cell, ref.port)
        if pin is None:
            logger.trace(f"Endpoint {ref} has no original port, omitted")
        return pin
