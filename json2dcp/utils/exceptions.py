class ConversionError(Exception):
    """Base class for all fatal errors raised during a conversion run."""

    pass


class ParseError(ConversionError):
    """Exception raised for malformed or structurally incomplete netlists."""

    pass


class UnknownDirectionError(ParseError):
    """Exception raised when a port direction is not input, output or inout."""

    pass


class MissingNetReferenceError(ParseError):
    """Exception raised when a connection references an undeclared net."""

    pass


class DeviceLookupError(ConversionError):
    """Exception raised when a device, tile or PIP cannot be found."""

    pass


class EmissionError(ConversionError):
    """Exception raised when the target design cannot be built or written."""

    pass
