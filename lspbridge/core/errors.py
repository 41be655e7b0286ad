# lspbridge/core/errors.py

class BridgeError(Exception):
    """Base class for lspbridge errors."""

class ClientStateError(BridgeError, RuntimeError):
    """Raised on lifecycle misuse: initializing twice, or requiring a client that was never initialized."""

class DiagnosticConversionError(BridgeError, ValueError):
    """A diagnostic item could not be mapped to the editor's overlay representation."""

class TextRangeError(BridgeError, IndexError):
    """A line/column pair does not address a valid position in a text."""
