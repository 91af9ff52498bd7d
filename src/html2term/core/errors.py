# =============================================================================
# Errors
# =============================================================================
# html2term reports every failure through a single exception type carrying a
# kind tag, so the CLI can report it with context in one place:
#
#   - INPUT_IO:  the input file could not be opened or read
#   - OUTPUT_IO: the output file could not be created or written
#   - RENDER:    the document could not be parsed or rendered
#   - CONFIG:    an invalid combination of options or a broken config file
#
# None of these are transient, so nothing retries them.
# =============================================================================

from enum import Enum


class ErrorKind(Enum):
    """Categories of conversion failure."""
    INPUT_IO = "input"
    OUTPUT_IO = "output"
    RENDER = "render"
    CONFIG = "config"


class ConversionError(Exception):
    """
    Raised when any stage of the conversion fails.

    Attributes:
        kind: Which category of failure this is.
        operation: Short description of what was being attempted.
        cause: The underlying problem (an exception or a message).

    Usage:
        >>> try:
        ...     data = path.read_bytes()
        ... except OSError as e:
        ...     raise ConversionError(ErrorKind.INPUT_IO, f"reading {path}", e) from e
    """

    def __init__(
        self,
        kind: ErrorKind,
        operation: str,
        cause: BaseException | str | None = None,
    ) -> None:
        self.kind = kind
        self.operation = operation
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is None:
            return self.operation
        return f"{self.operation}: {self.cause}"
