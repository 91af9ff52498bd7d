# =============================================================================
# Input and Output Streams
# =============================================================================
# Reading the input document and writing the result.
#
# Both ends default to the standard streams. Output is always written as
# UTF-8 bytes. Files are opened only for as long as they are needed and are
# always closed, including when a write fails. Any I/O failure becomes a
# ConversionError tagged INPUT_IO or OUTPUT_IO.
# =============================================================================

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from html2term.core import ConversionError, ErrorKind

logger = logging.getLogger(__name__)


def read_input(path: Path | None = None) -> bytes:
    """
    Read the whole input document.

    Args:
        path: File to read, or None for standard input.

    Returns:
        The raw bytes (encoding is detected by the parser).
    """
    if path is None:
        try:
            return sys.stdin.buffer.read()
        except OSError as e:
            raise ConversionError(ErrorKind.INPUT_IO, "reading standard input", e) from e

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ConversionError(ErrorKind.INPUT_IO, f"reading {path}", e) from e
    logger.debug(f"Read {len(data)} bytes from {path}")
    return data


@contextmanager
def open_output(path: Path | None = None) -> Iterator[BinaryIO]:
    """
    Open the output sink as a binary stream.

    Standard output is yielded as its underlying byte buffer (flushed, not
    closed, afterwards). A named file is created or truncated and closed
    when the block exits. Failures while closing, such as a full disk
    surfacing on the final flush, are reported as OUTPUT_IO.

    Usage:
        >>> with open_output(Path("out.txt")) as sink:
        ...     sink.write(data)
    """
    if path is None:
        # Anything already written through the text layer goes first
        sys.stdout.flush()
        yield sys.stdout.buffer
        return

    try:
        sink = open(path, "wb")
    except OSError as e:
        raise ConversionError(ErrorKind.OUTPUT_IO, f"creating {path}", e) from e

    try:
        yield sink
    finally:
        try:
            sink.close()
        except OSError as e:
            raise ConversionError(ErrorKind.OUTPUT_IO, f"writing {path}", e) from e
    logger.debug(f"Wrote {path}")


def write_output(text: str, path: Path | None = None) -> None:
    """
    Write the final text to standard output or a file.

    The text is always encoded as UTF-8, so both destinations receive the
    same bytes whatever the locale.

    Args:
        text: The complete output.
        path: Destination file, or None for standard output.
    """
    destination = path or "standard output"
    data = text.encode("utf-8")
    with open_output(path) as sink:
        try:
            sink.write(data)
            sink.flush()
        except OSError as e:
            raise ConversionError(ErrorKind.OUTPUT_IO, f"writing {destination}", e) from e
