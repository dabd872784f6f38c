"""Read the list of file paths handed over by the previous pipeline stage."""

from typing import BinaryIO

from .errors import StdinReadError


def parse_paths(text: str) -> list[str]:
    """Split newline-delimited input into paths.

    At most one trailing line terminator is dropped. Order and duplicates are
    kept as given. Empty input means no paths at all, not one empty path.
    """
    if text.endswith("\r\n"):
        text = text[:-2]
    elif text.endswith("\n"):
        text = text[:-1]
    if not text:
        return []
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def read_input(stream: BinaryIO) -> tuple[bytes, list[str]]:
    """Read everything from stream until EOF.

    Returns the raw bytes (to be forwarded untouched) and the parsed paths.
    """
    try:
        raw = stream.read()
    except OSError as e:
        raise StdinReadError(f"Error reading from stdin: {e}") from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StdinReadError(f"Error decoding stdin as UTF-8: {e}") from e
    return raw, parse_paths(text)
