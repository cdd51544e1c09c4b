"""
Line parser for the flat ``KEY = value`` config file format.

Blank lines and ``#`` comments are skipped. Anything else that is not an
assignment is ignored rather than treated as an error.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

# Buffer size of the legacy bounded reader (one byte reserved for the terminator)
DEFAULT_LEGACY_LINE_LENGTH = 256

BLANK_LINE_PATTERN = re.compile(r"^\s*$")
COMMENT_LINE_PATTERN = re.compile(r"^\s*#")
ASSIGNMENT_PATTERN = re.compile(r"^\s*([^=\s]+)\s*=\s*(.+?)\s*$")


def _bounded(lines: Iterable[str], max_line_length: int) -> Iterator[str]:
    """Split each line into chunks the way a fixed-size line buffer would."""
    chunk_size = max_line_length - 1
    for line in lines:
        while len(line) > chunk_size:
            yield line[:chunk_size]
            line = line[chunk_size:]
        if line:
            yield line


def parse_line(line: str) -> tuple[str, str] | None:
    """
    Classify a single line.

    Returns:
        (name, value) for an assignment, None for blank, comment or malformed lines
    """
    line = line.rstrip("\r\n")
    if BLANK_LINE_PATTERN.match(line) or COMMENT_LINE_PATTERN.match(line):
        return None

    match = ASSIGNMENT_PATTERN.match(line)
    if not match:
        return None

    name, value = match.group(1), match.group(2)
    if not value.strip():
        return None
    return name, value


def parse_lines(lines: Iterable[str], max_line_length: int | None = None) -> Iterator[tuple[str, str]]:
    """
    Lazily parse config lines into (name, value) pairs.

    Args:
        lines: Any iterable of text lines, typically an open file
        max_line_length: Reproduce the legacy bounded reader when set; each
            physical line is cut into chunks of ``max_line_length - 1``
            characters and every chunk is classified on its own.

    Yields:
        (name, value) for each assignment line, in file order
    """
    if max_line_length is not None:
        if max_line_length < 2:
            raise ValueError("max_line_length must be at least 2")
        lines = _bounded(lines, max_line_length)

    for line in lines:
        parsed = parse_line(line)
        if parsed is not None:
            yield parsed
