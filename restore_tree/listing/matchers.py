"""
Token-shape matchers for listing lines.

A listing line is loosely structured: a run of fixed-width metadata fields
followed by a free-form path that may itself contain spaces. Each line kind
is recognised by its own small pattern, built from the shared token shapes
below so every kind can be tested on its own.

Directory line:
    2025-01-17 13:29:18.927  <DIR>          D---- ---A  f   Some_dir 1\\
File line:
    2025-01-17 13:29:18.927  4096           ----- ---A  f   Some_dir 1\\a.txt
"""

import re

# Listing labels
DIR_MARKER = "<DIR>"
CATEGORY_LABEL = "File Categories:"
TOTAL_DIRS_LABEL = "Total directories:"
TOTAL_FILES_LABEL = "Total files:"

# Token shapes
WS = r"\s+"
DATE = r"\d{4}-\d{2}-\d{2}"
TIME = r"\d{2}:\d{2}:\d{2}\.\d+"
SIZE = r"(?P<size>\d+)"
FLAG = r"\S+"

# The category column may be empty, so only the two flag columns are required
MIN_FLAG_FIELDS = 2


def flag_fields(count: int = MIN_FLAG_FIELDS) -> str:
    return WS.join([FLAG] * count)


DIRECTORY_SHAPE = re.compile(
    re.escape(DIR_MARKER) + WS + flag_fields() + WS + r"(?P<path>.+\\)\s*$"
)
FILE_SHAPE = re.compile(
    "^" + WS.join([DATE, TIME, SIZE, flag_fields()]) + WS + r"(?P<path>.+?)\s*$"
)
CATEGORY_SHAPE = re.compile(re.escape(CATEGORY_LABEL) + r"\s*(?P<tokens>.*)$")


def count_shape(label: str) -> re.Pattern:
    return re.compile(re.escape(label) + r"\s*(?P<count>\d+)")


TOTAL_DIRS_SHAPE = count_shape(TOTAL_DIRS_LABEL)
TOTAL_FILES_SHAPE = count_shape(TOTAL_FILES_LABEL)


def is_directory_candidate(line: str) -> bool:
    return DIR_MARKER in line


def is_file_candidate(line: str) -> bool:
    # Entry lines start with their date stamp
    return line[:1].isascii() and line[:1].isdigit()


def match_directory(line: str) -> str | None:
    """
    Match a directory line.

    Returns:
        The raw path text after the flag columns (category not yet stripped,
        trailing separator kept), or None if the line has another shape.
    """
    m = DIRECTORY_SHAPE.search(line)
    return m.group("path") if m else None


def match_file(line: str) -> tuple[int, str] | None:
    """
    Match a file line.

    Returns:
        (size in bytes, raw path text) or None if the line has another shape.
    """
    m = FILE_SHAPE.match(line)
    if not m:
        return None
    return int(m.group("size")), m.group("path")


def match_categories(line: str) -> list[str] | None:
    """
    Match the category declaration line, e.g. ``File Categories:  . , xf``.

    Returns:
        The declared tokens in order (commas are separators and dropped),
        or None if this is not the declaration line.
    """
    m = CATEGORY_SHAPE.search(line)
    if not m:
        return None
    return [token for token in m.group("tokens").split() if token != ","]


def match_count(line: str, shape: re.Pattern) -> int | None:
    m = shape.search(line)
    return int(m.group("count")) if m else None
