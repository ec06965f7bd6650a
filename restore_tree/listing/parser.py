"""
Listing parsing.

Turns decoded listing text into a ParsedListing in two passes:
1. Category discovery from the ``File Categories:`` declaration.
2. Line-by-line classification into directory / file / summary records.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..decoder import decode_listing
from .matchers import (
    TOTAL_DIRS_SHAPE,
    TOTAL_FILES_SHAPE,
    is_directory_candidate,
    is_file_candidate,
    match_categories,
    match_count,
    match_directory,
    match_file,
)
from .models import DirectoryEntry, FileEntry, ParsedListing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeclaredCounts:
    """Totals declared by a summary line. Either may be absent."""
    directories: int | None = None
    files: int | None = None


LineRecord = DirectoryEntry | FileEntry | DeclaredCounts


def iter_lines(text: str) -> list[str]:
    """Split on newlines only, dropping a trailing carriage return per line."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def read_categories(lines: Iterable[str]) -> frozenset[str]:
    """
    Collect the category table from the first declaration line.

    Returns:
        The declared tokens, or an empty set if the listing declares none.
    """
    for line in lines:
        tokens = match_categories(line)
        if tokens is not None:
            return frozenset(tokens)
    return frozenset()


def strip_category(raw_path: str, categories: frozenset[str]) -> str:
    """
    Remove a declared category tag from the front of a captured path.

    Only tokens from the listing's own declaration are recognised, and only
    when followed by a space, so a first path segment that merely starts
    with a token is left alone. Longer tokens are tried first so that a token
    that prefixes another one cannot shadow it.

    Args:
        raw_path: Path text as captured after the flag columns.
        categories: Declared category tokens.

    Returns:
        The path with leading whitespace and any category tag removed.
    """
    trimmed = raw_path.lstrip(" \t")
    if not categories:
        return trimmed

    for category in sorted(categories, key=lambda c: (-len(c), c)):
        if trimmed.startswith(category):
            rest = trimmed[len(category):]
            if rest.startswith(" "):
                return rest.lstrip(" ")

    return trimmed


def classify_line(line: str, categories: frozenset[str]) -> LineRecord | None:
    """
    Classify one listing line.

    Args:
        line: A single line without its line terminator.
        categories: Category table of the listing.

    Returns:
        A DirectoryEntry, FileEntry or DeclaredCounts, or None for lines
        that carry nothing (headers, garbage, wrapped artifacts).
    """
    if is_directory_candidate(line):
        raw = match_directory(line)
        if raw is None:
            return None
        path = strip_category(raw, categories)
        return DirectoryEntry(path=path.removesuffix("\\"))

    if is_file_candidate(line):
        matched = match_file(line)
        if matched is None:
            return None
        size, raw = matched
        return FileEntry(path=strip_category(raw, categories), size=size)

    dirs = match_count(line, TOTAL_DIRS_SHAPE)
    files = match_count(line, TOTAL_FILES_SHAPE)
    if dirs is None and files is None:
        return None
    return DeclaredCounts(directories=dirs, files=files)


def parse_listing(text: str) -> ParsedListing:
    """
    Parse decoded listing text.

    Unrecognised lines are skipped. When a total is declared more than once,
    the last declaration wins.
    """
    lines = iter_lines(text)
    categories = read_categories(lines)

    directories: list[DirectoryEntry] = []
    files: list[FileEntry] = []
    expected_dirs = None
    expected_files = None

    for line in lines:
        record = classify_line(line, categories)
        if record is None:
            continue
        if isinstance(record, DirectoryEntry):
            directories.append(record)
        elif isinstance(record, FileEntry):
            files.append(record)
        else:
            if record.directories is not None:
                expected_dirs = record.directories
            if record.files is not None:
                expected_files = record.files

    return ParsedListing(
        directories=tuple(directories),
        files=tuple(files),
        expected_dir_count=expected_dirs,
        expected_file_count=expected_files,
        categories=categories,
    )


def load_listing(path: Path) -> ParsedListing:
    """
    Read, decode and parse a listing file.

    Raises:
        OSError: If the file cannot be read.
    """
    data = Path(path).read_bytes()
    listing = parse_listing(decode_listing(data))
    logger.debug(
        "Parsed %s: %d directories, %d files, categories=%s",
        path, len(listing.directories), len(listing.files), sorted(listing.categories),
    )
    return listing
