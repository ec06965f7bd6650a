"""
Listing module for the recovery tree tool.

Provides:
- Listing data structures
- Line-shape matchers
- Category-aware listing parser
"""

from .models import DirectoryEntry, FileEntry, ParsedListing, UNKNOWN_SIZE
from .parser import (
    DeclaredCounts,
    classify_line,
    load_listing,
    parse_listing,
    read_categories,
    strip_category,
)

__all__ = [
    "DirectoryEntry",
    "FileEntry",
    "ParsedListing",
    "UNKNOWN_SIZE",
    "DeclaredCounts",
    "classify_line",
    "load_listing",
    "parse_listing",
    "read_categories",
    "strip_category",
]
