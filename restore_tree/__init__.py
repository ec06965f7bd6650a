"""
Recovery Tree Tool
==================

A command-line tool that rebuilds or audits a directory tree from a DMDE
file listing: create the listed folders so recovered files can be dropped
into place, or verify a recovered tree against the listing.
"""

__version__ = "1.0.0"

from .decoder import decode_listing
from .listing import ParsedListing, load_listing, parse_listing
from .reconcile import (
    DirectoryCreationError,
    ReconciliationReport,
    Status,
    run_create,
    verify_tree,
)

__all__ = [
    "decode_listing",
    "ParsedListing",
    "load_listing",
    "parse_listing",
    "DirectoryCreationError",
    "ReconciliationReport",
    "Status",
    "run_create",
    "verify_tree",
]
