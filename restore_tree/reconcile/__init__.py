"""
Reconciliation module for the recovery tree tool.

Provides:
- Create mode: build the listed directory tree
- Verify mode: compare a target tree against the listing
- Root-directory inference used to scope the extra-items scan
"""

from .create import DirectoryCreationError, create_directories, run_create
from .paths import PathResolver, UnsafePathError, find_root_dirs, is_strict_ancestor, resolve_under
from .report import ReconciliationReport, Status
from .verify import verify_tree

__all__ = [
    "DirectoryCreationError",
    "create_directories",
    "run_create",
    "find_root_dirs",
    "is_strict_ancestor",
    "resolve_under",
    "PathResolver",
    "UnsafePathError",
    "ReconciliationReport",
    "Status",
    "verify_tree",
]
