"""
Create mode: materialize the listed directory tree under an output root.
"""

import os
from pathlib import Path
from typing import Sequence

from tqdm import tqdm

from ..listing import ParsedListing
from ..utils import console, print_info, print_success, print_warning
from .paths import UnsafePathError, join_under
from .report import ReconciliationReport


class DirectoryCreationError(RuntimeError):
    """A listed directory could not be created. Nothing created earlier is rolled back."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Failed to create directory '{path}': {cause}")
        self.path = path
        self.cause = cause


def create_directories(directories: Sequence[str], output_root: Path) -> tuple[int, int]:
    """
    Create every listed directory (and missing ancestors) under output_root.

    Args:
        directories: Listing paths, in listing order.
        output_root: Directory to build the tree in.

    Returns:
        (created count, already-existing count)

    Raises:
        DirectoryCreationError: On the first directory that cannot be created,
            including one whose path leaves output_root.
    """
    created = 0
    skipped = 0
    root = os.path.abspath(output_root)

    with tqdm(total=len(directories), unit="dir", desc="Creating", disable=None) as pbar:
        for rel_path in directories:
            try:
                full_path = join_under(root, rel_path)
            except UnsafePathError as e:
                raise DirectoryCreationError(rel_path, e) from e

            if os.path.isdir(full_path):
                skipped += 1
                tqdm.write(f"  Exists:  {full_path}")
                pbar.update(1)
                continue

            try:
                Path(full_path).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryCreationError(full_path, e) from e

            created += 1
            tqdm.write(f"  Created: {full_path}")
            pbar.update(1)

    return created, skipped


def run_create(listing: ParsedListing, output_root: Path) -> ReconciliationReport:
    """
    Create the listing's directories and reconcile against the declared total.

    The run is verified when created + existing equals the listing's
    ``Total directories:`` value, an error when it differs, and a warning
    when the listing declares no total.
    """
    report = ReconciliationReport(mode="create", expected_dir_count=listing.expected_dir_count)

    print_info(f"Found {len(listing.directories)} directories in the listing")
    report.created_dirs, report.skipped_dirs = create_directories(listing.directory_paths, output_root)

    console.print(f"\nSummary: {report.created_dirs} created, {report.skipped_dirs} already existed")

    verified = report.count_verified
    if verified is None:
        msg = "Could not find 'Total directories:' in the listing for verification"
        report.warnings.append(msg)
        print_warning(msg)
    elif verified:
        print_success(
            f"Processed {report.processed_dirs} directories (matches expected count)"
        )
    else:
        console.print(
            f"[bold red]✗ Verification failed:[/bold red] Processed {report.processed_dirs} "
            f"directories, but expected {report.expected_dir_count}"
        )

    report.finalize()
    return report
