"""
Verify mode: compare a populated target directory against a listing.

Three passes, merged into one report:
1. Every listed directory exists.
2. Every listed file exists with the listed size.
3. Nothing unlisted exists inside the listing's root directories.
"""

import logging
import os
from pathlib import Path

from ..listing import ParsedListing
from ..utils import console, print_path_line, print_report_table, print_section, print_warning
from .paths import PathResolver, UnsafePathError, find_root_dirs, join_under, path_key
from .report import ReconciliationReport, Status

logger = logging.getLogger(__name__)


def resolve_entries(listing: ParsedListing, resolver: PathResolver) -> dict[str, str | None]:
    """
    Resolve every listed directory and file once.

    Returns:
        Map of listing path to host path. Paths that leave the target
        directory map to None.
    """
    resolved: dict[str, str | None] = {}
    for entry in (*listing.directories, *listing.files):
        if entry.path in resolved:
            continue
        try:
            resolved[entry.path] = resolver.resolve(entry.path)
        except UnsafePathError as e:
            logger.debug("%s", e)
            resolved[entry.path] = None
    return resolved


def check_directories(
    listing: ParsedListing, resolved: dict[str, str | None], report: ReconciliationReport
) -> None:
    print_section("Checking Directories")
    for entry in listing.directories:
        full_path = resolved[entry.path]

        if full_path is None:
            print_path_line("✗", "OUTSIDE ROOT:", entry.path)
            report.missing_dirs.append(entry.path)
        elif not os.path.exists(full_path):
            print_path_line("✗", "MISSING DIR: ", full_path)
            report.missing_dirs.append(full_path)
        elif not os.path.isdir(full_path):
            print_path_line("✗", "NOT A DIR:   ", full_path, "(exists as file)")
            report.missing_dirs.append(full_path)
        else:
            report.ok_dirs += 1

    console.print(f"  Directories: {report.ok_dirs} OK, {len(report.missing_dirs)} missing")


def check_files(
    listing: ParsedListing, resolved: dict[str, str | None], report: ReconciliationReport
) -> None:
    print_section("Checking Files")
    for entry in listing.files:
        full_path = resolved[entry.path]
        if full_path is None:
            print_path_line("✗", "OUTSIDE ROOT:", entry.path)
            report.missing_files.append(entry.path)
            continue

        try:
            st = os.stat(full_path)
        except OSError:
            print_path_line("✗", "MISSING FILE:", full_path)
            report.missing_files.append(full_path)
            continue

        if os.path.isdir(full_path):
            print_path_line("✗", "NOT A FILE:  ", full_path, "(exists as directory)")
            report.missing_files.append(full_path)
        elif entry.size_known and st.st_size != entry.size:
            print_path_line(
                "⚠", "SIZE MISMATCH:", full_path,
                f"(expected {entry.size} bytes, got {st.st_size} bytes)", style="yellow",
            )
            report.size_mismatches.append((full_path, entry.size, st.st_size))
        else:
            report.ok_files += 1

    console.print(
        f"  Files: {report.ok_files} OK, {len(report.missing_files)} missing, "
        f"{len(report.size_mismatches)} wrong size"
    )


def expected_paths(root: str, resolved: dict[str, str | None]) -> set[str]:
    """Case-normalized absolute paths of every listed directory and file."""
    expected = set()
    for rel_path, full_path in resolved.items():
        if full_path is None:
            continue
        expected.add(path_key(join_under(root, rel_path)))
        expected.add(path_key(full_path))
    return expected


def resolve_scan_roots(listing: ParsedListing, resolver: PathResolver) -> list[str]:
    """Absolute paths of the listing's inferred root directories, deduplicated."""
    roots: list[str] = []
    seen: set[str] = set()
    for rel_root in find_root_dirs(listing.directory_paths):
        try:
            full_path = resolver.resolve(rel_root)
        except UnsafePathError:
            continue
        if path_key(full_path) in seen:
            continue
        seen.add(path_key(full_path))
        roots.append(full_path)
    return roots


def _log_walk_error(err: OSError) -> None:
    logger.debug("Skipping unreadable entry during scan: %s", err)


def scan_extras(
    listing: ParsedListing,
    resolver: PathResolver,
    resolved: dict[str, str | None],
    report: ReconciliationReport,
) -> None:
    """
    Report entries inside the listing's root directories that the listing does not name.

    Content elsewhere under the target root is never considered. Links to
    directories are reported as files and are not followed.
    """
    print_section("Checking for Extra Files")
    report.scan_roots = resolve_scan_roots(listing, resolver)

    if not report.scan_roots:
        report.extra_scan_skipped = True
        console.print("  No root directories found in listing, skipping extra files check")
        return

    console.print("  Scanning within:")
    for scan_root in report.scan_roots:
        console.print(f"    {scan_root}", markup=False, soft_wrap=True)

    expected = expected_paths(resolver.root, resolved)

    with console.status("[bold green]Scanning for extra items...[/bold green]"):
        for scan_root in report.scan_roots:
            for dirpath, dirnames, filenames in os.walk(scan_root, onerror=_log_walk_error):
                dirnames.sort()
                links = [name for name in dirnames if os.path.islink(os.path.join(dirpath, name))]
                for name in dirnames:
                    path = os.path.join(dirpath, name)
                    if name not in links and path_key(path) not in expected:
                        print_path_line("⚠", "EXTRA DIR: ", path, style="yellow")
                        report.extra_dirs.append(path)
                for name in sorted(filenames + links):
                    path = os.path.join(dirpath, name)
                    if path_key(path) not in expected:
                        print_path_line("⚠", "EXTRA FILE:", path, style="yellow")
                        report.extra_files.append(path)

    if report.extra_files or report.extra_dirs:
        console.print(
            f"  Found {len(report.extra_files)} extra files, "
            f"{len(report.extra_dirs)} extra directories"
        )
    else:
        console.print("  No extra files or directories found")


def print_verify_summary(listing: ParsedListing, report: ReconciliationReport) -> None:
    print_section("Summary")

    total_dirs = len(listing.directories)
    if not report.missing_dirs:
        console.print(f"  Directories: {report.ok_dirs}/{total_dirs} ✓")
    else:
        console.print(f"  Directories: {report.ok_dirs}/{total_dirs} ({len(report.missing_dirs)} missing)")

    total_files = len(listing.files)
    if not report.missing_files and not report.size_mismatches:
        console.print(f"  Files:       {report.ok_files}/{total_files} ✓")
    else:
        issues = []
        if report.missing_files:
            issues.append(f"{len(report.missing_files)} missing")
        if report.size_mismatches:
            issues.append(f"{len(report.size_mismatches)} wrong size")
        console.print(f"  Files:       {report.ok_files}/{total_files} ({', '.join(issues)})")

    if report.extra_files or report.extra_dirs:
        console.print(
            f"  Extra items: {len(report.extra_files)} files, {len(report.extra_dirs)} directories"
        )
    if report.extra_scan_skipped:
        console.print("  Extra items: not checked (no root directories)")

    console.print()
    print_report_table(report)
    for msg in report.warnings:
        print_warning(msg)


def verify_tree(listing: ParsedListing, target_root: Path) -> ReconciliationReport:
    """
    Verify a target directory against a listing.

    Args:
        listing: Parsed listing.
        target_root: Directory the recovered files were placed in.

    Returns:
        Finalized report. Missing entries or size mismatches give ERROR,
        extra entries alone give WARNING.
    """
    root = os.path.abspath(target_root)
    report = ReconciliationReport(mode="verify")

    console.print(
        f"Verifying against listing: {len(listing.directories)} directories, "
        f"{len(listing.files)} files"
    )

    resolver = PathResolver(root)
    resolved = resolve_entries(listing, resolver)

    check_directories(listing, resolved, report)
    check_files(listing, resolved, report)
    scan_extras(listing, resolver, resolved, report)

    report.warnings.extend(listing.count_warnings())
    print_verify_summary(listing, report)

    status = report.finalize()
    if status is Status.ERROR:
        console.print("[bold red]✗ Verification completed with errors[/bold red]")
    elif status is Status.WARNING:
        console.print("[bold yellow]⚠ Verification completed with warnings[/bold yellow]")
    else:
        console.print("[bold green]✓ Verification successful - all files and directories match[/bold green]")
    return report
