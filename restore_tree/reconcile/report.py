"""
Reconciliation report.

One report is built per create or verify run, finalized once at the end
of the run, then rendered.
"""

from dataclasses import dataclass, field
from enum import Enum


class Status(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    @property
    def exit_code(self) -> int:
        return 1 if self is Status.ERROR else 0


@dataclass
class ReconciliationReport:
    mode: str
    # Create mode
    created_dirs: int = 0
    skipped_dirs: int = 0
    expected_dir_count: int | None = None
    # Verify mode
    ok_dirs: int = 0
    missing_dirs: list[str] = field(default_factory=list)
    ok_files: int = 0
    missing_files: list[str] = field(default_factory=list)
    size_mismatches: list[tuple[str, int, int]] = field(default_factory=list)
    scan_roots: list[str] = field(default_factory=list)
    extra_scan_skipped: bool = False
    extra_files: list[str] = field(default_factory=list)
    extra_dirs: list[str] = field(default_factory=list)
    # Informational, never raises the status on its own
    warnings: list[str] = field(default_factory=list)
    status: Status | None = None

    @property
    def processed_dirs(self) -> int:
        return self.created_dirs + self.skipped_dirs

    @property
    def count_verified(self) -> bool | None:
        """Create-mode count check: None when the listing declared no usable total."""
        if not self.expected_dir_count or self.expected_dir_count <= 0:
            return None
        return self.processed_dirs == self.expected_dir_count

    @property
    def has_errors(self) -> bool:
        if self.mode == "create":
            return self.count_verified is False
        return bool(self.missing_dirs or self.missing_files or self.size_mismatches)

    @property
    def has_warnings(self) -> bool:
        if self.mode == "create":
            return self.count_verified is None
        return bool(self.extra_files or self.extra_dirs)

    def finalize(self) -> Status:
        """Derive the terminal status. A report can only be finalized once."""
        if self.status is not None:
            raise RuntimeError(f"Report already finalized with status {self.status.value}")
        if self.has_errors:
            self.status = Status.ERROR
        elif self.has_warnings:
            self.status = Status.WARNING
        else:
            self.status = Status.SUCCESS
        return self.status

    def summary_rows(self) -> list[tuple[str, int]]:
        if self.mode == "create":
            return [
                ("Directories created", self.created_dirs),
                ("Directories already existing", self.skipped_dirs),
            ]
        return [
            ("Directories OK", self.ok_dirs),
            ("Directories missing", len(self.missing_dirs)),
            ("Files OK", self.ok_files),
            ("Files missing", len(self.missing_files)),
            ("Files wrong size", len(self.size_mismatches)),
            ("Extra files", len(self.extra_files)),
            ("Extra directories", len(self.extra_dirs)),
        ]
