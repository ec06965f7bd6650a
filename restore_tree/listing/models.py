"""
Parsed listing data structures.
"""

from dataclasses import dataclass, field

# Size of a file entry whose size should not be checked
UNKNOWN_SIZE = None


@dataclass(frozen=True)
class DirectoryEntry:
    """A listed directory, relative to the listing root, without trailing separator."""
    path: str


@dataclass(frozen=True)
class FileEntry:
    """A listed file and its recorded size in bytes (``UNKNOWN_SIZE`` if not checked)."""
    path: str
    size: int | None = UNKNOWN_SIZE

    @property
    def size_known(self) -> bool:
        return self.size is not None and self.size >= 0


@dataclass(frozen=True)
class ParsedListing:
    """
    Everything extracted from one listing export.

    The expected counts come from the listing's summary lines and are only
    cross-checks: a mismatch with the parsed entries is a warning.
    """
    directories: tuple[DirectoryEntry, ...] = ()
    files: tuple[FileEntry, ...] = ()
    expected_dir_count: int | None = None
    expected_file_count: int | None = None
    categories: frozenset[str] = field(default_factory=frozenset)

    @property
    def directory_paths(self) -> list[str]:
        return [d.path for d in self.directories]

    def count_warnings(self) -> list[str]:
        """
        Compare parsed entry counts with the counts declared by the listing.

        Returns:
            One message per disagreement. Absent or zero declarations are not compared.
        """
        warnings = []
        if self.expected_dir_count and len(self.directories) != self.expected_dir_count:
            warnings.append(
                f"Parsed {len(self.directories)} directories from listing, "
                f"but file claims {self.expected_dir_count}"
            )
        if self.expected_file_count and len(self.files) != self.expected_file_count:
            warnings.append(
                f"Parsed {len(self.files)} files from listing, "
                f"but file claims {self.expected_file_count}"
            )
        return warnings
