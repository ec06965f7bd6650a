import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from restore_tree.listing import UNKNOWN_SIZE, DirectoryEntry, FileEntry, ParsedListing
from restore_tree.reconcile import Status, verify_tree


class TestVerifyMode(unittest.TestCase):
    def setUp(self):
        self.target = Path(tempfile.mkdtemp())
        self.listing = ParsedListing(
            directories=(DirectoryEntry("Folder A"), DirectoryEntry("Folder A\\Sub")),
            files=(FileEntry("Folder A\\Sub\\doc.txt", 120), FileEntry("Folder A\\top.bin", 3)),
            expected_dir_count=2,
            expected_file_count=2,
        )
        (self.target / "Folder A" / "Sub").mkdir(parents=True)
        (self.target / "Folder A" / "Sub" / "doc.txt").write_bytes(b"x" * 120)
        (self.target / "Folder A" / "top.bin").write_bytes(b"abc")

    def tearDown(self):
        shutil.rmtree(self.target)

    def test_complete_tree_is_success(self):
        report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.SUCCESS)
        self.assertEqual(report.ok_dirs, 2)
        self.assertEqual(report.ok_files, 2)
        self.assertEqual(report.missing_dirs, [])
        self.assertEqual(report.missing_files, [])
        self.assertEqual(report.size_mismatches, [])
        self.assertEqual(report.extra_files, [])
        self.assertEqual(report.extra_dirs, [])
        self.assertEqual(report.scan_roots, [os.path.join(os.path.abspath(self.target), "Folder A")])

    def test_size_mismatch_is_error(self):
        (self.target / "Folder A" / "Sub" / "doc.txt").write_bytes(b"x" * 121)

        report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.ERROR)
        self.assertEqual(len(report.size_mismatches), 1)
        _, expected, actual = report.size_mismatches[0]
        self.assertEqual((expected, actual), (120, 121))

    def test_unknown_size_is_not_checked(self):
        listing = ParsedListing(
            directories=self.listing.directories,
            files=(FileEntry("Folder A\\Sub\\doc.txt", UNKNOWN_SIZE), FileEntry("Folder A\\top.bin", 3)),
        )
        (self.target / "Folder A" / "Sub" / "doc.txt").write_bytes(b"")

        report = verify_tree(listing, self.target)

        self.assertEqual(report.status, Status.SUCCESS)
        self.assertEqual(report.ok_files, 2)

    def test_missing_file_and_dir(self):
        shutil.rmtree(self.target / "Folder A" / "Sub")

        report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.ERROR)
        self.assertEqual(len(report.missing_dirs), 1)
        self.assertEqual(len(report.missing_files), 1)

    def test_wrong_kinds_count_as_missing(self):
        shutil.rmtree(self.target / "Folder A" / "Sub")
        (self.target / "Folder A" / "Sub").write_text("file, not dir")
        (self.target / "Folder A" / "top.bin").unlink()
        (self.target / "Folder A" / "top.bin").mkdir()

        report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.ERROR)
        self.assertEqual(len(report.missing_dirs), 1)
        # doc.txt is now missing too, top.bin is a directory
        self.assertEqual(len(report.missing_files), 2)

    def test_extra_items_inside_root_are_warnings(self):
        (self.target / "Folder A" / "stray.txt").write_text("?")
        (self.target / "Folder A" / "Sub" / "Unlisted").mkdir()
        (self.target / "Folder A" / "Sub" / "Unlisted" / "deep.txt").write_text("?")

        report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.WARNING)
        self.assertEqual(report.status.exit_code, 0)
        names = sorted(os.path.basename(p) for p in report.extra_files)
        self.assertEqual(names, ["deep.txt", "stray.txt"])
        self.assertEqual([os.path.basename(p) for p in report.extra_dirs], ["Unlisted"])

    def test_items_outside_roots_are_ignored(self):
        (self.target / "unrelated.txt").write_text("pre-existing")
        (self.target / "Other").mkdir()
        (self.target / "Other" / "thing.txt").write_text("pre-existing")

        report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.SUCCESS)
        self.assertEqual(report.extra_files, [])
        self.assertEqual(report.extra_dirs, [])

    def test_case_differences_are_tolerated(self):
        listing = ParsedListing(
            directories=(DirectoryEntry("FOLDER A"), DirectoryEntry("folder a\\SUB")),
            files=(FileEntry("Folder A\\Sub\\DOC.TXT", 120), FileEntry("folder a\\TOP.bin", 3)),
        )

        report = verify_tree(listing, self.target)

        self.assertEqual(report.status, Status.SUCCESS)
        self.assertEqual(report.extra_files, [])

    def test_empty_listing_skips_extra_scan(self):
        report = verify_tree(ParsedListing(), self.target)

        self.assertTrue(report.extra_scan_skipped)
        self.assertEqual(report.scan_roots, [])
        self.assertEqual(report.status, Status.SUCCESS)

    def test_count_mismatch_alone_stays_success(self):
        listing = ParsedListing(
            directories=self.listing.directories,
            files=self.listing.files,
            expected_dir_count=10,
            expected_file_count=20,
        )

        report = verify_tree(listing, self.target)

        self.assertEqual(report.status, Status.SUCCESS)
        self.assertEqual(len(report.warnings), 2)

    def test_unreadable_directory_is_skipped(self):
        (self.target / "Folder A" / "stray.txt").write_text("?")
        (self.target / "Folder A" / "locked").mkdir()
        (self.target / "Folder A" / "locked" / "hidden.txt").write_text("?")

        real_scandir = os.scandir
        locked = os.path.join(os.path.abspath(self.target), "Folder A", "locked")

        def scandir(path="."):
            if os.path.normpath(os.fspath(path)) == locked:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        with mock.patch("os.scandir", side_effect=scandir):
            report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.WARNING)
        self.assertEqual([os.path.basename(p) for p in report.extra_files], ["stray.txt"])
        self.assertEqual([os.path.basename(p) for p in report.extra_dirs], ["locked"])

    def test_link_to_directory_is_extra_file(self):
        (self.target / "elsewhere").mkdir()
        link = self.target / "Folder A" / "shortcut"
        try:
            os.symlink(self.target / "elsewhere", link, target_is_directory=True)
        except (OSError, NotImplementedError):
            self.skipTest("symlinks not supported here")

        report = verify_tree(self.listing, self.target)

        self.assertEqual(report.status, Status.WARNING)
        self.assertEqual(report.extra_files, [str(link)])
        self.assertEqual(report.extra_dirs, [])

    def test_parent_segments_are_missing(self):
        (self.target / "outside.txt").write_bytes(b"abc")
        listing = ParsedListing(
            directories=self.listing.directories + (DirectoryEntry("Folder A\\..\\..\\Up"),),
            files=self.listing.files + (FileEntry("Folder A\\..\\outside.txt", 3),),
        )

        report = verify_tree(listing, self.target)

        self.assertEqual(report.status, Status.ERROR)
        self.assertEqual(report.missing_dirs, ["Folder A\\..\\..\\Up"])
        self.assertEqual(report.missing_files, ["Folder A\\..\\outside.txt"])
        self.assertEqual(report.ok_files, 2)
        self.assertEqual(report.extra_files, [])


class TestVerifyManyMissing(unittest.TestCase):
    """A partly recovered tree: one directory, most of its files not there yet."""

    def setUp(self):
        self.target = Path(tempfile.mkdtemp())
        (self.target / "Recovered" / "Photos").mkdir(parents=True)
        names = [f"IMG_{i:04d}.JPG" for i in range(500)]
        for name in names[:10]:
            (self.target / "Recovered" / "Photos" / name.lower()).write_bytes(b"x")
        self.listing = ParsedListing(
            directories=(DirectoryEntry("Recovered"), DirectoryEntry("Recovered\\Photos")),
            files=tuple(FileEntry(f"Recovered\\Photos\\{name}", 1) for name in names),
        )

    def tearDown(self):
        shutil.rmtree(self.target)

    def test_each_directory_listed_once(self):
        with mock.patch("os.scandir", wraps=os.scandir) as scandir:
            report = verify_tree(self.listing, self.target)

        self.assertEqual(report.ok_files, 10)
        self.assertEqual(len(report.missing_files), 490)
        self.assertEqual(report.extra_files, [])
        # one lookup for the case-insensitive matches, one per directory walked
        self.assertLessEqual(scandir.call_count, 3)


if __name__ == "__main__":
    unittest.main()
