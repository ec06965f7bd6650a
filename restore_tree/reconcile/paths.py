"""
Path helpers shared by create and verify mode.

Listing paths use either separator and come from a tool that does not
care about case, so everything that compares paths goes through a
case-normalized key.
"""

import os
from typing import Iterable

PARENT_SEGMENT = ".."


class UnsafePathError(ValueError):
    """A listing path climbs out of the directory it is joined onto."""

    def __init__(self, rel_path: str):
        super().__init__(f"Listing path '{rel_path}' leaves the target directory")
        self.rel_path = rel_path


def split_listing_path(rel_path: str) -> list[str]:
    """Split a listing path on either separator, dropping empty and ``.`` segments."""
    return [part for part in rel_path.replace("\\", "/").split("/") if part and part != "."]


def normalize_key(rel_path: str) -> str:
    """Case- and separator-normalized form of a listing path, e.g. ``folder a/sub``."""
    return "/".join(split_listing_path(rel_path)).lower()


def path_key(path: str) -> str:
    """Case-normalized form of a host filesystem path."""
    return path.lower()


def join_under(root: str, rel_path: str) -> str:
    """
    Join a listing path onto a host directory using host separators.

    Raises:
        UnsafePathError: If the path has a ``..`` segment.
    """
    parts = split_listing_path(rel_path)
    if PARENT_SEGMENT in parts:
        raise UnsafePathError(rel_path)
    if not parts:
        return os.path.normpath(root)
    return os.path.normpath(os.path.join(root, *parts))


class PathResolver:
    """
    Case-insensitive lookup of listing paths under one root.

    Each directory is listed at most once per resolver, so resolving many
    entries that share a parent costs one ``scandir`` of that parent.
    """

    def __init__(self, root: str):
        self.root = os.path.normpath(root)
        self._children: dict[str, dict[str, str]] = {}

    def _child_names(self, parent: str) -> dict[str, str]:
        names = self._children.get(parent)
        if names is None:
            names = {}
            try:
                with os.scandir(parent) as it:
                    for entry in it:
                        names.setdefault(entry.name.lower(), entry.name)
            except OSError:
                pass
            self._children[parent] = names
        return names

    def resolve(self, rel_path: str) -> str:
        """
        Resolve a listing path, matching segments case-insensitively.

        The exact spelling is tried first. If it does not exist, each segment
        is looked up among the existing children of its parent ignoring case.

        Returns:
            The path of the existing entry, or the exact join if nothing matches.

        Raises:
            UnsafePathError: If the path has a ``..`` segment.
        """
        exact = join_under(self.root, rel_path)
        if os.path.lexists(exact):
            return exact

        current = self.root
        for part in split_listing_path(rel_path):
            candidate = os.path.join(current, part)
            if not os.path.lexists(candidate):
                match = self._child_names(current).get(part.lower())
                if match is None:
                    return exact
                candidate = os.path.join(current, match)
            current = candidate
        return os.path.normpath(current)


def resolve_under(root: str, rel_path: str) -> str:
    """One-off case-insensitive resolution of ``rel_path`` under ``root``."""
    return PathResolver(root).resolve(rel_path)


def is_strict_ancestor(ancestor: str, path: str) -> bool:
    """
    Check whether listing path ``ancestor`` contains listing path ``path``.

    Both are compared case- and separator-normalized. A path is not its own ancestor.
    """
    a = normalize_key(ancestor)
    p = normalize_key(path)
    if a == p:
        return False
    if not a:
        return True
    return p.startswith(a + "/")


def find_root_dirs(directories: Iterable[str]) -> list[str]:
    """
    Infer the top-level directories of a listing.

    A directory is a root when no other listed directory is a strict
    ancestor of it. Roots are returned in listing order, with the first
    spelling kept when the same directory appears more than once.

    Example:
        ["A", "A\\B", "A\\B\\C", "D"] -> ["A", "D"]
    """
    directories = list(directories)

    # Sorted keys put every ancestor before its descendants, so checking
    # against the roots accepted so far is enough.
    root_keys: list[str] = []
    for key in sorted({normalize_key(d) for d in directories}):
        if not any(is_strict_ancestor(r, key) for r in root_keys):
            root_keys.append(key)

    pending = set(root_keys)
    roots: list[str] = []
    for directory in directories:
        key = normalize_key(directory)
        if key in pending:
            pending.discard(key)
            roots.append("/".join(split_listing_path(directory)))
    return roots
