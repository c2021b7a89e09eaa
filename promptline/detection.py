"""Directory-based project detection."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing."""

    name: str
    is_dir: bool = False


@dataclass(frozen=True)
class DetectionSpec:
    """Signals that mark a directory as a project of some kind."""

    extensions: frozenset[str] = field(default_factory=frozenset)
    filenames: frozenset[str] = field(default_factory=frozenset)
    foldernames: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_iterables(
        cls,
        extensions: Iterable[str] = (),
        filenames: Iterable[str] = (),
        foldernames: Iterable[str] = (),
    ) -> "DetectionSpec":
        return cls(frozenset(extensions), frozenset(filenames), frozenset(foldernames))

    @property
    def is_empty(self) -> bool:
        return not (self.extensions or self.filenames or self.foldernames)


def extension_candidates(filename: str) -> list[str]:
    """
    List every extension a file name can be said to have.

    Examples:
        "main.c" -> ["c"]
        "archive.tar.gz" -> ["tar.gz", "gz"]
        ".clang-format" -> []

    Args:
        filename: Bare file name (no directories)

    Returns:
        Extensions from longest to shortest
    """
    parts = filename.lstrip(".").split(".")
    if filename.startswith(".") and len(parts) == 1:
        return []
    return [".".join(parts[i:]) for i in range(1, len(parts)) if all(parts[i:])]


def _entry_matches(entry: DirEntry, spec: DetectionSpec) -> bool:
    if entry.is_dir:
        return entry.name in spec.foldernames
    if entry.name in spec.filenames:
        return True
    return any(ext in spec.extensions for ext in extension_candidates(entry.name))


def matches(listing: Optional[Iterable[DirEntry]], spec: DetectionSpec) -> bool:
    """
    Decide whether a listing belongs to a project described by spec.

    Short-circuits on the first matching entry. A missing listing (the
    directory could not be read) never matches, nor does an empty spec.

    Args:
        listing: Directory entries, or None if listing failed
        spec: Detection signals

    Returns:
        True if any entry satisfies any signal
    """
    if listing is None or spec.is_empty:
        return False
    return any(_entry_matches(entry, spec) for entry in listing)


def list_directory(path: Path) -> Optional[list[DirEntry]]:
    """
    List a directory for detection.

    Args:
        path: Directory to list

    Returns:
        Entries sorted by name, or None if the directory cannot be read
    """
    try:
        entries = [DirEntry(name=p.name, is_dir=p.is_dir()) for p in path.iterdir()]
    except OSError as e:
        logger.debug(f"Cannot list {path}: {e}")
        return None
    entries.sort(key=lambda entry: entry.name)
    return entries
