"""Listing files in a directory tree filtered by extension."""

from __future__ import annotations

import os
from collections.abc import Iterable

from .errors import ERROR_FILE_NOT_FOUND, DirectoryError


def get_extension(name: str) -> str:
    """Extension of a name from its last dot, or an empty string."""
    pos = name.rfind(".")
    return "" if pos == -1 else name[pos:]


def has_extension(masks: Iterable[str], extension: str) -> bool:
    """Whether the extension equals one of the masks, ignoring case."""
    extension = extension.lower()
    return any(extension == mask.lower() for mask in masks)


def get_files(path: str, masks: Iterable[str] = (), recursive: bool = True) -> list[str]:
    """Paths of the files under path whose extension matches one of masks.

    An empty set of masks matches every file. Subdirectories that cannot be
    read are skipped.
    """
    if not os.path.exists(path):
        raise DirectoryError(f"Error GetFileAttributes: {path}", ERROR_FILE_NOT_FOUND)
    if len(path) > 1 and path[-1] in (os.sep, os.altsep or os.sep):
        path = path[:-1]
    masks = list(masks)
    found: list[str] = []
    _collect(found, path, masks, recursive)
    return found


def _collect(found: list[str], path: str, masks: list[str], recursive: bool) -> None:
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        raise DirectoryError(f"Error listing {path}", exc.errno or ERROR_FILE_NOT_FOUND) from exc

    for entry in entries:
        full = os.path.join(path, entry.name)
        if entry.is_dir():
            if recursive and not entry.is_symlink():
                try:
                    _collect(found, full, masks, recursive)
                except DirectoryError:
                    pass
            continue
        if not masks or has_extension(masks, get_extension(entry.name)):
            found.append(full)