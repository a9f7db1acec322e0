#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Hardlink manifest writing and replay.

A manifest is a text file of "destination<TAB>source" lines, relative to the
directory it lives in. Files from the active checkpoint directory are listed
by bare filename; files from other snapshot or backup directories keep their
relative subpath.
"""

import logging
import os
import pathlib
import tempfile
from dataclasses import dataclass
from typing import List, Mapping, Optional

from snaplink.config import (
    ACTIVE_CHECKPOINT_DIR,
    DATA_PREFIX,
    DATA_SUFFIX,
    FIELD_SEPARATOR,
    HARDLINK_FILE,
)
from snaplink.identity import resolve_node
from snaplink.logger_utils import get_logger, resolve_logger

logger = get_logger("snaplink.manifest")


@dataclass(frozen=True)
class LinkEntry:
    destination: str
    source: str


def truncate_file_name(truncate_length: int, path: os.PathLike | str) -> str:
    """Get the path without its leading truncate_length characters."""
    return str(path)[truncate_length:]


def build_manifest(truncate_length: int,
                   hardlink_files: Mapping[os.PathLike | str, os.PathLike | str],
                   active_dir: str = ACTIVE_CHECKPOINT_DIR,
                   log: Optional[logging.Logger] = None) -> pathlib.Path:
    """
    Create a temporary manifest file of links to materialize.

    Entries are written either as:
        dir1/fileTo<TAB>fileFrom        for files in the active checkpoint dir
        dir1/fileTo<TAB>dir2/fileFrom   for files in any other directory

    Args:
        truncate_length: Length of the leading path to trim from both paths.
        hardlink_files: Mapping of link path -> source file path. Lines are
                        written in the mapping's iteration order.
        active_dir: Marker prefix identifying the active checkpoint directory.
        log: Optional logger; defaults to the module logger.

    Returns:
        Path to the temporary manifest. Moving it into place is up to the caller.

    Raises:
        UnicodeEncodeError: If a path can't be written as UTF-8. No temp file is created.
        OSError: If the temp file can't be created or written.
    """
    log = resolve_logger(log, logger)
    lines = []
    for link, source in hardlink_files.items():
        fixed_source = truncate_file_name(truncate_length, source)
        # Active checkpoint files are referenced by name only.
        if fixed_source.startswith(active_dir):
            name = pathlib.PurePath(fixed_source).name
            if name:
                fixed_source = name
        lines.append(
            f"{truncate_file_name(truncate_length, link)}{FIELD_SEPARATOR}{fixed_source}\n"
        )

    payload = "".join(lines).encode("utf-8")

    fd, name = tempfile.mkstemp(prefix=DATA_PREFIX, suffix=DATA_SUFFIX)
    data = pathlib.Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
    except OSError:
        data.unlink(missing_ok=True)
        raise
    log.debug(f"Wrote {len(lines)} manifest entries to '{data}'")
    return data


def read_manifest(manifest: os.PathLike | str,
                  log: Optional[logging.Logger] = None) -> List[LinkEntry]:
    """
    Read every well-formed entry of a manifest.

    Lines that do not split into exactly two non-empty fields are logged and skipped.
    """
    log = resolve_logger(log, logger)
    with open(manifest, "r", encoding="utf-8") as f:
        # Only newlines end an entry; other line breaks are legal in file names.
        lines = [line.rstrip("\n") for line in f]
    entries = []
    for line in lines:
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) != 2 or not all(parts):
            log.warning(f"Skipping malformed line in hardlink file: {line!r}")
            continue
        entries.append(LinkEntry(destination=parts[0], source=parts[1]))
    return entries


def _resolve_entry_path(target_dir: pathlib.Path, rel: str) -> Optional[pathlib.Path]:
    """Join rel under target_dir, or None if it would land outside it."""
    # Leading separators are kept under target_dir, not treated as absolute.
    full = pathlib.Path(str(target_dir), rel.lstrip("/" + os.sep))
    root = os.path.normpath(target_dir)
    if not os.path.normpath(full).startswith(root.rstrip(os.sep) + os.sep):
        return None
    return full


def _link(to_path: pathlib.Path, from_path: pathlib.Path, log: logging.Logger):
    try:
        os.link(from_path, to_path)
    except FileExistsError:
        # Left over from an interrupted pass; a symlink there does not count.
        if resolve_node(to_path, follow_symlinks=False) == resolve_node(from_path):
            log.info(f"Hardlink '{to_path}' -> '{from_path}' already exists")
            return
        raise
    log.debug(f"Created hardlink '{to_path}' -> '{from_path}'")


def apply_manifest(target_dir: os.PathLike | str,
                   delete_sources: bool = False,
                   log: Optional[logging.Logger] = None) -> None:
    """
    Create the hard links listed in the manifest of target_dir.

    The manifest is deleted once every entry has been linked. If a link fails the
    error propagates and the manifest is kept so the pass can be replayed.

    Args:
        target_dir: Directory holding the manifest; entries resolve against it.
                    Entries that would resolve outside it are logged and skipped.
        delete_sources: Whether to delete the source files after linking.
                        Cleanup failures are logged, never raised.
        log: Optional logger to report skipped lines and cleanup failures to.
    """
    log = resolve_logger(log, logger)
    target_dir = pathlib.Path(target_dir)
    hardlink_file = target_dir / HARDLINK_FILE
    files_to_delete = {}

    if hardlink_file.exists():
        entries = read_manifest(hardlink_file, log=log)
        for entry in entries:
            full_from = _resolve_entry_path(target_dir, entry.source)
            full_to = _resolve_entry_path(target_dir, entry.destination)
            if full_from is None or full_to is None:
                log.warning(f"Skipping hardlink entry outside '{target_dir}': {entry}")
                continue
            files_to_delete[full_from] = None
            parent = full_to.parent
            if not parent.exists():
                try:
                    parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise OSError(f"Failed to create directory: {parent}") from e
            _link(full_to, full_from, log)
        try:
            hardlink_file.unlink()
        except OSError as e:
            raise OSError(f"Failed to delete: {hardlink_file}") from e
        log.info(f"Applied {len(entries)} hardlinks in '{target_dir}'")

    if delete_sources:
        for file_to_delete in files_to_delete:
            try:
                file_to_delete.unlink(missing_ok=True)
            except OSError as e:
                log.warning(f"Couldn't delete source file '{file_to_delete}' while unpacking the DB: {e}")
