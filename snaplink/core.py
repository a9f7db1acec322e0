#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Whole-tree hardlink mirroring: directories are created, files are linked."""

import logging
import os
import pathlib
from typing import List, Optional

from snaplink.logger_utils import get_logger, resolve_logger

logger = get_logger("snaplink.core")


def list_relative_entries(source_dir: os.PathLike | str) -> List[str]:
    """
    List every file and directory under source_dir, relative to it and sorted.

    The root itself is excluded. A parent's relative path always sorts before its
    children's, so directories come before anything linked into them.
    """
    root = str(pathlib.Path(source_dir))
    truncate_length = len(root) + 1
    found = []
    for dirpath, dirs, files in os.walk(root):
        for name in dirs + files:
            found.append(os.path.join(dirpath, name)[truncate_length:])
    return sorted(found)


def mirror_tree(source_dir: os.PathLike | str, dest_dir: os.PathLike | str,
                log: Optional[logging.Logger] = None) -> None:
    """
    Link each of the files in source_dir into dest_dir, recreating its directories.

    Args:
        source_dir: The directory to create links from.
        dest_dir: The directory to create links in.
        log: Optional logger; defaults to the module logger.

    Raises:
        OSError: If a directory cannot be created or a file cannot be linked.
                 There is no per-entry skip; the first failure aborts the mirror.
    """
    log = resolve_logger(log, logger)
    source_dir = pathlib.Path(source_dir)
    dest_dir = pathlib.Path(dest_dir)
    entries = list_relative_entries(source_dir)
    log.info(f"Mirroring {len(entries)} entries from '{source_dir}' to '{dest_dir}'")

    for rel in entries:
        old_file = source_dir / rel
        new_file = dest_dir / rel
        new_parent = new_file.parent
        if not new_parent.exists():
            try:
                new_parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OSError(f"Directory create fails: {new_parent}") from e
        if old_file.is_dir():
            try:
                new_file.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OSError(f"Directory create fails: {new_file}") from e
        else:
            log.debug(f"Creating hardlink: '{old_file}' -> '{new_file}'")
            os.link(old_file, new_file)
