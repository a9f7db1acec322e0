#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Hardlink indexing for materialized snapshot trees."""

import pathlib
import os
from dataclasses import dataclass
from typing import Dict, List

from snaplink.identity import NodeId


@dataclass
class HardlinkEntry:
    path: pathlib.Path
    nlink: int
    node: NodeId
    is_hardlink: bool  # True if nlink > 1
    is_dir: bool


def _entry(path: pathlib.Path, is_dir: bool) -> HardlinkEntry:
    st = path.stat()
    return HardlinkEntry(
        path=path,
        nlink=st.st_nlink,
        node=NodeId(dev=st.st_dev, ino=st.st_ino),
        # Directories can't be hardlinked
        is_hardlink=(not is_dir) and st.st_nlink > 1,
        is_dir=is_dir,
    )


def scan_hardlinks(base_path: os.PathLike | str) -> List[HardlinkEntry]:
    """
    Recursively scan for all files and directories under base_path, identifying hardlinks.

    Entries that can't be stat'ed (permission denied, removed mid-scan) are left out.

    Args:
        base_path: The root directory to scan.

    Returns:
        List of HardlinkEntry objects, sorted by path.
    """
    entries = []
    for root, dirs, files in os.walk(base_path):
        root_path = pathlib.Path(root)
        for name in files:
            try:
                entries.append(_entry(root_path / name, is_dir=False))
            except OSError:
                continue
        for name in dirs:
            try:
                entries.append(_entry(root_path / name, is_dir=True))
            except OSError:
                continue
    entries.sort(key=lambda e: str(e.path))
    return entries


def group_shared(entries: List[HardlinkEntry]) -> Dict[NodeId, List[pathlib.Path]]:
    """Group the file entries seen more than once in a scan by their node id."""
    groups: Dict[NodeId, List[pathlib.Path]] = {}
    for e in entries:
        if e.is_dir:
            continue
        groups.setdefault(e.node, []).append(e.path)
    return {node: paths for node, paths in groups.items() if len(paths) > 1}
