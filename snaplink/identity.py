#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""File identity helpers: filesystem node ids and node/mtime identity tokens."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class NodeId:
    """Filesystem node identity of a file. Stable across renames, not across copies."""
    dev: int
    ino: int

    def __str__(self) -> str:
        return f"(dev={self.dev:x},ino={self.ino})"


@dataclass(frozen=True)
class FileIdentity:
    node: NodeId
    mtime_ms: int

    def __str__(self) -> str:
        return f"{self.node}-{self.mtime_ms}"


def resolve_node(path: os.PathLike | str, follow_symlinks: bool = True) -> NodeId:
    """
    Get the node id of a file.

    Args:
        path: File whose node id is to be retrieved.
        follow_symlinks: If False, a symlink resolves to its own node.

    Returns:
        NodeId for the file.

    Raises:
        OSError: If the path does not exist or its attributes cannot be read.
    """
    st = os.stat(path, follow_symlinks=follow_symlinks)
    return NodeId(dev=st.st_dev, ino=st.st_ino)


def file_identity(path: os.PathLike | str) -> FileIdentity:
    """Return the (node id, mtime in milliseconds) pair for a file."""
    st = os.stat(path)
    return FileIdentity(
        node=NodeId(dev=st.st_dev, ino=st.st_ino),
        mtime_ms=st.st_mtime_ns // 1_000_000,
    )


def identity_token(path: os.PathLike | str) -> str:
    """
    Returns a string combining the node id and the last modification time of a file.

    The string is formatted as "{node}-{mtime}", where mtime is in milliseconds
    since the epoch. Useful for change detection; a file rewritten in place keeps
    its node but changes its mtime.
    """
    return str(file_identity(path))


def same_node(a: os.PathLike | str, b: os.PathLike | str) -> bool:
    """True if both paths are directory entries for the same underlying file."""
    return resolve_node(a) == resolve_node(b)
