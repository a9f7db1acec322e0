"""Tests for node ids and identity tokens."""

from __future__ import annotations

import os
import shutil
from typing import TYPE_CHECKING

import pytest

from snaplink.identity import NodeId, file_identity, identity_token, resolve_node, same_node

if TYPE_CHECKING:
    from pathlib import Path


def test_hardlink_shares_node_and_copy_does_not(tmp_path: Path) -> None:
    original = tmp_path / "a.sst"
    original.write_bytes(b"data")
    linked = tmp_path / "b.sst"
    os.link(original, linked)
    copied = tmp_path / "c.sst"
    shutil.copyfile(original, copied)

    assert resolve_node(original) == resolve_node(linked)
    assert resolve_node(original) != resolve_node(copied)
    assert same_node(original, linked)
    assert not same_node(original, copied)


def test_node_survives_rename(tmp_path: Path) -> None:
    path = tmp_path / "a.sst"
    path.write_bytes(b"data")
    before = resolve_node(path)
    renamed = path.rename(tmp_path / "renamed.sst")

    assert resolve_node(renamed) == before


def test_node_id_is_hashable_with_stable_formatting() -> None:
    node = NodeId(dev=0x803, ino=42)

    assert {node: 1}[NodeId(dev=0x803, ino=42)] == 1
    assert str(node) == "(dev=803,ino=42)"


def test_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        resolve_node(tmp_path / "missing")
    with pytest.raises(FileNotFoundError):
        identity_token(tmp_path / "missing")


def test_identity_token_combines_node_and_mtime_millis(tmp_path: Path) -> None:
    path = tmp_path / "a.sst"
    path.write_bytes(b"data")
    mtime_ns = 1_700_000_000_123_000_000
    os.utime(path, ns=(mtime_ns, mtime_ns))

    token = identity_token(path)

    assert token == f"{resolve_node(path)}-1700000000123"
    assert file_identity(path).mtime_ms == 1_700_000_000_123


def test_identity_token_changes_when_file_is_rewritten(tmp_path: Path) -> None:
    path = tmp_path / "a.sst"
    path.write_bytes(b"one")
    os.utime(path, ns=(1_000_000_000_000, 1_000_000_000_000))
    before = identity_token(path)

    path.write_bytes(b"two")
    os.utime(path, ns=(2_000_000_000_000, 2_000_000_000_000))

    assert identity_token(path) != before
    assert file_identity(path).node.ino == resolve_node(path).ino


def test_resolve_node_without_following_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "a.sst"
    target.write_bytes(b"data")
    link = tmp_path / "link.sst"
    link.symlink_to(target)

    assert resolve_node(link) == resolve_node(target)
    assert resolve_node(link, follow_symlinks=False) != resolve_node(target)
