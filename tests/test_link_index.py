"""Tests for hardlink scanning."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from snaplink.config import HARDLINK_FILE
from snaplink.identity import resolve_node
from snaplink.link_index import group_shared, scan_hardlinks
from snaplink.manifest import apply_manifest

if TYPE_CHECKING:
    from pathlib import Path


def test_scan_hardlinks_reports_link_counts(tmp_path: Path) -> None:
    (tmp_path / "d").mkdir()
    (tmp_path / "single.sst").write_bytes(b"1")
    (tmp_path / "shared.sst").write_bytes(b"2")
    os.link(tmp_path / "shared.sst", tmp_path / "d" / "shared.sst")

    entries = {e.path.relative_to(tmp_path).as_posix(): e for e in scan_hardlinks(tmp_path)}

    assert set(entries) == {"d", "single.sst", "shared.sst", "d/shared.sst"}
    assert entries["d"].is_dir and not entries["d"].is_hardlink
    assert not entries["single.sst"].is_hardlink
    assert entries["shared.sst"].is_hardlink
    assert entries["shared.sst"].nlink == 2
    assert entries["shared.sst"].node == resolve_node(tmp_path / "d" / "shared.sst")


def test_group_shared_after_applying_manifest(tmp_path: Path) -> None:
    (tmp_path / "a.sst").write_bytes(b"a")
    (tmp_path / "b.sst").write_bytes(b"b")
    (tmp_path / HARDLINK_FILE).write_text("s1/a.sst\ta.sst\ns2/a.sst\ta.sst\n")
    apply_manifest(tmp_path)

    shared = group_shared(scan_hardlinks(tmp_path))

    assert list(shared) == [resolve_node(tmp_path / "a.sst")]
    paths = {p.relative_to(tmp_path).as_posix() for p in shared[resolve_node(tmp_path / "a.sst")]}
    assert paths == {"a.sst", "s1/a.sst", "s2/a.sst"}
