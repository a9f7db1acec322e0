#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command line wrapper for finalizing and inspecting snapshot directories by hand.

    python -m snaplink apply <dir> [--delete-sources]
    python -m snaplink mirror <source_dir> <dest_dir>
    python -m snaplink identity <path>...
    python -m snaplink show <manifest>
    python -m snaplink scan <dir>
"""

import argparse
import pathlib
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from snaplink.core import mirror_tree
from snaplink.identity import identity_token
from snaplink.link_index import group_shared, scan_hardlinks
from snaplink.logger_utils import get_logger
from snaplink.manifest import apply_manifest, read_manifest

logger = get_logger("snaplink.cli")


def _cmd_apply(args, console: Console) -> int:
    apply_manifest(args.target_dir, delete_sources=args.delete_sources)
    console.print(f"[green]Applied hardlinks in[/green] {args.target_dir}")
    return 0


def _cmd_mirror(args, console: Console) -> int:
    mirror_tree(args.source_dir, args.dest_dir)
    console.print(f"[green]Mirrored[/green] {args.source_dir} -> {args.dest_dir}")
    return 0


def _cmd_identity(args, console: Console) -> int:
    for path in args.paths:
        console.print(f"{identity_token(path)}\t{path}", highlight=False)
    return 0


def _cmd_show(args, console: Console) -> int:
    entries = read_manifest(args.manifest)
    table = Table(title=str(args.manifest))
    table.add_column("#", justify="right")
    table.add_column("Destination")
    table.add_column("Source")
    for idx, entry in enumerate(entries):
        table.add_row(str(idx + 1), entry.destination, entry.source)
    console.print(table)
    return 0


def _cmd_scan(args, console: Console) -> int:
    entries = scan_hardlinks(args.directory)
    shared = group_shared(entries)
    base = pathlib.Path(args.directory)
    table = Table(title=str(base))
    table.add_column("Path")
    table.add_column("Type")
    table.add_column("Node")
    table.add_column("Links", justify="right")
    for e in entries:
        name = Text(str(e.path.relative_to(base)))
        if e.is_dir:
            name.stylize("bold blue")
        elif e.is_hardlink:
            name.stylize("magenta")
        table.add_row(
            name,
            "Dir" if e.is_dir else ("Hardlink" if e.is_hardlink else "File"),
            str(e.node),
            f"[magenta]{e.nlink}[/magenta]" if e.is_hardlink else str(e.nlink),
        )
    console.print(table)
    console.print(f"{len(shared)} node(s) linked more than once within the tree")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snaplink",
        description="Materialize and inspect hardlinked snapshot directories",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("apply", help="Create the hardlinks listed in a directory's manifest")
    p.add_argument("target_dir", type=pathlib.Path)
    p.add_argument("--delete-sources", action="store_true",
                   help="Delete the linked source files afterwards")
    p.set_defaults(func=_cmd_apply)

    p = sub.add_parser("mirror", help="Hardlink every file of one tree into another")
    p.add_argument("source_dir", type=pathlib.Path)
    p.add_argument("dest_dir", type=pathlib.Path)
    p.set_defaults(func=_cmd_mirror)

    p = sub.add_parser("identity", help="Print node/mtime identity tokens")
    p.add_argument("paths", nargs="+", type=pathlib.Path)
    p.set_defaults(func=_cmd_identity)

    p = sub.add_parser("show", help="List the entries of a manifest file")
    p.add_argument("manifest", type=pathlib.Path)
    p.set_defaults(func=_cmd_show)

    p = sub.add_parser("scan", help="Show files and their link counts under a directory")
    p.add_argument("directory", type=pathlib.Path)
    p.set_defaults(func=_cmd_scan)
    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)
    console = console or Console()
    logger.debug(f"Running command '{args.command}'")
    try:
        return args.func(args, console)
    except (OSError, UnicodeError) as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        Console(stderr=True).print(f"[bold red]Error:[/bold red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
