#!/usr/bin/env python3
"""
bm - a minimal bookmark manager

Command-line interface over the bookmark repository. Each invocation opens
the database once, runs one command, and closes it again.
"""
import sys
import json
import argparse
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bm import __version__
from bm.config import init_config, get_config
from bm.constants import (
    DEFAULT_SEPARATOR, OUTPUT_FORMATS,
    EXIT_ERROR, EXIT_INTERRUPTED,
)
from bm.db import Database
from bm.exceptions import BookmarkError, describe
from bm.models import Bookmark
from bm.tag_utils import split_tags

logger = logging.getLogger(__name__)


console = Console()


def output_bookmarks(bookmarks: List[Bookmark], format: str = "plain", separator: str = DEFAULT_SEPARATOR):
    """Output bookmarks in the specified format."""
    if format == "table":
        table = Table(title="Bookmarks")
        table.add_column("Name", style="cyan")
        table.add_column("URL", style="blue")
        table.add_column("Tags", style="yellow")
        table.add_column("Archived", style="magenta")

        for bookmark in bookmarks:
            table.add_row(
                escape(bookmark.name),
                escape(bookmark.url or ""),
                escape(", ".join(sorted(bookmark.tag_names))),
                "yes" if bookmark.archived else ""
            )

        console.print(table)
    else:  # plain
        for bookmark in bookmarks:
            print(f"{bookmark.name}{separator}{bookmark.url or ''}")


def cmd_add(args, db: Database):
    """Add a new bookmark."""
    db.add(args.name, args.url, tags=split_tags(args.tags), archived=args.archived)
    if not args.quiet:
        console.print(f"[green]Added bookmark {escape(args.name)}[/green]")


def cmd_delete(args, db: Database):
    """Delete a bookmark."""
    db.delete(args.name)
    if not args.quiet:
        console.print(f"[green]Deleted bookmark {escape(args.name)}[/green]")


def cmd_list(args, db: Database):
    """List bookmarks."""
    bookmarks = db.list(include_archived=args.all)
    bookmarks.sort(key=lambda b: b.name)
    output_bookmarks(bookmarks, args.output, args.separator)


def cmd_update(args, db: Database):
    """Update a bookmark."""
    db.update(args.name, url=args.url, tags=split_tags(args.tags), archived=args.archived)
    if not args.quiet:
        console.print(f"[green]Updated bookmark {escape(args.name)}[/green]")


def cmd_version(args):
    """Show version information."""
    print(__version__)


def cmd_config(args):
    """Manage configuration."""
    config = get_config()

    if args.action == "show":
        if args.key:
            if not hasattr(config, args.key):
                console.print(f"[red]Unknown config key: {escape(args.key)}[/red]")
                sys.exit(EXIT_ERROR)
            print(getattr(config, args.key))
        else:
            print(json.dumps(asdict(config), indent=2))

    elif args.action == "init":
        path = config.save()
        if not args.quiet:
            console.print(f"[green]Created config at {escape(str(path))}[/green]")


def separator_arg(value: str) -> str:
    """argparse type for a one-character separator."""
    if len(value) != 1:
        raise argparse.ArgumentTypeError(
            f"argument must be exactly one character, got {len(value)} characters"
        )
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bm",
        description="bm - A minimal bookmark management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bm add -n google -u https://google.com -t search -t web
  bm ls
  bm ls --all -o table
  bm upd -n google -u https://google.co.uk
  bm upd -n google --archive
  bm del -n google

Configuration:
  Default database: ./bm.sqlite or from config
  Config file: ~/.config/bm/config.toml
  Environment: BM_DATABASE, BM_SEPARATOR, BM_LOG_LEVEL
        """
    )

    # Global options
    parser.add_argument("-p", "--path", help="Path to the sqlite database")
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add a new bookmark")
    add.add_argument("-n", "--name", required=True, help="Name of the bookmark (must be unique)")
    add.add_argument("-u", "--url", required=True, help="URL of the bookmark")
    add.add_argument("-t", "--tags", action="append", help="Tags for the bookmark (repeatable, comma-separated)")
    add.add_argument("--archived", action="store_true", help="Add the bookmark as archived")
    add.set_defaults(func=cmd_add)

    delete = subparsers.add_parser("del", help="Delete a bookmark")
    delete.add_argument("-n", "--name", required=True, help="Name to be deleted")
    delete.set_defaults(func=cmd_delete)

    ls = subparsers.add_parser("ls", help="List bookmarks")
    ls.add_argument("-s", "--separator", type=separator_arg, help="Separator (one character)")
    ls.add_argument("-a", "--all", action="store_true", help="Include archived bookmarks")
    ls.add_argument("-o", "--output", choices=OUTPUT_FORMATS, help="Output format")
    ls.set_defaults(func=cmd_list)

    upd = subparsers.add_parser("upd", help="Update a bookmark")
    upd.add_argument("-n", "--name", required=True, help="Name of the bookmark to update")
    upd.add_argument("-u", "--url", help="New URL")
    upd.add_argument("-t", "--tags", action="append", help="Replace all tags (repeatable, comma-separated)")
    archive = upd.add_mutually_exclusive_group()
    archive.add_argument("--archive", action="store_true", dest="archived", default=None, help="Mark as archived")
    archive.add_argument("--unarchive", action="store_false", dest="archived", help="Remove archived status")
    upd.set_defaults(func=cmd_update)

    version = subparsers.add_parser("version", help="Show version information")
    version.set_defaults(func=cmd_version, standalone=True)

    config = subparsers.add_parser("config", help="Manage configuration")
    config.add_argument("action", choices=["show", "init"], help="Config action")
    config.add_argument("key", nargs="?", help="Config key")
    config.set_defaults(func=cmd_config, standalone=True)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = init_config(
        database=args.path,
        config_file=Path(args.config) if args.config else None,
        reload=True
    )

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.WARNING),
        format='%(levelname)s: %(message)s'
    )
    console.no_color = not config.color_output

    # Fill listing defaults from config
    if getattr(args, "separator", DEFAULT_SEPARATOR) is None:
        if len(config.separator) != 1:
            parser.error(f"configured separator must be exactly one character: {config.separator!r}")
        args.separator = config.separator
    if getattr(args, "output", "plain") is None:
        args.output = config.output_format

    try:
        if getattr(args, "standalone", False):
            args.func(args)
        else:
            with Database(config.database, echo=config.database_echo) as db:
                args.func(args, db)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(EXIT_INTERRUPTED)
    except (BookmarkError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(describe(e))}[/red]")
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
