#!/usr/bin/env python3
"""
Lorekeeper - World-building wiki editing core

Command-line entry point. Loads entries and terms from the configured
importer and inspects, normalizes or renders them.
"""

import json
import logging
import sys
import argparse
from typing import List, Optional

from lorekeeper.config import config
from lorekeeper.importers import BaseImporter, MarkdownImporter, MockImporter
from lorekeeper.lore import parse_lore_markup, render_outline_html
from lorekeeper.models import Entry, EntryDraft
from lorekeeper.outline import OutlineSession, OutlineTree
from lorekeeper.publishing import InMemoryEntryStore, Publisher


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def create_importer(name: str, entries_path: Optional[str] = None) -> BaseImporter:
    """
    Build the importer selected on the command line.

    Args:
        name: "mock" or "markdown"
        entries_path: Directory for the markdown importer

    Returns:
        The importer instance
    """
    if name == "markdown":
        return MarkdownImporter(entries_path)
    return MockImporter()


def format_outline(tree: OutlineTree) -> str:
    """One line per block: indentation by depth, type, id and content."""
    lines = []
    for node, depth in tree.walk():
        preview = (node.content or "").replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        lines.append(f"{'  ' * depth}[{node.type}] {node.id}  {preview}".rstrip())
    return "\n".join(lines)


def load_session(importer: BaseImporter, entry: Entry) -> OutlineSession:
    """Open an entry's document in a fresh editing session."""
    session = OutlineSession()
    session.load(importer.load_outline(entry).roots)
    return session


def normalize_entry(entry: Entry, session: OutlineSession) -> str:
    """Republish an entry into a scratch store and return its document."""
    store = InMemoryEntryStore(author=entry.author)
    metadata = EntryDraft(**entry.model_dump()).model_dump()
    published, _ = Publisher(store).publish(session, metadata)
    return published.content


def run_command(args, importer: BaseImporter) -> int:
    """
    Execute one CLI command.

    Returns:
        Process exit status
    """
    if args.command == "list":
        for entry in importer.get_all_entries():
            print(f"{entry.id}\t{entry.category.value}\t{entry.title}")
        return 0

    if args.command == "segments":
        segments = parse_lore_markup(args.text, importer.get_all_terms(), importer.get_all_entries())
        print(json.dumps([segment.model_dump(mode="json") for segment in segments], indent=2, ensure_ascii=False))
        return 0

    entry = importer.get_entry(args.entry_id)
    if entry is None:
        print(f"No entry with id {args.entry_id}", file=sys.stderr)
        return 1

    session = load_session(importer, entry)

    if args.command == "outline":
        print(format_outline(session.tree))
    elif args.command == "normalize":
        print(normalize_entry(entry, session))
    elif args.command == "render":
        print(render_outline_html(session.tree.roots, importer.get_all_terms(), importer.get_all_entries()))
    return 0


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Lorekeeper - World-building wiki editing core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py list                                      # List the sample entries
  python main.py outline 3                                 # Show entry 3 as a block outline
  python main.py --importer markdown --entries-path ./entries normalize whisper-fungus
  python main.py segments "Beware [[Ember Core|the guild]] and ||the vault||"
        """
    )

    parser.add_argument(
        "--importer",
        choices=["mock", "markdown"],
        default=config.default_importer,
        help="Entry source to use (default: from config, normally mock)"
    )

    parser.add_argument(
        "--entries-path",
        type=str,
        help="Directory of entry files (markdown importer only)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="Lorekeeper 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List entries")
    for name, help_text in (
        ("outline", "Print an entry as a block outline"),
        ("normalize", "Re-serialize an entry through the outline editor"),
        ("render", "Render an entry as preview HTML"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("entry_id", help="Id of the entry")

    segments = subparsers.add_parser("segments", help="Tokenize lore markup into JSON segments")
    segments.add_argument("text", help="Text to tokenize")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging()

    try:
        importer = create_importer(args.importer, args.entries_path)
        return run_command(args, importer)
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
