"""
Lorekeeper: the editing core of a world-building wiki.

Edits lore entries as an outline of typed blocks, serializes them to
markdown and tokenizes lore markup for display.
"""

__version__ = "0.1.0"
__author__ = "Lorekeeper Project"

# Import main components
from .models import BlockNode, Entry, EntryDraft, Term
from .outline import OutlineSession, OutlineTree
from .lore import parse_lore_markup, render_lore_html, render_outline_html
from .importers import BaseImporter, MockImporter, MarkdownImporter
from .publishing import InMemoryEntryStore, Publisher, PublishError

__all__ = [
    "BlockNode",
    "Entry",
    "EntryDraft",
    "Term",
    "OutlineSession",
    "OutlineTree",
    "parse_lore_markup",
    "render_lore_html",
    "render_outline_html",
    "BaseImporter",
    "MockImporter",
    "MarkdownImporter",
    "InMemoryEntryStore",
    "Publisher",
    "PublishError",
]
