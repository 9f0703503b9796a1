"""Data models for Lorekeeper."""

from .blocks import (
    BlockNode,
    CalloutBlock,
    CodeBlock,
    HeadingBlock,
    ImageBlock,
    ListItemBlock,
    ParagraphBlock,
    QuoteBlock,
    ReferenceBlock,
    RuleBlock,
    generate_block_id,
    parse_block,
)
from .lore import Category, Entry, EntryDraft, Term, TermStatus, TermType

__all__ = [
    "BlockNode",
    "CalloutBlock",
    "CodeBlock",
    "HeadingBlock",
    "ImageBlock",
    "ListItemBlock",
    "ParagraphBlock",
    "QuoteBlock",
    "ReferenceBlock",
    "RuleBlock",
    "generate_block_id",
    "parse_block",
    "Category",
    "Entry",
    "EntryDraft",
    "Term",
    "TermStatus",
    "TermType",
]
