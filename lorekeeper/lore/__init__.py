"""Lore markup tokenizing and preview rendering."""

from .markup import Segment, SegmentKind, TermDirectory, parse_lore_markup, tokenize_lore
from .render import (
    OutlineRenderer,
    numbered_display_indices,
    render_literal,
    render_lore_html,
    render_outline_html,
    render_segment,
)

__all__ = [
    "Segment",
    "SegmentKind",
    "TermDirectory",
    "parse_lore_markup",
    "tokenize_lore",
    "OutlineRenderer",
    "numbered_display_indices",
    "render_literal",
    "render_lore_html",
    "render_outline_html",
    "render_segment",
]
