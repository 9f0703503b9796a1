"""
HTML preview rendering for Lorekeeper.

Lore spans become ``<span class="lore-...">`` elements; the rest of the text
is rendered with Python-Markdown in one pass around them.
"""

import html
import re
from typing import Dict, List, Optional, Sequence

import markdown

from ..config import config
from ..models.blocks import (
    BlockNode,
    CalloutBlock,
    CodeBlock,
    HeadingBlock,
    ImageBlock,
    ListItemBlock,
    QuoteBlock,
    ReferenceBlock,
    RuleBlock,
)
from ..models.lore import Entry, Term
from .markup import TERM_KINDS, Segment, SegmentKind, TermDirectory, tokenize_lore


# Alphanumeric so Markdown passes it through untouched
_SPAN_PLACEHOLDER = "klorespan{}k"
_PLACEHOLDER_PATTERN = re.compile(r"klorespan(\d+)k")


def numbered_display_indices(siblings: Sequence[BlockNode]) -> List[int]:
    """
    Display numbers for numbered list items among ``siblings``.

    The counter increments per consecutive numbered item and restarts after
    any other block. Non-numbered blocks get 0.
    """
    indices: List[int] = []
    counter = 0
    for node in siblings:
        if isinstance(node, ListItemBlock) and node.list_style == "number":
            counter += 1
            indices.append(counter)
        else:
            counter = 0
            indices.append(0)
    return indices


def render_literal(text: str, extensions: Optional[Sequence[str]] = None) -> str:
    """Render markdown text as inline HTML, keeping its surrounding whitespace."""
    core = text.strip()
    if not core:
        return text

    leading = text[:len(text) - len(text.lstrip())]
    trailing = text[len(text.rstrip()):]
    rendered = markdown.markdown(
        core,
        extensions=list(extensions if extensions is not None else config.markdown_extensions),
        output_format="html",
    )
    # Single-paragraph output is unwrapped so it can sit inline
    if rendered.startswith("<p>") and rendered.endswith("</p>") and rendered.count("<p>") == 1:
        rendered = rendered[3:-4]
    return f"{leading}{rendered}{trailing}"


def render_segment(segment: Segment, extensions: Optional[Sequence[str]] = None) -> str:
    if segment.kind == SegmentKind.TEXT:
        return render_literal(segment.text, extensions)

    if segment.kind in TERM_KINDS:
        classes = ["lore-term"]
        if segment.kind == SegmentKind.TERM_LINK:
            classes.append("lore-term-link")
        if not segment.has_term and not segment.has_entry:
            classes.append("missing")

        attrs = [f'class="{" ".join(classes)}"', f'data-term="{html.escape(segment.name or "")}"']
        if segment.entry_id:
            attrs.append(f'data-entry="{html.escape(segment.entry_id)}"')
        if segment.description:
            attrs.append(f'title="{html.escape(segment.description)}"')
        return f'<span {" ".join(attrs)}>{html.escape(segment.label or segment.text)}</span>'

    return f'<span class="lore-{segment.kind.value}">{html.escape(segment.text)}</span>'


def render_lore_html(text: str, terms: Optional[Sequence[Term]] = None,
                     entries: Optional[Sequence[Entry]] = None,
                     extensions: Optional[Sequence[str]] = None) -> str:
    """
    Render one block's text, resolving term spans against the directories.

    The whole text goes through Markdown in one pass, with each lore span
    standing in as a placeholder, so emphasis and lists may enclose spans.
    """
    directory = TermDirectory(terms, entries)
    spans: List[str] = []
    source: List[str] = []
    for segment in tokenize_lore(text):
        if segment.kind == SegmentKind.TEXT:
            source.append(segment.text)
        else:
            source.append(_SPAN_PLACEHOLDER.format(len(spans)))
            spans.append(render_segment(directory.resolve(segment), extensions))

    rendered = render_literal("".join(source), extensions)

    def restore(match: "re.Match[str]") -> str:
        index = int(match.group(1))
        return spans[index] if index < len(spans) else match.group(0)

    return _PLACEHOLDER_PATTERN.sub(restore, rendered)


class OutlineRenderer:
    """
    Renders an outline as preview HTML.
    """

    def __init__(self, terms: Optional[Sequence[Term]] = None, entries: Optional[Sequence[Entry]] = None,
                 extensions: Optional[Sequence[str]] = None):
        self.terms = list(terms or [])
        self.entries = list(entries or [])
        self.extensions = extensions
        self._entries_by_id: Dict[str, Entry] = {entry.id: entry for entry in self.entries}

    def _lore(self, text: str) -> str:
        return render_lore_html(text, self.terms, self.entries, self.extensions)

    def render(self, blocks: Sequence[BlockNode]) -> str:
        """Render sibling blocks and, recursively, their children."""
        parts = []
        for node, index in zip(blocks, numbered_display_indices(blocks)):
            parts.append(self.render_block(node, index))
            if node.children and not node.collapsed:
                parts.append(f'<div class="children">{self.render(node.children)}</div>')
        return "\n".join(parts)

    def render_block(self, node: BlockNode, display_index: int = 0) -> str:
        """
        Render a single block without its children.

        Args:
            node: Block to render
            display_index: Position among consecutive numbered list items

        Returns:
            HTML fragment
        """
        content = node.content or ""

        if isinstance(node, HeadingBlock):
            return f"<h{node.level}>{html.escape(content)}</h{node.level}>"
        if isinstance(node, QuoteBlock):
            return f"<blockquote>{self._lore(content)}</blockquote>"
        if isinstance(node, CodeBlock):
            return f"<pre><code>{html.escape(content)}</code></pre>"
        if isinstance(node, RuleBlock):
            return "<hr>"
        if isinstance(node, ImageBlock):
            return f'<img src="{html.escape(node.src)}" alt="{html.escape(node.alt)}">'
        if isinstance(node, ListItemBlock):
            if node.list_style == "number":
                marker = f'<span class="marker">{display_index}.</span>'
            elif node.list_style == "task":
                checked = " checked" if node.checked else ""
                marker = f'<input type="checkbox" disabled{checked}>'
            else:
                marker = '<span class="marker">&bull;</span>'
            return f'<div class="list-item list-{node.list_style}">{marker} {self._lore(content)}</div>'
        if isinstance(node, CalloutBlock):
            return f'<aside class="callout callout-{node.variant}">{self._lore(content)}</aside>'
        if isinstance(node, ReferenceBlock):
            entry = self._entries_by_id.get(node.entry_id)
            title = entry.title if entry is not None else node.entry_id
            missing = "" if entry is not None else " missing"
            note = f' <span class="note">{html.escape(node.note)}</span>' if node.note else ""
            return (
                f'<div class="reference{missing}" data-entry="{html.escape(node.entry_id)}">'
                f"{html.escape(title)}{note}</div>"
            )

        return f'<div class="paragraph">{self._lore(content)}</div>'


def render_outline_html(blocks: Sequence[BlockNode], terms: Optional[Sequence[Term]] = None,
                        entries: Optional[Sequence[Entry]] = None) -> str:
    """Render a whole outline as preview HTML."""
    return OutlineRenderer(terms, entries).render(blocks)
