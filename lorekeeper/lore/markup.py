"""
Lore markup tokenizer for Lorekeeper.

Splits the text of one block into literal runs and typed spans. The
recognised markup, in priority order for spans starting at the same offset:

    [[Name]] or [[Name|alias]]   term link
    {{Name}}                     term
    ||text||                     redacted
    %%text%%                     glitch
    ::text::                     arcane
    ((text))                     terminal

Spans are non-empty and end on the same line they start. A marker without
its closing pair is ordinary text.
"""

import re
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..models.lore import Entry, Term


class SegmentKind(str, Enum):
    TEXT = "text"
    TERM_LINK = "term_link"
    TERM = "term"
    REDACTED = "redacted"
    GLITCH = "glitch"
    ARCANE = "arcane"
    TERMINAL = "terminal"


TERM_KINDS = (SegmentKind.TERM_LINK, SegmentKind.TERM)

# Group order is the priority for spans that start at the same offset.
_SPAN_PATTERN = re.compile(
    r"\[\[(?P<term_link>[^\[\]\n]+?)\]\]"
    r"|\{\{(?P<term>[^\n]+?)\}\}"
    r"|\|\|(?P<redacted>[^\n]+?)\|\|"
    r"|%%(?P<glitch>[^\n]+?)%%"
    r"|::(?P<arcane>[^\n]+?)::"
    r"|\(\((?P<terminal>[^\n]+?)\)\)"
)


class Segment(BaseModel):
    """
    One run of a tokenized block.

    ``text`` is the run without its markers, so joining the texts of all
    segments gives back the input with the markers removed.
    """

    kind: SegmentKind = Field(
        ...,
        description="Literal text or the type of span"
    )

    text: str = Field(
        ...,
        description="Text between the markers, or the literal run"
    )

    name: Optional[str] = Field(
        default=None,
        description="Term name a term span refers to"
    )

    label: Optional[str] = Field(
        default=None,
        description="What a term span displays: the alias if given, else the name"
    )

    has_term: bool = Field(
        default=False,
        description="Whether the term directory defines the name"
    )

    has_entry: bool = Field(
        default=False,
        description="Whether an entry exists for the name"
    )

    description: Optional[str] = Field(
        default=None,
        description="Term description, used as a tooltip"
    )

    term_id: Optional[str] = None
    entry_id: Optional[str] = None


def split_term_reference(body: str) -> Tuple[str, str]:
    """Split ``Name|alias`` into ``(name, label)``."""
    name, _, alias = body.partition("|")
    name = name.strip()
    return name, alias.strip() or name


class TermDirectory:
    """
    Read-only case-insensitive lookups over terms and entries.

    Lookups never add terms; creating a term is a separate user action.
    """

    def __init__(self, terms: Optional[Sequence[Term]] = None, entries: Optional[Sequence[Entry]] = None):
        self._terms: Dict[str, Term] = {}
        for term in terms or ():
            self._terms.setdefault(term.name.casefold(), term)

        self._entries_by_title: Dict[str, Entry] = {}
        self._entries_by_id: Dict[str, Entry] = {}
        for entry in entries or ():
            self._entries_by_title.setdefault(entry.title.casefold(), entry)
            self._entries_by_id.setdefault(entry.id, entry)

    def find_term(self, name: str) -> Optional[Term]:
        return self._terms.get(name.casefold())

    def find_entry(self, name: str, term: Optional[Term] = None) -> Optional[Entry]:
        """Entry titled ``name``, or the entry the term links to."""
        if term is not None and term.entry_id:
            linked = self._entries_by_id.get(term.entry_id)
            if linked is not None:
                return linked
        return self._entries_by_title.get(name.casefold())

    def resolve(self, segment: Segment) -> Segment:
        """Fill in the lookup fields of a term segment."""
        if segment.kind not in TERM_KINDS or not segment.name:
            return segment

        term = self.find_term(segment.name)
        entry = self.find_entry(segment.name, term)
        return segment.model_copy(update={
            "has_term": term is not None,
            "has_entry": entry is not None,
            "description": term.description if term is not None else None,
            "term_id": term.id if term is not None else None,
            "entry_id": entry.id if entry is not None else None,
        })


def tokenize_lore(text: str) -> List[Segment]:
    """
    Split ``text`` into literal runs and markup spans without resolving terms.

    Never raises on malformed markup: unmatched markers stay in literal runs.
    """
    segments: List[Segment] = []
    cursor = 0

    for match in _SPAN_PATTERN.finditer(text or ""):
        if match.start() > cursor:
            segments.append(Segment(kind=SegmentKind.TEXT, text=text[cursor:match.start()]))

        kind = SegmentKind(match.lastgroup)
        body = match.group(match.lastgroup)
        if kind in TERM_KINDS:
            name, label = split_term_reference(body)
            segments.append(Segment(kind=kind, text=body, name=name, label=label))
        else:
            segments.append(Segment(kind=kind, text=body))
        cursor = match.end()

    if text and cursor < len(text):
        segments.append(Segment(kind=SegmentKind.TEXT, text=text[cursor:]))

    return segments


def parse_lore_markup(text: str, terms: Optional[Sequence[Term]] = None,
                      entries: Optional[Sequence[Entry]] = None) -> List[Segment]:
    """
    Tokenize ``text`` and resolve its term spans against the given directories.

    Args:
        text: Raw block content
        terms: Known terms, matched by case-insensitive name
        entries: Known entries, matched by case-insensitive title or by a term's entry id

    Returns:
        Segments in text order
    """
    directory = TermDirectory(terms, entries)
    return [directory.resolve(segment) for segment in tokenize_lore(text)]
