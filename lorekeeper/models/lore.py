"""
Lore models for Lorekeeper.

This module defines the terms and entries the wiki tracks next to the
outline of a single document.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Top-level archive sections an entry is filed under."""

    CREATURE = "creature"      # Biology, species
    ITEM = "item"              # Weapons, relics, vehicles
    LAW = "law"                # World rules, magic systems, physics
    CHRONICLE = "chronicle"    # History, timeline, events
    CHARACTER = "character"    # Characters, gods, personas
    FACTION = "faction"        # Nations, guilds, organizations
    GEOGRAPHY = "geography"    # Locations, maps, dimensions
    SKILL = "skill"            # Spells, techniques, crafting
    CULTURE = "culture"        # Religion, society, economy, art


class TermType(str, Enum):
    CHARACTER = "character"
    FACTION = "faction"
    LOCATION = "location"
    ITEM = "item"
    CONCEPT = "concept"
    EVENT = "event"
    OTHER = "other"


class TermStatus(str, Enum):
    """
    Lifecycle of a term.

    ``pending`` terms still wait for a write-up, ``term_only`` terms are
    resolved without a full entry and ``with_entry`` terms link to one.
    """

    PENDING = "pending"
    TERM_ONLY = "term_only"
    WITH_ENTRY = "with_entry"


class Term(BaseModel):
    """
    A named concept tracked independently of any one document.
    """

    id: str = Field(
        ...,
        description="Unique term identifier"
    )

    name: str = Field(
        ...,
        description="Display name; term links match it case-insensitively"
    )

    type: TermType = Field(
        default=TermType.CONCEPT,
        description="Classification of the term"
    )

    description: str = Field(
        default="",
        description="Short definition shown as a tooltip"
    )

    entry_id: Optional[str] = Field(
        default=None,
        description="Identifier of the entry written for this term, if any"
    )

    status: TermStatus = Field(
        default=TermStatus.PENDING,
        description="Whether the term still needs an entry"
    )


class EntryDraft(BaseModel):
    """
    An entry as the editor submits it, before the store assigns identity.
    """

    title: str = Field(
        ...,
        description="Entry title"
    )

    category: Category = Field(
        default=Category.CREATURE,
        description="Archive section"
    )

    content: str = Field(
        default="",
        description="Markdown document, front matter included"
    )

    tags: List[str] = Field(
        default_factory=list,
        description="Free-form tags"
    )

    realism: int = Field(default=3, ge=1, le=5, description="How fleshed-out the setting is")
    risk: int = Field(default=1, ge=1, le=8, description="Scale of danger")
    anomalous: int = Field(default=1, ge=1, le=7, description="Distance from common sense")


class Entry(EntryDraft):
    """
    A published document in the archive.
    """

    id: str = Field(
        ...,
        description="Identifier assigned by the entry store"
    )

    author: str = Field(
        ...,
        description="Username of the author"
    )

    author_id: Optional[str] = Field(
        default=None,
        description="Identifier of the author, when known"
    )

    created_at: int = Field(
        ...,
        description="Creation time in milliseconds since the epoch"
    )

    likes: int = Field(
        default=0,
        ge=0,
        description="Number of likes"
    )
