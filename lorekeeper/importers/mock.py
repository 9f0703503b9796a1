"""
Mock importer for testing Lorekeeper.

This module provides a hardcoded archive of entries and terms for exercising
the editor and the lore renderer without an entries directory.
"""

import time
from typing import List

from ..models import Category, Entry, Term, TermStatus, TermType
from .base import BaseImporter


class MockImporter(BaseImporter):
    """
    Mock importer that returns hardcoded sample data.
    """

    def __init__(self):
        """Initialize the mock importer with sample data."""
        now = int(time.time() * 1000)
        self._entries = self._create_entries(now)
        self._terms = self._create_terms()

    def get_all_entries(self) -> List[Entry]:
        return list(self._entries)

    def get_all_terms(self) -> List[Term]:
        return list(self._terms)

    def _create_entries(self, now: int) -> List[Entry]:
        """
        Create sample entries covering the block types the serializer emits.

        Returns:
            List of sample entries, newest last
        """
        entries = []

        # Entry 1: creature with headings, a term link and a quote
        entries.append(Entry(
            id="1",
            title="Whisper Fungus",
            author="biologist_42",
            category=Category.CREATURE,
            content=(
                "**Whisper Fungus** (*Myco susurrus*) is a sentient fungal network found in the caves of Sector Nine.\n\n"
                "# Biology\n\n"
                "Unlike standard flora, the fungus shares a rudimentary hive mind and communicates "
                "through low-frequency vibrations that sound like human whispering.\n\n"
                "## Threat level: moderate\n\n"
                "Prolonged exposure to [[The Whisper]] without audio dampening causes hallucinations "
                "or ||temporary memory loss||.\n\n"
                "> \"I swear it knew my mother's name.\" - scout report #899"
            ),
            created_at=now - 10000000,
            likes=42,
            tags=["flora", "psionic", "caves"],
            realism=3,
            risk=3,
            anomalous=2,
        ))

        # Entry 2: item with a bullet list and a faction term
        entries.append(Entry(
            id="2",
            title="Plasma Lance Mk. IV",
            author="forge_master",
            category=Category.ITEM,
            content=(
                "Standard polearm of the [[Ember Core]] royal guard.\n\n"
                "- **Length**: 2.5 m\n\n"
                "- **Power**: compressed solar cells\n\n"
                "- **Output**: 5000K thermal tip\n\n"
                "The Mk. IV adds a magnetic containment field so the wielder no longer melts their own hands."
            ),
            created_at=now - 5000000,
            likes=128,
            tags=["melee", "plasma", "tech"],
            realism=4,
            risk=3,
            anomalous=1,
        ))

        # Entry 3: place with nested headings and a numbered list
        entries.append(Entry(
            id="3",
            title="Glass Desert",
            author="cartographer_zero",
            category=Category.GEOGRAPHY,
            content=(
                "A vast region of the silicon world. After the ancient [[Orbital Bombardment]] "
                "its whole surface is molten glass.\n\n"
                "# Environment\n\n"
                "The surface is frictionless and highly reflective. %%Daytime readings exceed 80C.%%\n\n"
                "## Points of interest\n\n"
                "1. **Shard Spires**: natural glass formations two kilometres high.\n\n"
                "1. **Mirror Pool**: a lake of ::liquid mercury::."
            ),
            created_at=now - 200000,
            likes=350,
            tags=["desert", "danger", "planet"],
            realism=4,
            risk=2,
            anomalous=1,
        ))

        return entries

    def _create_terms(self) -> List[Term]:
        return [
            Term(
                id="term-1",
                name="Ember Core",
                type=TermType.FACTION,
                description="Ancient guild controlling the old world's geothermal grid; worships mechanical ascension.",
                status=TermStatus.TERM_ONLY,
            ),
            Term(
                id="term-2",
                name="The Whisper",
                type=TermType.CONCEPT,
                description="Infrasonic psychic contamination common in underground ecosystems.",
                entry_id="1",
                status=TermStatus.WITH_ENTRY,
            ),
            Term(
                id="term-3",
                name="Orbital Bombardment",
                type=TermType.EVENT,
                description="The final weapon strike of the Collapse era that glassed the surface.",
                status=TermStatus.PENDING,
            ),
        ]
