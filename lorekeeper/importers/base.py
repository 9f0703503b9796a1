"""
Base importer interface for Lorekeeper.

This module defines the abstract interface that all entry sources must implement.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..models import Entry, Term, generate_block_id
from ..outline.parser import parse_outline, split_front_matter
from ..outline.tree import OutlineTree


class BaseImporter(ABC):
    """
    Abstract base class for all entry sources.

    Each importer supplies the entries and terms the editor resolves lore
    links against and reopens documents from.
    """

    @abstractmethod
    def get_all_entries(self) -> List[Entry]:
        """
        Retrieve all entries from the source.

        Returns:
            List of Entry objects
        """
        pass

    @abstractmethod
    def get_all_terms(self) -> List[Term]:
        """
        Retrieve the term directory.

        Returns:
            List of Term objects
        """
        pass

    def get_entry(self, entry_id: str) -> Optional[Entry]:
        """
        Look up a single entry by id.

        Returns:
            The entry, or None if the source has no entry with that id
        """
        for entry in self.get_all_entries():
            if entry.id == entry_id:
                return entry
        return None

    def load_outline(self, entry: Entry, id_factory: Callable[[], str] = generate_block_id) -> OutlineTree:
        """Parse an entry's document into an outline for editing."""
        _, body = split_front_matter(entry.content)
        return parse_outline(body, id_factory)
