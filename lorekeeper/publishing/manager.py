"""
Entry publishing for Lorekeeper.

This module turns an editing session into an entry document (YAML front
matter followed by the serialized outline) and hands it to an entry store.
The store owns identity, timestamps and storage.
"""

import logging
import re
import time
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import yaml

from ..config import config
from ..models.lore import Entry, EntryDraft, Term, TermStatus
from ..outline.session import OutlineSession


_TAG_SEPARATORS = re.compile(r"[,，]")


class PublishError(Exception):
    """Raised when a draft cannot be published."""


def split_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    """Split a tag field on ASCII or full-width commas, dropping blanks."""
    if raw is None:
        return []
    parts = _TAG_SEPARATORS.split(raw) if isinstance(raw, str) else list(raw)
    return [tag.strip() for tag in parts if tag and tag.strip()]


def build_front_matter(draft: EntryDraft, created_at: datetime) -> str:
    """
    Build the YAML front matter block that precedes an entry body.

    Args:
        draft: Entry metadata
        created_at: Publication time

    Returns:
        The front matter, including its ``---`` fences and a trailing blank line
    """
    data = {
        "title": draft.title,
        "category": draft.category.value,
        "tags": draft.tags,
        "realism": draft.realism,
        "risk": draft.risk,
        "anomalous": draft.anomalous,
        "created_at": created_at.isoformat(),
    }
    body = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=None)
    return f"---\n{body}---\n\n"


def link_term_to_entry(term: Term, entry: Entry) -> Term:
    """
    Return ``term`` updated to point at a newly saved entry.

    Only terms still waiting for an entry (pending or term-only) change.
    """
    if term.status not in (TermStatus.PENDING, TermStatus.TERM_ONLY):
        return term
    return term.model_copy(update={"status": TermStatus.WITH_ENTRY, "entry_id": entry.id})


class EntryStore(ABC):
    """
    Abstract collaborator that persists published entries.
    """

    @abstractmethod
    def save_entry(self, draft: EntryDraft, entry_id: Optional[str] = None) -> Entry:
        """
        Store a draft.

        Args:
            draft: The entry to save
            entry_id: Id of an existing entry to overwrite, if any

        Returns:
            The stored entry with its assigned id and timestamp
        """
        pass

    @abstractmethod
    def get_entry(self, entry_id: str) -> Optional[Entry]:
        pass

    @abstractmethod
    def list_entries(self) -> List[Entry]:
        pass


class InMemoryEntryStore(EntryStore):
    """
    Entry store kept in a dictionary, for tests and the CLI.
    """

    def __init__(self, entries: Optional[Iterable[Entry]] = None, author: Optional[str] = None):
        """
        Initialize the store.

        Args:
            entries: Entries to start with
            author: Username recorded on new entries (defaults to the configured author)
        """
        self.author = author or config.default_author
        self._entries: Dict[str, Entry] = {entry.id: entry for entry in entries or []}

    def save_entry(self, draft: EntryDraft, entry_id: Optional[str] = None) -> Entry:
        existing = self._entries.get(entry_id) if entry_id else None
        if existing is not None:
            entry = existing.model_copy(update=draft.model_dump())
            logging.info(f"Updated entry {entry.id}")
        else:
            entry = Entry(
                id=str(uuid.uuid4()),
                author=self.author,
                created_at=int(time.time() * 1000),
                likes=0,
                **draft.model_dump(),
            )
            logging.info(f"Created entry {entry.id}")

        self._entries[entry.id] = entry
        return entry

    def get_entry(self, entry_id: str) -> Optional[Entry]:
        return self._entries.get(entry_id)

    def list_entries(self) -> List[Entry]:
        return sorted(self._entries.values(), key=lambda entry: entry.created_at, reverse=True)


class Publisher:
    """
    Publishes editing sessions into an entry store.
    """

    def __init__(self, store: EntryStore):
        self.store = store

    def compose_document(self, session: OutlineSession, draft: EntryDraft,
                         created_at: Optional[datetime] = None) -> str:
        """Front matter plus the serialized outline."""
        created_at = created_at or datetime.now(timezone.utc)
        return build_front_matter(draft, created_at) + session.serialize()

    def publish(self, session: OutlineSession, metadata: Mapping[str, Any],
                term: Optional[Term] = None, entry_id: Optional[str] = None,
                created_at: Optional[datetime] = None) -> Tuple[Entry, Optional[Term]]:
        """
        Publish the session's document.

        Args:
            session: The editing session to publish
            metadata: Title, category, tags (string or list), realism, risk, anomalous
            term: Term the document was written for, if any
            entry_id: Existing entry to overwrite, if the document was reopened
            created_at: Publication time recorded in the front matter

        Returns:
            The stored entry and the updated term (None when no term was given)

        Raises:
            PublishError: If the title is empty
        """
        title = str(metadata.get("title") or "").strip()
        if not title:
            raise PublishError("An entry title is required")

        fields = dict(metadata)
        fields["title"] = title
        fields["tags"] = split_tags(fields.get("tags"))
        fields.pop("content", None)
        draft = EntryDraft(**fields)

        content = self.compose_document(session, draft, created_at)
        entry = self.store.save_entry(draft.model_copy(update={"content": content}), entry_id)
        session.mark_clean()
        logging.info(f"Published '{entry.title}' as entry {entry.id}")

        linked_term = link_term_to_entry(term, entry) if term is not None else None
        return entry, linked_term
