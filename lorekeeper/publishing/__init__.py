"""Publishing of edited documents as entries."""

from .manager import (
    EntryStore,
    InMemoryEntryStore,
    PublishError,
    Publisher,
    build_front_matter,
    link_term_to_entry,
    split_tags,
)

__all__ = [
    "EntryStore",
    "InMemoryEntryStore",
    "PublishError",
    "Publisher",
    "build_front_matter",
    "link_term_to_entry",
    "split_tags",
]
