"""
Markdown entry importer for Lorekeeper.

This module reads entry documents (YAML front matter followed by a body in
the outline markdown dialect) and a term directory from a folder.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import ValidationError

from ..config import config
from ..models import Entry, Term
from ..outline.parser import split_front_matter
from ..publishing.manager import split_tags
from .base import BaseImporter


def _timestamp_ms(value: Any, fallback: float) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        return int(datetime.fromisoformat(value).timestamp() * 1000)
    return int(fallback * 1000)


class MarkdownImporter(BaseImporter):
    """
    Importer for a directory of markdown entry files.
    """

    def __init__(self, entries_path: Optional[str] = None, terms_file: Optional[str] = None):
        """
        Initialize the importer.

        Args:
            entries_path: Directory holding the entry files (defaults to the configured directory)
            terms_file: Name of the term directory file inside it
        """
        self.entries_path = Path(entries_path or config.entries_directory)
        self.terms_path = self.entries_path / (terms_file or config.terms_filename)
        self.file_extension = config.entry_file_extension

        logging.info(f"Initialized markdown importer for: {self.entries_path}")

    def get_all_entries(self) -> List[Entry]:
        if not self.entries_path.is_dir():
            logging.error(f"Entries directory not found: {self.entries_path}")
            return []

        entries = []
        for path in sorted(self.entries_path.glob(f"*{self.file_extension}")):
            try:
                entries.append(self._load_entry(path))
            except (OSError, ValueError, yaml.YAMLError, ValidationError) as e:
                logging.error(f"Skipping entry file {path.name}: {e}")

        logging.info(f"Importer finished. Found {len(entries)} entries.")
        return entries

    def _load_entry(self, path: Path) -> Entry:
        text = path.read_text(encoding="utf-8")
        meta, _ = split_front_matter(text)

        raw_tags = meta.get("tags")
        if isinstance(raw_tags, list):
            raw_tags = [str(tag) for tag in raw_tags]
        tags = split_tags(raw_tags)

        fields = {
            key: meta[key]
            for key in ("category", "realism", "risk", "anomalous", "author_id", "likes")
            if meta.get(key) is not None
        }
        return Entry(
            id=str(meta.get("id") or path.stem),
            title=str(meta.get("title") or path.stem),
            author=str(meta.get("author") or config.default_author),
            content=text,
            tags=tags,
            created_at=_timestamp_ms(meta.get("created_at"), path.stat().st_mtime),
            **fields,
        )

    def get_all_terms(self) -> List[Term]:
        if not self.terms_path.is_file():
            logging.info(f"No term directory at {self.terms_path}")
            return []

        try:
            with open(self.terms_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or []
        except (OSError, yaml.YAMLError) as e:
            logging.error(f"Failed to read term directory {self.terms_path}: {e}")
            return []

        terms = []
        for item in data:
            try:
                terms.append(Term(**item))
            except (TypeError, ValidationError) as e:
                logging.error(f"Skipping invalid term {item!r}: {e}")
        return terms
