"""Entry and term sources."""

from .base import BaseImporter
from .mock import MockImporter
from .markdown import MarkdownImporter

__all__ = ["BaseImporter", "MockImporter", "MarkdownImporter"]
