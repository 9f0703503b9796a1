"""
Markdown parsing for block outlines.

The inverse of the serializer: reads an entry document (optional YAML front
matter, then blocks separated by blank lines) back into an outline tree.
Parsing is best-effort; block ids are fresh and list indentation is not used
for nesting.
"""

import re
from typing import Any, Callable, Dict, List, Tuple

import yaml

from ..models.blocks import generate_block_id
from .tree import OutlineTree


_FRONT_MATTER = re.compile(r"\A---\n(?:(?!\n)(.*?)\n)?---(?:\n|\Z)", re.DOTALL)
_CODE_FENCE = re.compile(r"\A```[^\n]*\n(.*)\n```\Z", re.DOTALL)
_HEADING = re.compile(r"\A(#{1,3})(?: (.*))?\Z", re.DOTALL)
_LIST_ITEM = re.compile(r"\A *(\d+\.|- \[([ xX])\]|[-*]) (.*)\Z", re.DOTALL)
_IMAGE = re.compile(r"\A!\[(.*?)\]\((.*?)\)\Z")
_BLOCK_START = re.compile(r"#{1,3}(?: |$)| *(?:\d+\.|- \[[ xX]\]|[-*]) |>|---$|!\[")


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Separate YAML front matter from the document body.

    Returns:
        The front matter mapping (empty if there is none) and the body
    """
    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, text
    data = yaml.safe_load(match.group(1) or "") or {}
    if not isinstance(data, dict):
        raise ValueError(f"Front matter must be a mapping, got {type(data).__name__}")
    return data, text[match.end():]


def _chunks(body: str) -> List[str]:
    """Split a body into block texts, keeping fenced code together."""
    raw = body.strip("\n").split("\n\n")
    chunks: List[str] = []
    index = 0
    while index < len(raw):
        chunk = raw[index]
        index += 1
        if chunk.startswith("```"):
            # Code may itself contain blank lines
            while not _CODE_FENCE.match(chunk) and index < len(raw):
                chunk = f"{chunk}\n\n{raw[index]}"
                index += 1
            chunks.append(chunk)
            continue

        # Lines that open a new block split the chunk; others continue the block
        pieces: List[str] = []
        for line in chunk.split("\n"):
            if pieces and not _BLOCK_START.match(line):
                pieces[-1] = f"{pieces[-1]}\n{line}"
            else:
                pieces.append(line)
        chunks.extend(pieces)
    return chunks


def _block_data(chunk: str) -> Dict[str, Any]:
    """Map one block's markdown back to block fields."""
    if chunk.startswith("```"):
        match = _CODE_FENCE.match(chunk)
        if match:
            return {"type": "code", "content": match.group(1)}
        # Unterminated fence: everything after the opening line is code
        _, _, content = chunk.partition("\n")
        return {"type": "code", "content": content}

    match = _HEADING.match(chunk)
    if match:
        return {"type": f"h{len(match.group(1))}", "content": match.group(2) or ""}

    if chunk == "---":
        return {"type": "hr"}

    match = _IMAGE.match(chunk)
    if match:
        return {"type": "image", "alt": match.group(1), "src": match.group(2)}

    if chunk.startswith(">"):
        return {"type": "quote", "content": chunk[1:].lstrip(" ")}

    match = _LIST_ITEM.match(chunk)
    if match:
        marker, task_state, content = match.groups()
        if task_state is not None:
            return {"type": "li", "list_style": "task", "checked": task_state in "xX", "content": content}
        if marker[0].isdigit():
            return {"type": "li", "list_style": "number", "content": content}
        return {"type": "li", "list_style": "bullet", "content": content}

    return {"type": "paragraph", "content": chunk}


def parse_outline(body: str, id_factory: Callable[[], str] = generate_block_id) -> OutlineTree:
    """
    Rebuild an outline tree from an entry body.

    Headings nest by level; every other block becomes a child of the
    innermost open heading. List indentation is not used to nest items.

    Args:
        body: Markdown body without front matter
        id_factory: Callable producing fresh block ids

    Returns:
        The reconstructed outline
    """
    roots: List[Dict[str, Any]] = []
    open_headings: List[Tuple[int, Dict[str, Any]]] = []

    for chunk in _chunks(body):
        data = _block_data(chunk)
        data["id"] = id_factory()
        data["children"] = []

        if data["type"] in ("h1", "h2", "h3"):
            level = int(data["type"][1])
            while open_headings and open_headings[-1][0] >= level:
                open_headings.pop()
            container = open_headings[-1][1]["children"] if open_headings else roots
            container.append(data)
            open_headings.append((level, data))
        else:
            container = open_headings[-1][1]["children"] if open_headings else roots
            container.append(data)

    return OutlineTree(roots, id_factory=id_factory)
