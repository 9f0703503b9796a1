"""
Markdown serialization of block outlines.

The outline is flattened in pre-order, each block is mapped to one markdown
fragment and the fragments are joined with a blank line.
"""

from typing import List, Sequence, Tuple

from ..models.blocks import BlockNode, CodeBlock, HeadingBlock, ImageBlock, ListItemBlock, QuoteBlock, RuleBlock


BLOCK_SEPARATOR = "\n\n"
INDENT = "  "


def flatten_with_depth(blocks: Sequence[BlockNode], depth: int = 0) -> List[Tuple[BlockNode, int]]:
    """
    Flatten blocks in pre-order, pairing each with its nesting depth.

    Args:
        blocks: Blocks at ``depth``
        depth: Depth of ``blocks``; top-level blocks are at 0

    Returns:
        ``(block, depth)`` pairs in document order
    """
    result: List[Tuple[BlockNode, int]] = []
    for node in blocks:
        result.append((node, depth))
        if node.children:
            result.extend(flatten_with_depth(node.children, depth + 1))
    return result


def list_marker(node: ListItemBlock) -> str:
    # Numbered items are always written as "1."; renderers renumber.
    if node.list_style == "number":
        return "1."
    if node.list_style == "task":
        return "- [x]" if node.checked else "- [ ]"
    return "-"


def block_to_markdown(node: BlockNode, depth: int = 0) -> str:
    """
    Map one block to its markdown fragment.

    Depth only affects list items, which are indented two spaces per level
    below the first.
    """
    content = node.content or ""

    if isinstance(node, HeadingBlock):
        return f"{'#' * node.level} {content}"
    if isinstance(node, QuoteBlock):
        return f"> {content}"
    if isinstance(node, CodeBlock):
        return f"```\n{content}\n```"
    if isinstance(node, RuleBlock):
        return "---"
    if isinstance(node, ImageBlock):
        return f"![{node.alt}]({node.src})"
    if isinstance(node, ListItemBlock):
        indent = INDENT * max(0, depth - 1)
        return f"{indent}{list_marker(node)} {content}"

    # Paragraphs, callouts and references keep their text as-is
    return content


def serialize_blocks(blocks: Sequence[BlockNode]) -> str:
    """Serialize an outline into a single markdown document."""
    return BLOCK_SEPARATOR.join(
        block_to_markdown(node, depth) for node, depth in flatten_with_depth(blocks)
    )
