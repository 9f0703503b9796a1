"""Block outline editing, serialization and parsing."""

from .serializer import block_to_markdown, flatten_with_depth, serialize_blocks
from .tree import OutlineTree
from .session import OutlineSession, child_block_type, create_sibling_node
from .parser import parse_outline, split_front_matter

__all__ = [
    "OutlineTree",
    "OutlineSession",
    "block_to_markdown",
    "child_block_type",
    "create_sibling_node",
    "flatten_with_depth",
    "parse_outline",
    "serialize_blocks",
    "split_front_matter",
]
