"""
Editing sessions for Lorekeeper.

An OutlineSession owns the current outline snapshot of one document being
edited and applies the editor's keyboard behaviours on top of the tree
operations.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from ..models.blocks import (
    HEADING_TYPES,
    BlockNode,
    ListItemBlock,
    ParagraphBlock,
    generate_block_id,
    parse_block,
)
from .tree import BlockInput, OutlineTree


_CHILD_TYPES = {
    "h1": "h2",
    "h2": "h3",
    "h3": "paragraph",
    "li": "li",
}


def child_block_type(parent_type: str) -> str:
    """Type given to a block created under a parent of ``parent_type``."""
    return _CHILD_TYPES.get(parent_type, "paragraph")


def create_sibling_node(current: BlockNode, id_factory: Callable[[], str] = generate_block_id) -> BlockNode:
    """
    Build the empty block that Enter creates after ``current``.

    List items continue the list with the same style, unchecked. Headings
    stay headings of the same level. Anything else continues as a paragraph.
    """
    if isinstance(current, ListItemBlock):
        return ListItemBlock(id=id_factory(), list_style=current.list_style, checked=False)

    if current.type in HEADING_TYPES:
        return parse_block({"id": id_factory(), "type": current.type})

    return ParagraphBlock(id=id_factory())


class OutlineSession:
    """
    The outline of one document being edited.

    Each operation replaces the current snapshot with the one the tree
    operation returns; earlier snapshots stay valid and unchanged.
    """

    def __init__(self, initial_blocks: Optional[Sequence[BlockInput]] = None,
                 id_factory: Callable[[], str] = generate_block_id):
        """
        Initialize the session.

        Args:
            initial_blocks: Blocks to seed the document with (defaults to one empty h1)
            id_factory: Callable producing fresh block ids
        """
        self._id_factory = id_factory
        self._tree = OutlineTree(initial_blocks or (), id_factory=id_factory)
        self.dirty = False

    @property
    def tree(self) -> OutlineTree:
        """The current snapshot."""
        return self._tree

    def _commit(self, tree: OutlineTree) -> bool:
        changed = tree is not self._tree
        if changed:
            self._tree = tree
            self.dirty = True
        return changed

    def load(self, blocks: Sequence[BlockInput]) -> None:
        """Replace the whole document, e.g. when reopening an existing entry."""
        self._tree = OutlineTree(blocks, id_factory=self._id_factory)
        self.dirty = False

    def mark_clean(self) -> None:
        self.dirty = False

    # --- Tree operations ---

    def update_node(self, node_id: str, fields: Mapping[str, Any]) -> bool:
        """Merge ``fields`` into a block. Returns whether the document changed."""
        return self._commit(self._tree.update_node(node_id, fields))

    def add_sibling(self, target_id: str, node: BlockInput, position: str = "after") -> Optional[str]:
        """
        Insert a block next to ``target_id``.

        Returns:
            The id the inserted block ended up with, or None if nothing was inserted
        """
        if target_id not in self._tree:
            logging.debug(f"add_sibling: no block with id {target_id}")
            return None

        new_node = self._tree.claim_ids(node)
        if self._commit(self._tree.add_sibling(target_id, new_node, position)):
            return new_node.id
        return None

    def add_child(self, parent_id: str, block_type: Optional[str] = None,
                  extra: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        """
        Append a new child block under ``parent_id``.

        Args:
            parent_id: Id of the parent block
            block_type: Type of the child; derived from the parent's type when omitted
            extra: Additional fields for the child

        Returns:
            The new block's id, or None if the parent does not exist
        """
        parent = self._tree.find(parent_id)
        if parent is None:
            logging.debug(f"add_child: no block with id {parent_id}")
            return None

        if block_type is None:
            block_type = child_block_type(parent.type)

        self._commit(self._tree.add_child(parent_id, block_type, extra))
        return self._tree.find(parent_id).children[-1].id

    def remove_node(self, node_id: str) -> bool:
        """Remove a block and its subtree. Returns whether the document changed."""
        return self._commit(self._tree.remove_node(node_id))

    def serialize(self) -> str:
        """Markdown body of the current document."""
        return self._tree.serialize()

    # --- Editor behaviours ---

    def split_block(self, node_id: str) -> Optional[str]:
        """
        Handle Enter on a block: add the derived sibling right after it.

        Returns:
            Id of the new block, or None if ``node_id`` is unknown
        """
        current = self._tree.find(node_id)
        if current is None:
            return None
        return self.add_sibling(node_id, create_sibling_node(current, self._id_factory), "after")

    def demote_list_item(self, node_id: str) -> bool:
        """
        Handle Backspace on a block: an empty list item becomes a paragraph.

        Returns:
            Whether the block was converted
        """
        current = self._tree.find(node_id)
        if not isinstance(current, ListItemBlock) or current.content:
            return False
        return self.update_node(node_id, {"type": "paragraph"})

    def navigate(self, node_id: str, direction: str) -> Optional[str]:
        """
        Id of the block above or below ``node_id`` in document order.

        Args:
            node_id: Block the caret is in
            direction: "up" or "down"

        Returns:
            The neighbouring id, or None at either end or for unknown ids
        """
        ids = self._tree.ids()
        if node_id not in ids:
            return None

        index = ids.index(node_id)
        if direction == "up" and index > 0:
            return ids[index - 1]
        if direction == "down" and index < len(ids) - 1:
            return ids[index + 1]
        return None
