"""
Outline tree snapshots for Lorekeeper.

An OutlineTree is an immutable snapshot of a document's block outline. Every
mutation returns a new snapshot that shares all untouched subtrees with the
old one; only the blocks on the path from the root list to the changed block
are rebuilt. Mutations address blocks by id and leave the tree unchanged when
the id does not exist.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple, Union

from ..models.blocks import (
    BlockNode,
    default_root_block,
    generate_block_id,
    normalize_field_names,
    parse_block,
)
from .serializer import serialize_blocks


Path = Tuple[int, ...]
BlockInput = Union[BlockNode, Mapping[str, Any]]

# Fields an update may never touch: ids are permanent and structure changes
# go through the insert/remove operations.
_PROTECTED_FIELDS = ("id", "children")


def _splice(nodes: Tuple[BlockNode, ...], path: Path, replacement: Tuple[BlockNode, ...]) -> Tuple[BlockNode, ...]:
    """Replace the block at ``path`` with ``replacement``, copying only the ancestors."""
    position = path[0]
    if len(path) == 1:
        return nodes[:position] + replacement + nodes[position + 1:]

    node = nodes[position]
    children = _splice(node.children, path[1:], replacement)
    return nodes[:position] + (node.model_copy(update={"children": children}),) + nodes[position + 1:]


def _reassign_ids(node: BlockNode, taken: Set[str], id_factory: Callable[[], str]) -> BlockNode:
    """Give every block in ``node``'s subtree an id that is not in ``taken``."""
    new_id = node.id
    if new_id in taken:
        while new_id in taken:
            new_id = id_factory()
        logging.warning(f"Block id {node.id} already in use, inserted block renamed to {new_id}")
    taken.add(new_id)

    children = tuple(_reassign_ids(child, taken, id_factory) for child in node.children)
    unchanged = new_id == node.id and all(a is b for a, b in zip(children, node.children))
    if unchanged:
        return node
    return node.model_copy(update={"id": new_id, "children": children})


class OutlineTree:
    """
    Immutable snapshot of a block outline.

    The root sequence is never empty: a snapshot built from no blocks, or one
    left empty by a removal, holds a single empty ``h1`` instead.
    """

    def __init__(self, roots: Sequence[BlockInput] = (), id_factory: Callable[[], str] = generate_block_id):
        """
        Build a snapshot from blocks or block mappings.

        Args:
            roots: Top-level blocks in document order
            id_factory: Callable producing fresh block ids
        """
        self._id_factory = id_factory
        blocks = tuple(parse_block(node) for node in roots)
        if not blocks:
            blocks = (default_root_block(id_factory),)
        self._roots: Tuple[BlockNode, ...] = blocks
        self._paths: Optional[Dict[str, Path]] = None

    def _derive(self, roots: Tuple[BlockNode, ...]) -> "OutlineTree":
        return OutlineTree(roots, id_factory=self._id_factory)

    # --- Read access ---

    @property
    def roots(self) -> Tuple[BlockNode, ...]:
        """Top-level blocks."""
        return self._roots

    def __iter__(self) -> Iterator[BlockNode]:
        return iter(self._roots)

    def __len__(self) -> int:
        return len(self._roots)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OutlineTree):
            return NotImplemented
        return self._roots == other._roots

    def __repr__(self) -> str:
        return f"OutlineTree({len(self._index())} blocks)"

    def _index(self) -> Dict[str, Path]:
        """Map each id to its path, built once per snapshot. First match wins."""
        if self._paths is None:
            paths: Dict[str, Path] = {}

            def visit(nodes: Tuple[BlockNode, ...], prefix: Path) -> None:
                for position, node in enumerate(nodes):
                    path = prefix + (position,)
                    paths.setdefault(node.id, path)
                    visit(node.children, path)

            visit(self._roots, ())
            self._paths = paths
        return self._paths

    def _node_at(self, path: Path) -> BlockNode:
        node = self._roots[path[0]]
        for position in path[1:]:
            node = node.children[position]
        return node

    def find(self, node_id: str) -> Optional[BlockNode]:
        """Return the block with ``node_id``, or None."""
        path = self._index().get(node_id)
        if path is None:
            return None
        return self._node_at(path)

    def parent_of(self, node_id: str) -> Optional[BlockNode]:
        """Return the parent block of ``node_id``; None for top-level or unknown ids."""
        path = self._index().get(node_id)
        if path is None or len(path) == 1:
            return None
        return self._node_at(path[:-1])

    def walk(self) -> Iterator[Tuple[BlockNode, int]]:
        """Yield ``(block, depth)`` pairs in pre-order; top-level blocks have depth 0."""
        stack = [(node, 0) for node in reversed(self._roots)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            stack.extend((child, depth + 1) for child in reversed(node.children))

    def ids(self) -> List[str]:
        """All block ids in document order."""
        return [node.id for node, _ in self.walk()]

    def to_data(self) -> List[Dict[str, Any]]:
        """Plain nested dictionaries with camelCase keys, as the UI consumes them."""
        return [node.model_dump(by_alias=True, mode="json") for node in self._roots]

    # --- Mutations ---

    def claim_ids(self, node: BlockInput) -> BlockNode:
        """
        Validate ``node`` and rename any id in its subtree that this tree already uses.

        Args:
            node: Block or mapping about to be inserted

        Returns:
            A block whose ids are all free in this snapshot
        """
        return _reassign_ids(parse_block(node), set(self._index()), self._id_factory)

    def update_node(self, node_id: str, fields: Mapping[str, Any]) -> "OutlineTree":
        """
        Shallow-merge ``fields`` into the block with ``node_id``.

        Omitted fields keep their values. Changing ``type`` switches the
        variant; fields the new variant does not define are dropped.

        Args:
            node_id: Id of the block to update
            fields: Partial field values, snake_case or camelCase

        Returns:
            The new snapshot, or this one if the id is unknown or nothing changes
        """
        path = self._index().get(node_id)
        if path is None:
            logging.debug(f"update_node: no block with id {node_id}")
            return self

        node = self._node_at(path)
        updates = normalize_field_names(fields)
        for name in _PROTECTED_FIELDS:
            updates.pop(name, None)

        current = node.model_dump(exclude={"children"})
        merged = dict(current)
        merged.update(updates)
        replacement = parse_block(merged)
        if replacement.model_dump(exclude={"children"}) == current:
            logging.debug(f"update_node: nothing to change on block {node_id}")
            return self
        updated = replacement.model_copy(update={"children": node.children})

        tree = self._derive(_splice(self._roots, path, (updated,)))
        # A point update moves nothing, so the id index carries over.
        tree._paths = self._paths
        return tree

    def add_sibling(self, target_id: str, node: BlockInput, position: str = "after") -> "OutlineTree":
        """
        Insert ``node`` directly before or after the block with ``target_id``.

        Args:
            target_id: Id of the block to insert next to
            node: Block or mapping to insert
            position: "before" or "after"

        Returns:
            The new snapshot, or this one if the target is unknown
        """
        if position not in ("before", "after"):
            raise ValueError(f"position must be 'before' or 'after', got {position!r}")

        path = self._index().get(target_id)
        if path is None:
            logging.debug(f"add_sibling: no block with id {target_id}")
            return self

        target = self._node_at(path)
        new_node = self.claim_ids(node)
        if position == "after":
            replacement = (target, new_node)
        else:
            replacement = (new_node, target)
        return self._derive(_splice(self._roots, path, replacement))

    def add_child(self, parent_id: str, block_type: str, extra: Optional[Mapping[str, Any]] = None) -> "OutlineTree":
        """
        Append a fresh, empty block of ``block_type`` to a parent's children.

        The parent is unfolded so the new child is visible.

        Args:
            parent_id: Id of the parent block
            block_type: Type tag of the new block
            extra: Additional fields for the new block (an ``id`` here is honoured if free; ``type`` is ignored)

        Returns:
            The new snapshot, or this one if the parent is unknown
        """
        path = self._index().get(parent_id)
        if path is None:
            logging.debug(f"add_child: no block with id {parent_id}")
            return self

        fields = normalize_field_names(extra or {})
        for name in ("type", "children"):
            fields.pop(name, None)
        data = {"id": self._id_factory(), "type": block_type, "content": ""}
        data.update(fields)
        child = self.claim_ids(data)

        parent = self._node_at(path)
        updated = parent.model_copy(update={"children": parent.children + (child,), "collapsed": False})
        return self._derive(_splice(self._roots, path, (updated,)))

    def remove_node(self, node_id: str) -> "OutlineTree":
        """
        Remove the block with ``node_id`` together with its whole subtree.

        Returns:
            The new snapshot, or this one if the id is unknown
        """
        path = self._index().get(node_id)
        if path is None:
            logging.debug(f"remove_node: no block with id {node_id}")
            return self

        roots = _splice(self._roots, path, ())
        if not roots:
            roots = (default_root_block(self._id_factory),)
        return self._derive(roots)

    # --- Serialization ---

    def serialize(self) -> str:
        """Render the outline in the entry markdown dialect."""
        return serialize_blocks(self._roots)
