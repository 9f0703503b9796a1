"""
Unit tests for outline tree snapshots.

Covers the four tree operations, structural sharing between snapshots and
markdown serialization.
"""

import itertools
import unittest

from pydantic import ValidationError

from lorekeeper.models import HeadingBlock, ListItemBlock, ParagraphBlock
from lorekeeper.outline import OutlineTree, serialize_blocks


def counter_ids(prefix="n"):
    """Deterministic id factory: n1, n2, ..."""
    numbers = itertools.count(1)
    return lambda: f"{prefix}{next(numbers)}"


def sample_tree():
    return OutlineTree([
        {"id": "h", "type": "h1", "content": "Title", "children": [
            {"id": "a", "type": "paragraph", "content": "A"},
            {"id": "b", "type": "paragraph", "content": "B", "children": [
                {"id": "b1", "type": "li", "content": "deep"},
            ]},
        ]},
        {"id": "z", "type": "h1", "content": "Other", "children": [
            {"id": "z1", "type": "quote", "content": "Z"},
        ]},
    ], id_factory=counter_ids())


class TestTreeConstruction(unittest.TestCase):
    """Test building snapshots."""

    def test_empty_tree_gets_default_heading(self):
        """An empty root sequence is replaced by one empty h1."""
        tree = OutlineTree([], id_factory=counter_ids())

        self.assertEqual(len(tree), 1)
        root = tree.roots[0]
        self.assertIsInstance(root, HeadingBlock)
        self.assertEqual(root.type, "h1")
        self.assertEqual(root.content, "")
        self.assertEqual(root.id, "n1")

    def test_mappings_become_variants(self):
        """Mappings are validated into the variant their type selects."""
        tree = OutlineTree([{"id": "x", "type": "li", "listStyle": "task", "checked": True}])

        node = tree.find("x")
        self.assertIsInstance(node, ListItemBlock)
        self.assertEqual(node.list_style, "task")
        self.assertTrue(node.checked)

    def test_unknown_type_rejected(self):
        """Unknown block types fail validation."""
        with self.assertRaises(ValidationError):
            OutlineTree([{"id": "x", "type": "table"}])

    def test_walk_and_lookup(self):
        """walk() is pre-order with depths; find/parent_of use the id index."""
        tree = sample_tree()

        self.assertEqual(
            [(node.id, depth) for node, depth in tree.walk()],
            [("h", 0), ("a", 1), ("b", 1), ("b1", 2), ("z", 0), ("z1", 1)],
        )
        self.assertEqual(tree.find("b1").content, "deep")
        self.assertIsNone(tree.find("missing"))
        self.assertEqual(tree.parent_of("b1").id, "b")
        self.assertIsNone(tree.parent_of("h"))
        self.assertIn("z1", tree)
        self.assertNotIn("missing", tree)

    def test_to_data_uses_camel_case(self):
        """Plain data output uses the UI's camelCase keys."""
        tree = OutlineTree([{"id": "x", "type": "li", "list_style": "number", "content": "one"}])

        data = tree.to_data()
        self.assertEqual(data[0]["listStyle"], "number")
        self.assertEqual(data[0]["children"], [])
        self.assertNotIn("list_style", data[0])


class TestUpdateNode(unittest.TestCase):
    """Test shallow-merge updates."""

    def test_merge_preserves_other_fields(self):
        """Omitted fields keep their values."""
        tree = OutlineTree([{"id": "x", "type": "li", "list_style": "task", "content": "todo"}])

        updated = tree.update_node("x", {"checked": True})

        node = updated.find("x")
        self.assertTrue(node.checked)
        self.assertEqual(node.content, "todo")
        self.assertEqual(node.list_style, "task")

    def test_old_snapshot_unchanged(self):
        """The input snapshot is never modified."""
        tree = sample_tree()

        updated = tree.update_node("a", {"content": "changed"})

        self.assertEqual(tree.find("a").content, "A")
        self.assertEqual(updated.find("a").content, "changed")

    def test_unaffected_branches_are_shared(self):
        """Only the path from the root to the updated block is rebuilt."""
        tree = sample_tree()

        updated = tree.update_node("b1", {"content": "deeper"})

        self.assertIs(updated.roots[1], tree.roots[1])
        self.assertIs(updated.find("a"), tree.find("a"))
        self.assertIsNot(updated.find("b"), tree.find("b"))
        self.assertIsNot(updated.roots[0], tree.roots[0])

    def test_id_and_children_cannot_change(self):
        """Updates ignore id and children."""
        tree = sample_tree()

        updated = tree.update_node("b", {"id": "other", "children": [], "content": "B2"})

        node = updated.find("b")
        self.assertEqual(node.content, "B2")
        self.assertEqual([child.id for child in node.children], ["b1"])
        self.assertIsNone(updated.find("other"))

    def test_type_switch_drops_foreign_fields(self):
        """Switching variant keeps shared fields and drops the rest."""
        tree = OutlineTree([{"id": "x", "type": "li", "list_style": "task", "checked": True, "content": "c"}])

        updated = tree.update_node("x", {"type": "paragraph"})

        node = updated.find("x")
        self.assertIsInstance(node, ParagraphBlock)
        self.assertEqual(node.content, "c")
        self.assertFalse(hasattr(node, "checked"))

    def test_camel_case_fields_accepted(self):
        """Field names may use the UI's camelCase."""
        tree = OutlineTree([{"id": "x", "type": "li"}])

        updated = tree.update_node("x", {"listStyle": "number"})

        self.assertEqual(updated.find("x").list_style, "number")

    def test_invalid_value_raises(self):
        """Values outside a variant's schema raise ValidationError."""
        tree = OutlineTree([{"id": "x", "type": "li"}])

        with self.assertRaises(ValidationError):
            tree.update_node("x", {"list_style": "roman"})

    def test_unknown_id_is_noop(self):
        """An unknown id returns an equal tree."""
        tree = sample_tree()

        self.assertEqual(tree.update_node("missing", {"content": "x"}), tree)

    def test_update_without_effect_returns_same_snapshot(self):
        """Fields the variant lacks, or unchanged values, leave the tree as is."""
        tree = sample_tree()

        self.assertIs(tree.update_node("a", {"checked": True}), tree)
        self.assertIs(tree.update_node("a", {"content": "A"}), tree)
        self.assertIs(tree.update_node("a", {"type": "paragraph"}), tree)


class TestStructuralOperations(unittest.TestCase):
    """Test inserting and removing blocks."""

    def test_add_sibling_after_and_before(self):
        """Siblings are spliced next to the target in its own list."""
        tree = sample_tree()

        after = tree.add_sibling("a", {"id": "new", "type": "paragraph"}, "after")
        before = tree.add_sibling("a", {"id": "new", "type": "paragraph"}, "before")

        self.assertEqual([c.id for c in after.find("h").children], ["a", "new", "b"])
        self.assertEqual([c.id for c in before.find("h").children], ["new", "a", "b"])
        self.assertIs(after.roots[1], tree.roots[1])

    def test_add_sibling_renames_duplicate_ids(self):
        """Ids already in the tree are replaced so every id stays unique."""
        tree = sample_tree()

        with self.assertLogs(level="WARNING"):
            updated = tree.add_sibling("z1", {"id": "a", "type": "paragraph", "children": [
                {"id": "fresh", "type": "paragraph"},
                {"id": "b1", "type": "paragraph"},
            ]})

        ids = updated.ids()
        self.assertEqual(len(ids), len(set(ids)))
        inserted = updated.find("z").children[1]
        self.assertNotEqual(inserted.id, "a")
        self.assertEqual(inserted.children[0].id, "fresh")
        self.assertNotEqual(inserted.children[1].id, "b1")

    def test_add_sibling_rejects_bad_position(self):
        """Only before and after are valid positions."""
        with self.assertRaises(ValueError):
            sample_tree().add_sibling("a", {"type": "paragraph"}, "inside")

    def test_add_sibling_unknown_target_is_noop(self):
        """An unknown target leaves the tree unchanged."""
        tree = sample_tree()

        self.assertIs(tree.add_sibling("missing", {"type": "paragraph"}), tree)

    def test_add_child_appends_and_expands(self):
        """The new child is empty, last, and its parent is unfolded."""
        tree = OutlineTree([{"id": "p", "type": "h2", "collapsed": True, "children": [
            {"id": "c", "type": "paragraph"},
        ]}], id_factory=counter_ids())

        updated = tree.add_child("p", "li", {"list_style": "task"})

        parent = updated.find("p")
        self.assertFalse(parent.collapsed)
        self.assertEqual([c.id for c in parent.children], ["c", "n1"])
        child = parent.children[-1]
        self.assertEqual(child.type, "li")
        self.assertEqual(child.list_style, "task")
        self.assertEqual(child.content, "")
        self.assertEqual(child.children, ())

    def test_add_child_type_argument_wins_over_extra(self):
        """A type in the extra fields does not replace the requested type."""
        tree = sample_tree()

        updated = tree.add_child("h", "paragraph", {"type": "quote", "content": "text"})

        child = updated.find("h").children[-1]
        self.assertIsInstance(child, ParagraphBlock)
        self.assertEqual(child.content, "text")

    def test_ids_stay_unique_across_inserts(self):
        """Repeated inserts with colliding ids never duplicate an id."""
        tree = OutlineTree([{"id": "n1", "type": "h1", "children": [
            {"id": "n2", "type": "paragraph"},
        ]}], id_factory=counter_ids())

        # The factory's first ids are already taken by the tree
        tree = tree.add_child("n1", "paragraph")
        tree = tree.add_sibling("n2", {"id": "n2", "type": "paragraph", "children": [
            {"id": "n3", "type": "paragraph"},
        ]})
        tree = tree.add_child("n3", "li", {"id": "n1"})
        tree = tree.add_sibling("n1", {"id": "n1", "type": "h2"}, "before")
        tree = tree.add_child("n1", "h2")

        ids = tree.ids()
        self.assertEqual(len(ids), 8)
        self.assertEqual(len(ids), len(set(ids)))

    def test_add_child_unknown_parent_is_noop(self):
        """An unknown parent leaves the tree unchanged."""
        tree = sample_tree()

        self.assertIs(tree.add_child("missing", "paragraph"), tree)

    def test_remove_node_drops_subtree(self):
        """Removal takes the whole subtree with it."""
        tree = sample_tree()

        updated = tree.remove_node("b")

        self.assertIsNone(updated.find("b"))
        self.assertIsNone(updated.find("b1"))
        self.assertEqual(tree.find("b1").content, "deep")

    def test_removing_last_root_leaves_default_heading(self):
        """A tree never becomes empty."""
        tree = OutlineTree([{"id": "only", "type": "paragraph"}], id_factory=counter_ids())

        updated = tree.remove_node("only")

        self.assertEqual(len(updated), 1)
        self.assertEqual(updated.roots[0].type, "h1")
        self.assertEqual(updated.roots[0].content, "")
        self.assertNotEqual(updated.roots[0].id, "only")


    def test_removing_every_block_keeps_one_heading(self):
        """Emptying a tree block by block always leaves one fresh h1."""
        tree = OutlineTree([
            {"id": "a", "type": "paragraph", "content": "A"},
            {"id": "b", "type": "quote", "content": "B", "children": [
                {"id": "b1", "type": "paragraph"},
            ]},
            {"id": "c", "type": "li", "content": "C"},
        ], id_factory=counter_ids())

        for node_id in ("b", "a"):
            tree = tree.remove_node(node_id)
            self.assertGreaterEqual(len(tree), 1)
        tree = tree.remove_node("c")

        self.assertEqual(len(tree), 1)
        first_default = tree.roots[0]
        self.assertEqual((first_default.type, first_default.content), ("h1", ""))
        self.assertNotIn(first_default.id, ("a", "b", "b1", "c"))

        tree = tree.remove_node(first_default.id)

        self.assertEqual(len(tree), 1)
        self.assertEqual(tree.roots[0].type, "h1")
        self.assertNotEqual(tree.roots[0].id, first_default.id)


class TestSerialization(unittest.TestCase):
    """Test markdown output."""

    def test_paragraph_then_bullet_sibling(self):
        """Two top-level blocks are joined by a blank line."""
        tree = OutlineTree([
            {"id": "p", "type": "paragraph", "content": "A"},
            {"id": "l", "type": "li", "list_style": "bullet", "content": "B"},
        ])

        self.assertEqual(tree.serialize(), "A\n\n- B")

    def test_heading(self):
        """A single heading serializes to its markdown line."""
        tree = OutlineTree([{"id": "1", "type": "h1", "content": "Title"}])

        self.assertEqual(tree.serialize(), "# Title")

    def test_paragraph_with_bullet_child(self):
        """Children follow their parent, separated by a blank line."""
        tree = OutlineTree([{"id": "p", "type": "paragraph", "content": "A", "children": [
            {"id": "l", "type": "li", "list_style": "bullet", "content": "B"},
        ]}])

        self.assertEqual(tree.serialize(), "A\n\n- B")

    def test_task_markers(self):
        """Task items serialize their checked state."""
        done = ListItemBlock(id="1", list_style="task", checked=True, content="done")
        todo = ListItemBlock(id="2", list_style="task", checked=False, content="done")

        self.assertEqual(serialize_blocks([done]), "- [x] done")
        self.assertEqual(serialize_blocks([todo]), "- [ ] done")

    def test_depth_indents_nested_list_items(self):
        """A list item two levels down is indented one step."""
        tree = OutlineTree([{"id": "h", "type": "h2", "content": "H", "children": [
            {"id": "p", "type": "paragraph", "content": "P", "children": [
                {"id": "l", "type": "li", "content": "x"},
            ]},
        ]}])

        self.assertEqual(tree.serialize(), "## H\n\nP\n\n  - x")

    def test_numbered_items_are_not_renumbered(self):
        """Every numbered item is written as 1."""
        tree = OutlineTree([
            {"id": "1", "type": "li", "list_style": "number", "content": "one"},
            {"id": "2", "type": "li", "list_style": "number", "content": "two"},
        ])

        self.assertEqual(tree.serialize(), "1. one\n\n1. two")

    def test_other_block_types(self):
        """Quotes, code, rules, images and callouts have their own fragments."""
        tree = OutlineTree([
            {"id": "1", "type": "quote", "content": "said"},
            {"id": "2", "type": "code", "content": "x = 1"},
            {"id": "3", "type": "hr"},
            {"id": "4", "type": "image", "src": "map.png", "alt": "Map"},
            {"id": "5", "type": "callout", "variant": "warning", "content": "Careful"},
        ])

        self.assertEqual(
            tree.serialize(),
            "> said\n\n```\nx = 1\n```\n\n---\n\n![Map](map.png)\n\nCareful",
        )

    def test_edit_sequence_end_to_end(self):
        """Build a small document through the tree operations."""
        tree = OutlineTree([{"id": "r1", "type": "h1", "content": ""}], id_factory=counter_ids("p"))

        tree = tree.add_child("r1", "paragraph")
        self.assertEqual(tree.find("r1").children[0].id, "p1")
        tree = tree.update_node("p1", {"content": "Hello"})
        tree = tree.add_sibling("p1", {"id": "x", "type": "li", "listStyle": "number", "content": "Step"}, "after")

        self.assertEqual(tree.serialize(), "# \n\nHello\n\n1. Step")


if __name__ == '__main__':
    unittest.main()
