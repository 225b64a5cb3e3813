# tests/unit/test_tree.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from hsmdsl.core.frames import Frame
from hsmdsl.runtime.tree import Tree


def path(*parts):
    return tuple(part if isinstance(part, Frame) else Frame.named(part) for part in parts)


def node(**children):
    return Tree({Frame.named(name): child for name, child in children.items()})


def leaf_with(*frames):
    return Tree({frame: Tree() for frame in frames})


def test_insert_single_path():
    tree = Tree()
    tree.insert(path("foo", "bar", Frame.START))
    assert tree == node(foo=node(bar=leaf_with(Frame.START)))


def test_no_overlap():
    tree = Tree()
    tree.insert(path("foo", "bar", Frame.START))
    tree.insert(path("baz", "bar", Frame.END))
    assert tree == node(
        foo=node(bar=leaf_with(Frame.START)),
        baz=node(bar=leaf_with(Frame.END)),
    )


def test_front_overlap_shares_nodes():
    tree = Tree()
    tree.insert(path("foo", "bar", Frame.START))
    tree.insert(path("foo", "bar", Frame.END))
    assert tree == node(foo=node(bar=leaf_with(Frame.START, Frame.END)))


def test_total_overlap_is_idempotent():
    tree = Tree()
    tree.insert(path("foo", "baz", Frame.START))
    tree.insert(path("foo", "baz", Frame.START))
    assert tree == node(foo=node(baz=leaf_with(Frame.START)))


def test_deepening():
    tree = Tree()
    tree.insert(path("foo", "baz", "qux"))
    tree.insert(path("foo", "baz", "qux", Frame.END))
    assert tree == node(foo=node(baz=node(qux=leaf_with(Frame.END))))


def test_flatten_emits_leaves_in_frame_order():
    tree = Tree()
    tree.insert(path("foo", "bar", Frame.START))
    tree.insert(path("foo", "baz"))
    tree.insert(path("bar", "bar", "foo"))
    tree.insert(path("foo", "bar", Frame.END))
    assert tree.flatten() == [
        path("bar", "bar", "foo"),
        path("foo", "bar", Frame.START),
        path("foo", "bar", Frame.END),
        path("foo", "baz"),
    ]


def test_flatten_empty_tree():
    assert Tree().flatten() == []


def test_contains_every_prefix():
    tree = Tree()
    tree.insert(path("a", "b", "c"))
    assert path("a") in tree
    assert path("a", "b") in tree
    assert path("a", "b", "c") in tree
    assert path("b") not in tree
    assert "a" not in tree


def test_str_renders_indented_tree():
    tree = Tree()
    tree.insert(path("a", "b"))
    tree.insert(path("a", Frame.START))
    assert str(tree) == "a\n  [*]\n  b"
