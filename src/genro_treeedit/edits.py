# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Structural edits - pure forest-to-forest transformations.

Every function here takes a forest snapshot and returns a new one, leaving
the input untouched. Only the nodes on the path from a root to the edited
node are rebuilt; every other subtree is shared with the input.

When nothing changes (missing id, or an edit that would not alter the node)
the input forest is returned as is, so ``result is forest`` tells callers
whether the edit had any effect. This holds for tuple inputs; other
sequences are converted to a tuple first.

Example:
    >>> forest = (TreeNode('1', 'File', (TreeNode('2', 'Sub File'),)),)
    >>> forest = add_child(forest, '1', TreeNode('3', 'New'))
    >>> [c.id for c in forest[0].children]
    ['2', '3']
    >>> delete(forest, '1')
    ()
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Sequence

from .node import Forest, TreeNode

NodeUpdate = Callable[[TreeNode], TreeNode]


def as_forest(nodes: Sequence[TreeNode]) -> Forest:
    """Return nodes as a forest tuple (the same object if already a tuple)."""
    if isinstance(nodes, tuple):
        return nodes
    return tuple(nodes)


def _splice(forest: Forest, index: int, new: Forest) -> Forest:
    return forest[:index] + new + forest[index + 1:]


def _update(forest: Forest, node_id: str, update: NodeUpdate) -> Forest | None:
    """Rebuild the path to node_id, applying update to the node.

    Returns None if node_id is not in the forest.
    """
    for i, node in enumerate(forest):
        if node.id == node_id:
            new_node = update(node)
            if new_node is node:
                return forest
            return _splice(forest, i, (new_node,))
        if node.children:
            children = _update(node.children, node_id, update)
            if children is not None:
                if children is node.children:
                    return forest
                return _splice(forest, i, (replace(node, children=children),))
    return None


def update_node(
    forest: Sequence[TreeNode], node_id: str, update: NodeUpdate
) -> Forest:
    """Replace the node matching node_id with update(node).

    The building block for every single-node edit. No-op if node_id is
    missing or if update returns the node unchanged.
    """
    forest = as_forest(forest)
    result = _update(forest, node_id, update)
    return forest if result is None else result


def add_child(
    forest: Sequence[TreeNode], parent_id: str, new_node: TreeNode
) -> Forest:
    """Append new_node at the end of parent_id's children.

    A parent whose children were never loaded ends up with exactly
    (new_node,) and counts as loaded from then on. No-op if parent_id
    is missing.
    """
    def _append(parent: TreeNode) -> TreeNode:
        return parent.with_children((parent.children or ()) + (new_node,))

    return update_node(forest, parent_id, _append)


def rename(forest: Sequence[TreeNode], node_id: str, new_name: str) -> Forest:
    """Change the name of node_id, keeping id and subtree."""
    def _rename(node: TreeNode) -> TreeNode:
        if node.name == new_name:
            return node
        return node.with_name(new_name)

    return update_node(forest, node_id, _rename)


def _detach(forest: Forest, node_id: str) -> tuple[Forest, TreeNode] | None:
    for i, node in enumerate(forest):
        if node.id == node_id:
            return _splice(forest, i, ()), node
        if node.children:
            hit = _detach(node.children, node_id)
            if hit is not None:
                children, removed = hit
                return _splice(forest, i, (replace(node, children=children),)), removed
    return None


def detach(
    forest: Sequence[TreeNode], node_id: str
) -> tuple[Forest, TreeNode | None]:
    """Remove node_id with its subtree and return it alongside the new forest.

    Returns:
        Tuple of (new_forest, removed_node). removed_node is None and the
        forest is unchanged if node_id is missing.
    """
    forest = as_forest(forest)
    hit = _detach(forest, node_id)
    if hit is None:
        return forest, None
    return hit


def delete(forest: Sequence[TreeNode], node_id: str) -> Forest:
    """Remove node_id and its entire subtree, wherever it sits."""
    new_forest, _removed = detach(forest, node_id)
    return new_forest
