# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Node locator - depth-first lookup helpers over a forest.

All helpers visit a node before its children and children in order.
None of them raise on missing ids.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from .node import TreeNode


def walk(forest: Sequence[TreeNode], _depth: int = 0) -> Iterator[tuple[int, TreeNode]]:
    """Yield (depth, node) pairs in pre-order.

    Example:
        >>> for depth, node in walk(forest):
        ...     print('  ' * depth + node.name)
    """
    for node in forest:
        yield _depth, node
        if node.children:
            yield from walk(node.children, _depth + 1)


def iter_ids(forest: Sequence[TreeNode]) -> Iterator[str]:
    """Yield every id in the forest in pre-order."""
    for _depth, node in walk(forest):
        yield node.id


def find(forest: Sequence[TreeNode], node_id: str) -> TreeNode | None:
    """Return the node with the given id, or None if absent."""
    for node in forest:
        if node.id == node_id:
            return node
        if node.children:
            found = find(node.children, node_id)
            if found is not None:
                return found
    return None


def find_parent(forest: Sequence[TreeNode], node_id: str) -> TreeNode | None:
    """Return the parent of the given node.

    None if the node is a root or is not in the forest.
    """
    for node in forest:
        if not node.children:
            continue
        for child in node.children:
            if child.id == node_id:
                return node
        found = find_parent(node.children, node_id)
        if found is not None:
            return found
    return None


def path_to(forest: Sequence[TreeNode], node_id: str) -> tuple[str, ...]:
    """Return the ids from a root down to the given node (inclusive).

    Empty tuple if the node is not in the forest.
    """
    for node in forest:
        if node.id == node_id:
            return (node.id,)
        if node.children:
            sub = path_to(node.children, node_id)
            if sub:
                return (node.id,) + sub
    return ()


def is_descendant(
    forest: Sequence[TreeNode], ancestor_id: str, candidate_id: str
) -> bool:
    """True if candidate_id lies in the subtree of ancestor_id.

    The ancestor itself is not its own descendant. Returns False when
    ancestor_id does not exist.
    """
    ancestor = find(forest, ancestor_id)
    if ancestor is None or not ancestor.children:
        return False
    return find(ancestor.children, candidate_id) is not None


def count_nodes(forest: Sequence[TreeNode]) -> int:
    """Return the total number of nodes in the forest."""
    return sum(1 for _ in walk(forest))
