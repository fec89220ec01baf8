# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Conversion between forests and plain data.

The plain shape is a list of dicts, one per node::

    [{'id': '1', 'name': 'File', 'children': [{'id': '2', 'name': 'Sub File'}]}]

A missing 'children' key means the node was never loaded; an empty list
means it was loaded and has no children. 'isLoading' and 'is_loading' are
both accepted on input.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from .exceptions import DuplicateIdError
from .node import Forest, TreeNode


def _node_from_dict(data: dict[str, Any], seen: set[str]) -> TreeNode:
    if not isinstance(data, dict):
        raise TypeError(f"node must be dict or TreeNode, not {type(data).__name__}")
    try:
        node_id = str(data['id'])
        name = data['name']
    except KeyError as e:
        raise ValueError(f"node data missing required key {e.args[0]!r}: {data!r}") from None

    if node_id in seen:
        raise DuplicateIdError(f"Duplicate node id '{node_id}'")
    seen.add(node_id)

    raw_children = data.get('children')
    children = None
    if raw_children is not None:
        children = tuple(_load_node(child, seen) for child in raw_children)
    is_loading = bool(data.get('is_loading', data.get('isLoading', False)))
    if children is not None:
        is_loading = False
    return TreeNode(node_id, name, children, is_loading)


def _load_node(data: TreeNode | dict[str, Any], seen: set[str]) -> TreeNode:
    if isinstance(data, TreeNode):
        check_unique_ids((data,), seen)
        return data
    return _node_from_dict(data, seen)


def check_unique_ids(forest: Iterable[TreeNode], seen: set[str] | None = None) -> None:
    """Raise DuplicateIdError if any id appears twice.

    Args:
        forest: Nodes to check, recursively.
        seen: Ids already in use; updated in place.
    """
    if seen is None:
        seen = set()
    for node in forest:
        if node.id in seen:
            raise DuplicateIdError(f"Duplicate node id '{node.id}'")
        seen.add(node.id)
        if node.children:
            check_unique_ids(node.children, seen)


def forest_from_data(data: Sequence[TreeNode | dict[str, Any]]) -> Forest:
    """Build a forest from a list of node dicts (or TreeNode values).

    Raises:
        TypeError: If data is not a list/tuple, or holds something else
            than dicts and TreeNodes.
        ValueError: If a node dict lacks 'id' or 'name'.
        DuplicateIdError: If an id appears twice.
    """
    if not isinstance(data, (list, tuple)):
        raise TypeError(
            f"source must be list or tuple, not {type(data).__name__}"
        )
    seen: set[str] = set()
    return tuple(_load_node(item, seen) for item in data)


def node_as_dict(node: TreeNode) -> dict[str, Any]:
    """Convert a node and its subtree to a plain dict."""
    result: dict[str, Any] = {'id': node.id, 'name': node.name}
    if node.children is not None:
        result['children'] = [node_as_dict(child) for child in node.children]
    if node.is_loading:
        result['is_loading'] = True
    return result


def forest_as_data(forest: Iterable[TreeNode]) -> list[dict[str, Any]]:
    """Convert a forest to a list of plain dicts (inverse of forest_from_data)."""
    return [node_as_dict(node) for node in forest]
