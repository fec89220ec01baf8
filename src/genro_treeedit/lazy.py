# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Lazy-load state machine.

A node moves UNLOADED -> LOADING -> LOADED and never back. The fetch that
produces the children lives outside this module; see TreeStore.expand for
the orchestration.

Children added to a LOADING node (add_child, move) make it LOADED at once.
When the fetch later resolves, the fetched children come first and the
locally added ones are kept after them, except a local child whose subtree
shares any id with the fetched subtrees. TreeStore.resolve_load drops such
fetched children beforehand, so through the store local edits always
survive.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from .edits import update_node
from .locator import find, iter_ids
from .node import Forest, LoadState, TreeNode


def load_state(forest: Sequence[TreeNode], node_id: str) -> LoadState | None:
    """Return the load state of node_id, or None if it is missing."""
    node = find(forest, node_id)
    return None if node is None else node.load_state


def begin_load(forest: Sequence[TreeNode], node_id: str) -> Forest:
    """UNLOADED -> LOADING.

    Only an UNLOADED node is marked; any other state, or a missing id,
    leaves the forest unchanged. Starting a load twice is a caller error
    that TreeStore reports.
    """
    def _begin(node: TreeNode) -> TreeNode:
        if node.load_state is not LoadState.UNLOADED:
            return node
        return replace(node, is_loading=True)

    return update_node(forest, node_id, _begin)


def resolve_load(
    forest: Sequence[TreeNode],
    node_id: str,
    fetched_children: Iterable[TreeNode],
) -> Forest:
    """LOADING -> LOADED with the fetched children (possibly empty).

    No-op if node_id is gone, which happens when the node was deleted while
    its fetch was outstanding.
    """
    fetched = tuple(fetched_children)

    def _resolve(node: TreeNode) -> TreeNode:
        if node.children is None:
            return node.with_children(fetched)
        fetched_ids = set(iter_ids(fetched))
        local = tuple(
            c for c in node.children
            if fetched_ids.isdisjoint(iter_ids((c,)))
        )
        merged = fetched + local
        if merged == node.children and not node.is_loading:
            return node
        return node.with_children(merged)

    return update_node(forest, node_id, _resolve)
