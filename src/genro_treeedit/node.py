# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeNode - the immutable value stored in a forest."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable


class LoadState(str, Enum):
    """Lazy-load state of a node, derived from children and is_loading."""

    UNLOADED = 'unloaded'
    LOADING = 'loading'
    LOADED = 'loaded'


@dataclass(frozen=True)
class TreeNode:
    """A node in an editable forest.

    Each node has:
    - id: Opaque identifier, unique across the whole forest
    - name: Display label
    - children: None when not yet loaded, a tuple (possibly empty) once loaded
    - is_loading: True only while a lazy-load fetch is outstanding

    Nodes are never mutated; every edit produces a new value that shares
    untouched subtrees with the old one.

    Example:
        >>> leaf = TreeNode('2', 'Sub File')
        >>> leaf.load_state
        <LoadState.UNLOADED: 'unloaded'>
        >>> root = TreeNode('1', 'File', (leaf,))
        >>> root.children[0].name
        'Sub File'
    """

    id: str
    name: str
    children: tuple[TreeNode, ...] | None = None
    is_loading: bool = False

    def __post_init__(self) -> None:
        # Accept any iterable of children but always store a tuple.
        if self.children is not None and not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children))

    def __repr__(self) -> str:
        if self.children is None:
            children_repr = 'None'
        else:
            children_repr = f"({len(self.children)})"
        loading = ', loading' if self.is_loading else ''
        return f"TreeNode({self.id!r}, {self.name!r}, children={children_repr}{loading})"

    @property
    def load_state(self) -> LoadState:
        """Current lazy-load state."""
        if self.children is not None:
            return LoadState.LOADED
        if self.is_loading:
            return LoadState.LOADING
        return LoadState.UNLOADED

    @property
    def is_loaded(self) -> bool:
        """True if children are known (possibly empty)."""
        return self.children is not None

    def with_name(self, name: str) -> TreeNode:
        """Return a copy of this node with a different name."""
        return replace(self, name=name)

    def with_children(self, children: Iterable[TreeNode]) -> TreeNode:
        """Return a loaded copy of this node holding the given children."""
        return replace(self, children=tuple(children), is_loading=False)


Forest = tuple[TreeNode, ...]
