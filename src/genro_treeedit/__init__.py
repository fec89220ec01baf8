# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-TreeEdit - Editable forests of named nodes with immutable snapshots.

A lightweight, zero-dependency library providing pure tree edits (add,
rename, delete, drag-and-drop moves, lazy child loading) and a TreeStore
that owns the current snapshot, for the Genro ecosystem.
"""

__version__ = "0.1.0"

from .config import TreeStoreConfig
from .edits import add_child, delete, detach, rename, update_node
from .exceptions import (
    DuplicateIdError,
    FetchError,
    InvalidLoadStateError,
    InvalidMoveError,
    NodeNotFoundError,
    TreeEditError,
)
from .ids import SequentialIdGenerator, UuidIdGenerator
from .lazy import begin_load, load_state, resolve_load
from .loading import forest_as_data, forest_from_data
from .locator import count_nodes, find, find_parent, is_descendant, path_to, walk
from .node import Forest, LoadState, TreeNode
from .reparent import MoveCheck, check_move, move
from .store import TreeStore

__all__ = [
    # Core classes
    "TreeNode",
    "Forest",
    "LoadState",
    "TreeStore",
    "TreeStoreConfig",
    # Locator
    "find",
    "find_parent",
    "path_to",
    "is_descendant",
    "walk",
    "count_nodes",
    # Edits
    "add_child",
    "rename",
    "delete",
    "detach",
    "update_node",
    # Lazy loading
    "begin_load",
    "resolve_load",
    "load_state",
    # Reparenting
    "move",
    "check_move",
    "MoveCheck",
    # Conversion
    "forest_from_data",
    "forest_as_data",
    # Ids
    "UuidIdGenerator",
    "SequentialIdGenerator",
    # Exceptions
    "TreeEditError",
    "NodeNotFoundError",
    "InvalidMoveError",
    "InvalidLoadStateError",
    "DuplicateIdError",
    "FetchError",
]
