# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Reparent orchestrator - drag-and-drop moves that never create a cycle."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from .edits import add_child, as_forest, detach
from .locator import find, is_descendant
from .node import Forest, TreeNode

logger = logging.getLogger(__name__)


class MoveCheck(str, Enum):
    """Outcome of validating a move before it is applied."""

    OK = 'ok'
    SELF_DROP = 'dropped onto itself'
    CYCLE = 'target is inside the dragged subtree'
    DRAGGED_MISSING = 'dragged node not found'
    TARGET_MISSING = 'target node not found'


def check_move(
    forest: Sequence[TreeNode], dragged_id: str, target_id: str
) -> MoveCheck:
    """Tell whether dragged_id may become a child of target_id."""
    if dragged_id == target_id:
        return MoveCheck.SELF_DROP
    if is_descendant(forest, dragged_id, target_id):
        return MoveCheck.CYCLE
    if find(forest, dragged_id) is None:
        return MoveCheck.DRAGGED_MISSING
    if find(forest, target_id) is None:
        return MoveCheck.TARGET_MISSING
    return MoveCheck.OK


def move(forest: Sequence[TreeNode], dragged_id: str, target_id: str) -> Forest:
    """Move the subtree of dragged_id to the end of target_id's children.

    Rejected moves (self-drop, target inside the dragged subtree, either id
    missing) return the forest unchanged. Moving a node onto its current
    parent re-appends it as the last child.

    Example:
        >>> forest = (TreeNode('1', 'File', (TreeNode('2', 'Sub'),)),)
        >>> move(forest, '1', '2') is forest
        True
    """
    forest = as_forest(forest)
    check = check_move(forest, dragged_id, target_id)
    if check is not MoveCheck.OK:
        logger.debug("Move %r -> %r rejected: %s", dragged_id, target_id, check.value)
        return forest

    detached, removed = detach(forest, dragged_id)
    if removed is None:
        return forest
    return add_child(detached, target_id, removed)
