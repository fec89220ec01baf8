# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore - the owner of the current forest snapshot.

This module provides the TreeStore class, the stateful side of
genro-treeedit. A TreeStore holds one immutable forest at a time and
replaces it with the result of the pure edits in ``edits``, ``lazy`` and
``reparent``. Callers (typically a view) read ``store.forest``, ask for the
next transformation, and get notified through subscriptions.

Key Features:
    - **Snapshot ownership**: edits never mutate, the store swaps snapshots
    - **Total API**: missing ids and rejected moves are silent no-ops,
      unless the store is created with ``raise_on_error=True``
    - **Lazy loading**: ``expand`` starts a fetch task and resolves it
      against whatever the forest is when the fetch completes
    - **Reactive subscriptions**: change and load-error notifications

Example:
    Basic usage::

        store = TreeStore([{'id': '1', 'name': 'File',
                            'children': [{'id': '2', 'name': 'Sub File'}]}])
        node = store.add_child('1', 'New')
        store.rename(node.id, 'Renamed')
        store.move('2', node.id)
        store.delete('1')

    With lazy loading::

        async def fetch(node_id):
            return [TreeNode(new_id(), 'Lazy Child 1')]

        store = TreeStore(source, fetch=fetch)
        store.expand('1')           # marks '1' loading, schedules fetch
        await store.wait_loads()    # '1' now holds the fetched children
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Iterator, Sequence, Union

from .. import edits, lazy, locator, reparent
from ..config import TreeStoreConfig
from ..exceptions import (
    DuplicateIdError,
    FetchError,
    InvalidLoadStateError,
    InvalidMoveError,
    NodeNotFoundError,
)
from ..ids import IdGenerator, UuidIdGenerator
from ..loading import check_unique_ids, forest_as_data, forest_from_data
from ..node import Forest, LoadState, TreeNode
from .subscription import SubscriptionMixin

logger = logging.getLogger(__name__)

FetchResult = Union[Iterable[TreeNode], Awaitable[Iterable[TreeNode]]]
FetchChildren = Callable[[str], FetchResult]


class TreeStore(SubscriptionMixin):
    """An editable forest with snapshot semantics.

    TreeStore provides:
    - forest / set_forest(): read and replace the current snapshot
    - add_child, rename, delete, move: structural edits by id
    - begin_load, resolve_load, expand: lazy loading of children
    - find, parent_of, is_descendant, walk: lookups on the current snapshot

    Every edit returns whether the snapshot changed (add_child and delete
    return the affected node instead, or None).

    Attributes:
        load_errors: Last fetch failure per node id.
    """

    __slots__ = (
        '_forest', '_config', '_fetch', '_new_id', '_pending',
        'load_errors', '_change_subscribers', '_load_error_subscribers',
    )

    def __init__(
        self,
        source: Sequence[TreeNode | dict[str, Any]] | TreeStore | None = None,
        fetch: FetchChildren | None = None,
        id_generator: IdGenerator | None = None,
        config: TreeStoreConfig | None = None,
        **options: Any,
    ) -> None:
        """Initialize a TreeStore.

        Args:
            source: Optional initial data. Can be:
                - tuple/list of TreeNode: used as the initial forest
                - list of dicts: converted with forest_from_data
                - TreeStore: its current forest is shared (snapshots are
                  immutable, so nothing is copied)
            fetch: Capability returning the children of a node, either
                directly or as an awaitable. Needed by expand().
            id_generator: Callable returning fresh ids for new nodes.
                Defaults to UuidIdGenerator.
            config: TreeStoreConfig. Keyword options override its fields,
                e.g. TreeStore(raise_on_error=True).

        Raises:
            TypeError: If source has an unsupported type.
            DuplicateIdError: If source contains the same id twice.
        """
        config = config or TreeStoreConfig()
        if options:
            config = config.updated(**options)
        self._config = config
        self._forest: Forest = ()
        self._fetch = fetch
        self._new_id: IdGenerator = id_generator or UuidIdGenerator()
        self._pending: dict[str, asyncio.Task] = {}
        self.load_errors: dict[str, FetchError] = {}
        self._init_subscriptions()

        if source is not None:
            self._forest = self._load_source(source)

    def _load_source(
        self, source: Sequence[TreeNode | dict[str, Any]] | TreeStore
    ) -> Forest:
        if isinstance(source, TreeStore):
            return source.forest
        if isinstance(source, (list, tuple)):
            return forest_from_data(source)
        raise TypeError(
            f"source must be list, tuple, or TreeStore, not {type(source).__name__}"
        )

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"TreeStore({[node.id for node in self._forest]})"

    def __len__(self) -> int:
        """Return the number of root nodes."""
        return len(self._forest)

    def __iter__(self) -> Iterator[TreeNode]:
        """Iterate over root nodes in display order."""
        return iter(self._forest)

    def __contains__(self, node_id: str) -> bool:
        """True if a node with this id exists anywhere in the forest."""
        return locator.find(self._forest, node_id) is not None

    def __getitem__(self, node_id: str) -> TreeNode:
        """Get a node by id.

        Raises:
            NodeNotFoundError: If the id is not in the forest.
        """
        node = locator.find(self._forest, node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    # ==================== Snapshot ====================

    @property
    def forest(self) -> Forest:
        """The current snapshot."""
        return self._forest

    @property
    def config(self) -> TreeStoreConfig:
        """The options this store was created with."""
        return self._config

    def set_forest(self, forest: Sequence[TreeNode]) -> bool:
        """Replace the current snapshot.

        Raises:
            DuplicateIdError: If the new forest contains an id twice.
        """
        forest = edits.as_forest(forest)
        check_unique_ids(forest)
        return self._commit('set', forest)

    def apply(
        self, transform: Callable[..., Sequence[TreeNode]], *args: Any, **kwargs: Any
    ) -> bool:
        """Replace the snapshot with transform(forest, *args, **kwargs).

        Lets callers run any pure transformation as one step.

        Example:
            >>> store.apply(edits.rename, '1', 'Documents')
        """
        new_forest = edits.as_forest(transform(self._forest, *args, **kwargs))
        if new_forest is not self._forest:
            check_unique_ids(new_forest)
        return self._commit('apply', new_forest, transform=getattr(transform, '__name__', None))

    def as_data(self) -> list[dict[str, Any]]:
        """Return the current forest as plain dicts."""
        return forest_as_data(self._forest)

    def _commit(self, event: str, new_forest: Forest, **info: Any) -> bool:
        old_forest = self._forest
        if new_forest is old_forest:
            return False
        self._forest = new_forest
        logger.debug("%s applied %s", event, info or '')
        self._on_change(event, old_forest, new_forest, **info)
        return True

    def _not_found(self, node_id: str, operation: str) -> None:
        if self._config.raise_on_error:
            raise NodeNotFoundError(node_id, operation)
        logger.debug("%s ignored: node %r not found", operation, node_id)

    # ==================== Lookup ====================

    def find(self, node_id: str) -> TreeNode | None:
        """Return the node with this id, or None."""
        return locator.find(self._forest, node_id)

    def get(self, node_id: str, default: Any = None) -> TreeNode | Any:
        """Return the node with this id, or default."""
        node = locator.find(self._forest, node_id)
        return default if node is None else node

    def parent_of(self, node_id: str) -> TreeNode | None:
        """Return the parent node, or None for roots and missing ids."""
        return locator.find_parent(self._forest, node_id)

    def path_to(self, node_id: str) -> tuple[str, ...]:
        """Return the ids from the root down to node_id."""
        return locator.path_to(self._forest, node_id)

    def is_descendant(self, ancestor_id: str, candidate_id: str) -> bool:
        """True if candidate_id lies in the subtree of ancestor_id."""
        return locator.is_descendant(self._forest, ancestor_id, candidate_id)

    def walk(self) -> Iterator[tuple[int, TreeNode]]:
        """Yield (depth, node) pairs over the current snapshot in pre-order."""
        return locator.walk(self._forest)

    def count_nodes(self) -> int:
        """Return the total number of nodes in the current snapshot."""
        return locator.count_nodes(self._forest)

    # ==================== Structural Edits ====================

    def new_id(self) -> str:
        """Draw an id not used anywhere in the current forest.

        Raises:
            DuplicateIdError: If the generator keeps returning ids in use.
        """
        in_use = set(locator.iter_ids(self._forest))
        for _ in range(self._config.max_id_attempts):
            candidate = self._new_id()
            if candidate not in in_use:
                return candidate
            logger.warning("Id generator returned %r, already in use", candidate)
        raise DuplicateIdError(
            f"No fresh id after {self._config.max_id_attempts} attempts"
        )

    def add_child(
        self, parent_id: str, name: str, loaded: bool = False
    ) -> TreeNode | None:
        """Create a node called name as the last child of parent_id.

        Args:
            parent_id: Id of the parent node.
            name: Name of the new node, already chosen by the caller.
            loaded: If True the new node starts with empty children
                (LOADED); otherwise it is a lazy leaf (UNLOADED).

        Returns:
            The new node, or None if parent_id is missing.
        """
        if locator.find(self._forest, parent_id) is None:
            self._not_found(parent_id, 'add_child')
            return None
        node = TreeNode(self.new_id(), name, () if loaded else None)
        self.add_node(parent_id, node)
        return node

    def add_node(self, parent_id: str, node: TreeNode) -> bool:
        """Insert an existing node value (with its subtree) under parent_id.

        Raises:
            DuplicateIdError: If any id of node is already in the forest.
        """
        new_forest = edits.add_child(self._forest, parent_id, node)
        if new_forest is self._forest:
            self._not_found(parent_id, 'add_child')
            return False
        check_unique_ids((node,), set(locator.iter_ids(self._forest)))
        return self._commit('add', new_forest, node_id=node.id, parent_id=parent_id)

    def rename(self, node_id: str, new_name: str) -> bool:
        """Rename node_id. False if nothing changed."""
        new_forest = edits.rename(self._forest, node_id, new_name)
        if new_forest is self._forest and node_id not in self:
            self._not_found(node_id, 'rename')
        return self._commit('rename', new_forest, node_id=node_id, name=new_name)

    def delete(self, node_id: str) -> TreeNode | None:
        """Delete node_id and its subtree.

        Returns:
            The removed node, or None if node_id was missing.
        """
        new_forest, removed = edits.detach(self._forest, node_id)
        if removed is None:
            self._not_found(node_id, 'delete')
            return None
        self._commit('delete', new_forest, node_id=node_id)
        return removed

    def move(self, dragged_id: str, target_id: str) -> bool:
        """Move dragged_id to the end of target_id's children.

        Returns:
            True if the move was applied.

        Raises:
            InvalidMoveError: In strict mode, if the target lies inside the
                dragged subtree.
            NodeNotFoundError: In strict mode, if either id is missing.
        """
        check = reparent.check_move(self._forest, dragged_id, target_id)
        if check is reparent.MoveCheck.CYCLE:
            logger.warning(
                "Move %r -> %r rejected: %s", dragged_id, target_id, check.value
            )
            if self._config.raise_on_error:
                raise InvalidMoveError(dragged_id, target_id, check.value)
            return False
        if check is reparent.MoveCheck.DRAGGED_MISSING:
            self._not_found(dragged_id, 'move')
            return False
        if check is reparent.MoveCheck.TARGET_MISSING:
            self._not_found(target_id, 'move')
            return False
        if check is reparent.MoveCheck.SELF_DROP:
            return False
        new_forest = reparent.move(self._forest, dragged_id, target_id)
        return self._commit('move', new_forest, node_id=dragged_id, target_id=target_id)

    # ==================== Lazy Loading ====================

    def load_state(self, node_id: str) -> LoadState | None:
        return lazy.load_state(self._forest, node_id)

    def begin_load(self, node_id: str) -> bool:
        """Mark an UNLOADED node as LOADING.

        Raises:
            InvalidLoadStateError: In strict mode, if the node is not UNLOADED.
            NodeNotFoundError: In strict mode, if node_id is missing.
        """
        state = self.load_state(node_id)
        if state is None:
            self._not_found(node_id, 'begin_load')
            return False
        if state is not LoadState.UNLOADED:
            message = f"begin_load on '{node_id}' which is {state.value}"
            if self._config.raise_on_error:
                raise InvalidLoadStateError(message)
            logger.warning(message)
            return False
        logger.info("Loading children of %r", node_id)
        return self._commit('begin_load', lazy.begin_load(self._forest, node_id), node_id=node_id)

    def resolve_load(self, node_id: str, children: Iterable[TreeNode]) -> bool:
        """Store the fetched children of node_id.

        A missing node_id is a no-op, never an error: the node may have
        been deleted while its fetch was outstanding. Fetched nodes whose
        ids are already used anywhere in the forest, at any depth and
        including children added while the fetch was outstanding, are
        dropped.
        """
        node = locator.find(self._forest, node_id)
        if node is None:
            logger.info("Children of %r arrived after it was removed", node_id)
            return False
        in_use = set(locator.iter_ids(self._forest))
        accepted = []
        for child in children:
            claimed = set(in_use)
            try:
                check_unique_ids((child,), claimed)
            except DuplicateIdError:
                logger.warning("Dropping fetched child %r of %r: id in use", child.id, node_id)
                continue
            in_use = claimed
            accepted.append(child)
        logger.info("Loaded %d children of %r", len(accepted), node_id)
        new_forest = lazy.resolve_load(self._forest, node_id, accepted)
        return self._commit('resolve_load', new_forest, node_id=node_id)

    @property
    def pending_loads(self) -> tuple[str, ...]:
        """Ids of nodes whose fetch is still outstanding."""
        return tuple(self._pending)

    def expand(self, node_id: str) -> asyncio.Task | None:
        """Start loading the children of node_id, if not loaded yet.

        Must be called from a running event loop. The fetch runs as a task;
        when it completes its result is applied to the snapshot current at
        that time. On failure the node is resolved with no children and the
        error is logged, stored in load_errors and sent to load_error
        subscribers.

        A node already LOADING without a fetch of its own (marked through
        begin_load, or loaded from data flagged as loading) gets one now.

        Returns:
            The fetch task, the already running one if the node is loading,
            or None if there is nothing to load.

        Raises:
            RuntimeError: If the store has no fetch capability or no event
                loop is running.
        """
        if self._fetch is None:
            raise RuntimeError("TreeStore has no fetch capability")
        state = self.load_state(node_id)
        if state is LoadState.LOADING and node_id in self._pending:
            return self._pending[node_id]
        if state is None:
            self._not_found(node_id, 'expand')
            return None
        if state is LoadState.LOADED:
            return None
        loop = asyncio.get_running_loop()
        if state is LoadState.UNLOADED:
            self.begin_load(node_id)
        task = loop.create_task(self._load_children(node_id))
        self._pending[node_id] = task
        return task

    async def load_children(self, node_id: str) -> bool:
        """Load the children of node_id and wait for them.

        Returns:
            True if the node ended up with fetched children, False if there
            was nothing to load or the fetch failed.
        """
        task = self.expand(node_id)
        if task is None:
            return False
        return await task

    async def wait_loads(self) -> None:
        """Wait until every outstanding fetch has been resolved."""
        while self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)

    async def _load_children(self, node_id: str) -> bool:
        try:
            result = self._fetch(node_id)
            if inspect.isawaitable(result):
                if self._config.fetch_timeout is not None:
                    result = await asyncio.wait_for(result, self._config.fetch_timeout)
                else:
                    result = await result
            children = forest_from_data(list(result))
        except asyncio.CancelledError:
            self.resolve_load(node_id, ())
            raise
        except Exception as e:
            error = FetchError(node_id, e)
            logger.error("Fetching children of %r failed", node_id, exc_info=e)
            self.load_errors[node_id] = error
            try:
                self.resolve_load(node_id, ())
            finally:
                self._on_load_error(node_id, error)
            return False
        finally:
            self._pending.pop(node_id, None)
        self.load_errors.pop(node_id, None)
        self.resolve_load(node_id, children)
        return True
