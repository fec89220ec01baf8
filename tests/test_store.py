# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for TreeStore, its configuration and subscriptions."""

import logging

import pytest

from genro_treeedit import (
    DuplicateIdError,
    InvalidLoadStateError,
    InvalidMoveError,
    LoadState,
    NodeNotFoundError,
    SequentialIdGenerator,
    TreeEditError,
    TreeNode,
    TreeStore,
    TreeStoreConfig,
    edits,
)

SAMPLE = [{'id': '1', 'name': 'File', 'children': [{'id': '2', 'name': 'Sub File'}]}]


def _ids(nodes):
    return [n.id for n in nodes]


class TestTreeStoreSource:
    """Tests for TreeStore source parameter."""

    def test_empty_store(self):
        """Test creating an empty store."""
        store = TreeStore()
        assert store.forest == ()
        assert len(store) == 0

    def test_source_from_dicts(self):
        """Test creating a store from plain data."""
        store = TreeStore(SAMPLE)
        assert store['2'].name == 'Sub File'
        assert store.as_data() == SAMPLE

    def test_source_from_nodes(self, forest):
        """Test a tuple of nodes is used as is."""
        store = TreeStore(forest)
        assert store.forest == forest

    def test_source_from_store(self, forest):
        """Test sharing another store's snapshot."""
        other = TreeStore(forest)
        store = TreeStore(other)
        assert store.forest is other.forest
        store.rename('1', 'changed')
        assert other['1'].name == 'docs'

    def test_source_invalid_type_raises(self):
        """Test unsupported sources are rejected."""
        with pytest.raises(TypeError, match='source must be'):
            TreeStore('nope')

    def test_source_duplicate_ids_raise(self):
        """Test duplicate ids are rejected on load."""
        with pytest.raises(DuplicateIdError):
            TreeStore([{'id': '1', 'name': 'a'}, {'id': '1', 'name': 'b'}])


class TestTreeStoreBasic:
    """Tests for lookups and special methods."""

    def test_iter_roots(self, forest):
        """Test iteration yields roots in order."""
        assert _ids(TreeStore(forest)) == ['1', '6']

    def test_contains(self, forest):
        """Test membership by id at any depth."""
        store = TreeStore(forest)
        assert '4' in store
        assert 'nope' not in store

    def test_getitem_missing_raises(self, forest):
        """Test item access on a missing id."""
        store = TreeStore(forest)
        with pytest.raises(NodeNotFoundError, match='nope'):
            store['nope']
        with pytest.raises(KeyError):
            store['nope']

    def test_get_default(self, forest):
        """Test get with default."""
        store = TreeStore(forest)
        assert store.get('nope') is None
        assert store.get('nope', 'x') == 'x'
        assert store.get('3').name == 'a1'

    def test_lookup_helpers(self, forest):
        """Test parent_of, path_to, is_descendant, walk and count."""
        store = TreeStore(forest)
        assert store.parent_of('3').id == '2'
        assert store.path_to('4') == ('1', '2', '4')
        assert store.is_descendant('1', '4')
        assert [n.id for _, n in store.walk()] == ['1', '2', '3', '4', '5', '6']
        assert store.count_nodes() == 6

    def test_repr(self, forest):
        """Test string representation lists root ids."""
        assert repr(TreeStore(forest)) == "TreeStore(['1', '6'])"


class TestTreeStoreEdits:
    """Tests for edits by id on the current snapshot."""

    def test_add_child_generates_id(self):
        """Test a new node gets a fresh id and is appended."""
        store = TreeStore(SAMPLE, id_generator=SequentialIdGenerator(start=3))
        node = store.add_child('1', 'New')
        assert node.id == '3'
        assert node.children is None
        assert _ids(store['1'].children) == ['2', '3']

    def test_add_child_loaded(self, forest):
        """Test creating a loaded, empty node."""
        store = TreeStore(forest)
        node = store.add_child('1', 'folder', loaded=True)
        assert store[node.id].children == ()

    def test_add_child_skips_ids_in_use(self):
        """Test ids already in the forest are never handed out."""
        store = TreeStore(SAMPLE, id_generator=SequentialIdGenerator(start=1))
        node = store.add_child('1', 'New')
        assert node.id == '3'

    def test_add_child_gives_up_on_exhausted_generator(self):
        """Test a generator that only returns used ids fails loudly."""
        store = TreeStore(SAMPLE, id_generator=lambda: '1', max_id_attempts=3)
        with pytest.raises(DuplicateIdError, match='3 attempts'):
            store.add_child('1', 'New')

    def test_add_child_missing_parent(self, forest):
        """Test adding below a missing parent is a no-op."""
        store = TreeStore(forest)
        before = store.forest
        assert store.add_child('nope', 'x') is None
        assert store.forest is before

    def test_add_node_duplicate_raises(self, forest):
        """Test inserting a node whose id exists already."""
        store = TreeStore(forest)
        with pytest.raises(DuplicateIdError):
            store.add_node('6', TreeNode('3', 'dup'))
        assert store['6'].children is None

    def test_add_node_subtree(self, forest):
        """Test inserting a prebuilt subtree."""
        store = TreeStore(forest)
        assert store.add_node('6', TreeNode('7', 'album', (TreeNode('8', 'track'),)))
        assert store.path_to('8') == ('6', '7', '8')

    def test_rename(self, forest):
        """Test rename reports whether something changed."""
        store = TreeStore(forest)
        assert store.rename('3', 'X') is True
        assert store['3'].name == 'X'
        assert store.rename('3', 'X') is False
        assert store.rename('nope', 'X') is False

    def test_delete(self, forest):
        """Test delete returns the removed subtree."""
        store = TreeStore(forest)
        removed = store.delete('2')
        assert removed.id == '2'
        assert '3' not in store
        assert store.delete('2') is None

    def test_delete_example(self):
        """Test deleting the root of the sample forest empties it."""
        store = TreeStore(SAMPLE)
        store.delete('1')
        assert store.forest == ()

    def test_move(self, forest):
        """Test accepted and rejected moves."""
        store = TreeStore(forest)
        assert store.move('1', '3') is False
        assert store.move('2', '2') is False
        assert store.move('nope', '2') is False
        assert store.move('2', '6') is True
        assert store.parent_of('2').id == '6'
        assert store.count_nodes() == 6

    def test_move_cycle_logs_warning(self, forest, caplog):
        """Test rejected cycles are logged."""
        store = TreeStore(forest)
        with caplog.at_level(logging.WARNING, logger='genro_treeedit'):
            store.move('1', '4')
        assert 'rejected' in caplog.text

    def test_set_forest(self, forest):
        """Test replacing the snapshot."""
        store = TreeStore()
        assert store.set_forest(forest) is True
        assert store.forest is forest
        assert store.set_forest(forest) is False

    def test_set_forest_duplicate_raises(self):
        """Test the replacement is validated."""
        store = TreeStore()
        with pytest.raises(DuplicateIdError):
            store.set_forest((TreeNode('1', 'a'), TreeNode('1', 'b')))
        assert store.forest == ()

    def test_apply(self, forest):
        """Test running a pure transformation as one step."""
        store = TreeStore(forest)
        assert store.apply(edits.rename, '1', 'Documents') is True
        assert store['1'].name == 'Documents'
        assert store.apply(edits.delete, 'nope') is False


class TestTreeStoreLoadState:
    """Tests for begin_load and resolve_load on the store."""

    def test_begin_and_resolve(self, forest):
        """Test the store runs the state machine."""
        store = TreeStore(forest)
        assert store.begin_load('6') is True
        assert store.load_state('6') is LoadState.LOADING
        assert store.resolve_load('6', [TreeNode('c1', 'x')]) is True
        assert store.load_state('6') is LoadState.LOADED

    def test_begin_load_twice(self, forest, caplog):
        """Test a second begin_load is refused with a warning."""
        store = TreeStore(forest)
        store.begin_load('6')
        with caplog.at_level(logging.WARNING, logger='genro_treeedit'):
            assert store.begin_load('6') is False
        assert 'loading' in caplog.text

    def test_resolve_missing_never_raises(self, forest):
        """Test resolving a removed node is a no-op even in strict mode."""
        store = TreeStore(forest, raise_on_error=True)
        store.begin_load('6')
        store.delete('6')
        assert store.resolve_load('6', [TreeNode('c1', 'x')]) is False

    def test_resolve_drops_ids_in_use(self, forest):
        """Test fetched nodes may not duplicate ids elsewhere in the forest."""
        store = TreeStore(forest)
        store.begin_load('6')
        store.resolve_load('6', [TreeNode('3', 'dup'), TreeNode('c1', 'ok')])
        assert _ids(store['6'].children) == ['c1']
        assert store.parent_of('3').id == '2'

    def test_resolve_drops_repeated_fetched_ids(self, forest):
        """Test the fetched children may not repeat an id either."""
        store = TreeStore(forest)
        store.begin_load('6')
        store.resolve_load('6', [TreeNode('c1', 'x'), TreeNode('c1', 'y')])
        assert [n.name for n in store['6'].children] == ['x']

    def test_resolve_drops_child_reusing_parent_id(self, forest):
        """Test a fetched child cannot carry its parent's id."""
        store = TreeStore(forest)
        store.begin_load('6')
        store.resolve_load('6', [TreeNode('6', 'self')])
        assert store['6'].children == ()

    def test_resolve_keeps_local_child_on_nested_clash(self, forest):
        """Test a fetched subtree reusing the id of a child added while loading is dropped."""
        store = TreeStore(forest, id_generator=SequentialIdGenerator(prefix='n'))
        store.begin_load('6')
        local = store.add_child('6', 'local')
        store.resolve_load('6', [
            TreeNode('y', 'fetched', (TreeNode(local.id, 'nested'),)),
            TreeNode('z', 'ok'),
        ])
        assert _ids(store['6'].children) == ['z', local.id]
        ids = [n.id for _, n in store.walk()]
        assert len(ids) == len(set(ids))


class TestStrictMode:
    """Tests for raise_on_error."""

    def test_config_object(self, forest):
        """Test a config object is accepted and keyword options override it."""
        config = TreeStoreConfig(raise_on_error=True)
        assert TreeStore(forest, config=config).config.raise_on_error is True
        assert TreeStore(forest, config=config, raise_on_error=False).config.raise_on_error is False

    def test_unknown_option_raises(self):
        """Test typos in options are caught."""
        with pytest.raises(TypeError, match='raise_on_eror'):
            TreeStore(raise_on_eror=True)

    def test_invalid_config_values(self):
        """Test config validation."""
        with pytest.raises(ValueError):
            TreeStoreConfig(fetch_timeout=0)
        with pytest.raises(ValueError):
            TreeStoreConfig(max_id_attempts=0)

    def test_missing_ids_raise(self, forest):
        """Test every edit on a missing id raises in strict mode."""
        store = TreeStore(forest, raise_on_error=True)
        with pytest.raises(NodeNotFoundError):
            store.add_child('nope', 'x')
        with pytest.raises(NodeNotFoundError):
            store.rename('nope', 'x')
        with pytest.raises(NodeNotFoundError):
            store.delete('nope')
        with pytest.raises(NodeNotFoundError):
            store.move('nope', '1')
        with pytest.raises(NodeNotFoundError):
            store.move('1', 'nope')
        with pytest.raises(NodeNotFoundError):
            store.begin_load('nope')

    def test_cycle_raises(self, forest):
        """Test cycles raise InvalidMoveError in strict mode."""
        store = TreeStore(forest, raise_on_error=True)
        with pytest.raises(InvalidMoveError, match='inside the dragged subtree') as exc_info:
            store.move('1', '3')
        assert exc_info.value.dragged_id == '1'
        assert isinstance(exc_info.value, TreeEditError)

    def test_self_drop_is_silent(self, forest):
        """Test a self-drop is not an error even in strict mode."""
        store = TreeStore(forest, raise_on_error=True)
        assert store.move('2', '2') is False

    def test_invalid_load_state_raises(self, forest):
        """Test begin_load on a loaded node raises in strict mode."""
        store = TreeStore(forest, raise_on_error=True)
        with pytest.raises(InvalidLoadStateError):
            store.begin_load('5')

    def test_rename_same_name_is_not_an_error(self, forest):
        """Test a true no-op is distinguished from a missing id."""
        store = TreeStore(forest, raise_on_error=True)
        assert store.rename('3', 'a1') is False


class TestSubscriptions:
    """Tests for change subscriptions."""

    def test_change_events(self, forest):
        """Test every effective edit is notified once with old and new snapshot."""
        store = TreeStore(forest, id_generator=SequentialIdGenerator(prefix='n'))
        events = []
        store.subscribe('log', change=lambda event, old, new, **info: events.append((event, old, new, info)))

        first = store.forest
        store.rename('3', 'X')
        store.add_child('1', 'new')
        store.move('5', '6')
        store.delete('4')

        assert [e[0] for e in events] == ['rename', 'add', 'move', 'delete']
        assert events[0][1] is first
        assert events[0][2] is events[1][1]
        assert events[-1][2] is store.forest
        assert events[1][3] == {'node_id': 'n1', 'parent_id': '1'}
        assert events[2][3] == {'node_id': '5', 'target_id': '6'}

    def test_no_event_without_change(self, forest):
        """Test no-ops are not notified."""
        store = TreeStore(forest)
        events = []
        store.subscribe('log', change=lambda *args, **info: events.append(args))
        store.rename('nope', 'x')
        store.move('1', '3')
        store.delete('nope')
        assert events == []

    def test_unsubscribe(self, forest):
        """Test removing a subscriber."""
        store = TreeStore(forest)
        events = []
        store.subscribe('log', change=lambda *args, **info: events.append(args))
        store.unsubscribe('log')
        store.unsubscribe('never-registered')
        store.rename('3', 'X')
        assert events == []
