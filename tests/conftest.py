# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for genro-treeedit tests."""

import pytest

from genro_treeedit import TreeNode


@pytest.fixture
def sample():
    """The two-node forest: File > Sub File."""
    return (TreeNode('1', 'File', (TreeNode('2', 'Sub File'),)),)


@pytest.fixture
def forest():
    """A wider forest with nested, loaded and unloaded nodes.

    docs(1)
      a(2)
        a1(3)
        a2(4)
      b(5)        children == ()
    music(6)      children is None
    """
    return (
        TreeNode('1', 'docs', (
            TreeNode('2', 'a', (
                TreeNode('3', 'a1'),
                TreeNode('4', 'a2'),
            )),
            TreeNode('5', 'b', ()),
        )),
        TreeNode('6', 'music'),
    )
