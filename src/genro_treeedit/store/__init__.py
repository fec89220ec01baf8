# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore package - the stateful owner of a forest snapshot.

The package is organized into:
- core: TreeStore class with edits by id, lazy loading and lookups
- subscription: Change and load-error notification system

Example:
    >>> from genro_treeedit import TreeStore
    >>> store = TreeStore([{'id': '1', 'name': 'File'}])
    >>> store.rename('1', 'Documents')
    True
    >>> store['1'].name
    'Documents'
"""

from .core import TreeStore
from .subscription import SubscriptionMixin

__all__ = ["TreeStore", "SubscriptionMixin"]
