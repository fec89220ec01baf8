# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Subscription system for TreeStore change notifications.

Subscribers are registered under a name, so the same name can later be
used to remove them. Two kinds of events exist:

- change: a new snapshot replaced the previous one. Callback signature
  ``callback(event, old_forest, new_forest, **info)``.
- load_error: a lazy-load fetch failed. Callback signature
  ``callback(node_id, error)``.

Example:
    >>> store.subscribe('view', change=lambda event, old, new, **kw: redraw(new))
    >>> store.unsubscribe('view')
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[..., Any]


class SubscriptionMixin:
    """Mixin giving a store named change and load-error subscribers."""

    __slots__ = ()

    _change_subscribers: dict[str, SubscriberCallback]
    _load_error_subscribers: dict[str, SubscriberCallback]

    def _init_subscriptions(self) -> None:
        self._change_subscribers = {}
        self._load_error_subscribers = {}

    def subscribe(
        self,
        subscriber_id: str,
        change: SubscriberCallback | None = None,
        load_error: SubscriberCallback | None = None,
    ) -> None:
        """Register callbacks under subscriber_id.

        Args:
            subscriber_id: Name used to unsubscribe later. Registering the
                same name again replaces the previous callbacks of that kind.
            change: Called after each snapshot change.
            load_error: Called when a lazy-load fetch fails.
        """
        if change is not None:
            self._change_subscribers[subscriber_id] = change
        if load_error is not None:
            self._load_error_subscribers[subscriber_id] = load_error

    def unsubscribe(
        self,
        subscriber_id: str,
        change: bool = True,
        load_error: bool = True,
    ) -> None:
        """Remove the callbacks registered under subscriber_id.

        Unknown names are ignored.
        """
        if change:
            self._change_subscribers.pop(subscriber_id, None)
        if load_error:
            self._load_error_subscribers.pop(subscriber_id, None)

    def _on_change(self, event: str, old: Any, new: Any, **info: Any) -> None:
        for callback in list(self._change_subscribers.values()):
            callback(event, old, new, **info)

    def _on_load_error(self, node_id: str, error: BaseException) -> None:
        for name, callback in list(self._load_error_subscribers.items()):
            try:
                callback(node_id, error)
            except Exception:
                # Runs inside a fetch task; nothing upstream would see it.
                logger.exception("load_error subscriber %r failed", name)
