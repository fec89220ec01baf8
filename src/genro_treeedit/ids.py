# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Identifier generators for new nodes."""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdGenerator = Callable[[], str]


class UuidIdGenerator:
    """Random ids (uuid4 hex). The default generator."""

    def __call__(self) -> str:
        return uuid.uuid4().hex


class SequentialIdGenerator:
    """Increasing integer ids, optionally prefixed.

    Deterministic, which makes it handy in tests.

    Example:
        >>> gen = SequentialIdGenerator(start=10, prefix='n')
        >>> gen(), gen()
        ('n10', 'n11')
    """

    def __init__(self, start: int = 1, prefix: str = '') -> None:
        self._counter = itertools.count(start)
        self.prefix = prefix

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
