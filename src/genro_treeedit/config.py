# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any


@dataclass(frozen=True)
class TreeStoreConfig:
    """Options controlling a TreeStore.

    Attributes:
        raise_on_error: If True, edits that target a missing node, rejected
            moves and invalid load transitions raise TreeEditError
            subclasses. If False (default) they are silent no-ops.
        fetch_timeout: Seconds to wait for a lazy-load fetch before treating
            it as failed. None waits forever.
        max_id_attempts: How many times to draw a new id when the generator
            returns one already present in the forest.
    """

    raise_on_error: bool = False
    fetch_timeout: float | None = None
    max_id_attempts: int = 8

    def __post_init__(self) -> None:
        if self.fetch_timeout is not None and self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        if self.max_id_attempts < 1:
            raise ValueError(f"max_id_attempts must be at least 1, got {self.max_id_attempts}")

    def updated(self, **overrides: Any) -> TreeStoreConfig:
        """Return a copy with the given fields replaced.

        Raises:
            TypeError: If an override is not a config field.
        """
        names = {f.name for f in fields(self)}
        unknown = set(overrides) - names
        if unknown:
            raise TypeError(f"Unknown config option(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)
