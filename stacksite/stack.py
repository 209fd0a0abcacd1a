"""Path-scoped metadata store.

Every scope is a mapping registered at a directory or file path. Looking a
path up merges the scopes of all its ancestors, root first, so the most
specific scope wins on scalar keys and nested mappings merge key by key.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from .errors import StackFrozenError
from .paths import is_within, normalize


def deep_merge(base: Mapping, override: Mapping) -> dict:
    """Return a new mapping with ``override`` applied on top of ``base``.

    Nested mappings present on both sides are merged recursively; any other
    value from ``override`` replaces the one in ``base``. Inputs are never
    mutated.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class MetadataStack:
    def __init__(self) -> None:
        self._scopes: dict[Path, dict] = {}
        self._frozen = False

    def add(self, path: os.PathLike | str, metadata: Mapping) -> None:
        # Replaces any scope already registered at the same path.
        if self._frozen:
            raise StackFrozenError(f"metadata stack is read-only, cannot add scope {path}")
        self._scopes[normalize(path)] = dict(metadata)

    def get(self, path: os.PathLike | str) -> dict:
        target = normalize(path)
        ancestors = [scope for scope in self._scopes if is_within(scope, target)]
        ancestors.sort(key=lambda scope: len(scope.parts))
        merged: dict = {}
        for scope in ancestors:
            merged = deep_merge(merged, self._scopes[scope])
        return merged

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def scopes(self) -> list[Path]:
        return sorted(self._scopes, key=lambda scope: (len(scope.parts), scope.as_posix()))

    def __len__(self) -> int:
        return len(self._scopes)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return normalize(path) in self._scopes
