"""
Weak retention templates and their fragment cache.

A weak template carries a single "mode" trap telling tables to hold their
keys ("k"), values ("v") or both ("kv") weakly. The fragments are memoized
per canonical mode, so every weak template of the same mode is built from
one shared spec.
"""

from __future__ import annotations

import logging as _logging
import threading as _threading
import types as _types
import typing as _typing

import metacreate.errors as errors
import metacreate.table as table_module
import metacreate.template as template

_logger = _logging.getLogger(__name__)

MODE_KEYS = "k"
MODE_VALUES = "v"
MODE_BOTH = "kv"

_CANONICAL_MODES: dict[str, str] = {
    "k": MODE_KEYS,
    "key": MODE_KEYS,
    "v": MODE_VALUES,
    "value": MODE_VALUES,
    "kv": MODE_BOTH,
    "vk": MODE_BOTH,
    "key-and-value": MODE_BOTH,
    "value-and-key": MODE_BOTH,
}


def canonical_mode(mode: str) -> str:
    """
    Normalize a mode spelling to "k", "v" or "kv".

    Raises:
        InvalidModeError: If mode is not a recognized spelling.
    """
    try:
        return _CANONICAL_MODES[mode]
    except (KeyError, TypeError):
        raise errors.InvalidModeError(
            f"invalid weak mode {mode!r}; expected one of {', '.join(sorted(_CANONICAL_MODES))}"
        ) from None


class WeakModeCache:
    """
    Memoized mode fragments, one per canonical mode.

    Populated lazily and never evicted. Population is guarded by a lock;
    fragments are read-only views and are never modified once stored.
    """

    def __init__(self) -> None:
        self._fragments: dict[str, _types.MappingProxyType[str, _typing.Any]] = {}
        self._lock = _threading.Lock()

    def fragment(self, mode: str) -> _types.MappingProxyType[str, _typing.Any]:
        """Return the shared spec fragment for a mode spelling."""
        token = canonical_mode(mode)
        with self._lock:
            fragment = self._fragments.get(token)
            if fragment is None:
                fragment = _types.MappingProxyType({table_module.TRAP_MODE: token})
                self._fragments[token] = fragment
                _logger.debug("Cached weak mode fragment %r", token)
        return fragment

    def __contains__(self, token: object) -> bool:
        return token in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)


WEAK_MODES = WeakModeCache()
"""The cache shared by every weak_template() call."""


def weak_template(mode: str) -> template.Template:
    """
    Build a template whose tables hold keys and/or values weakly.

    Args:
        mode: "k"/"key", "v"/"value", or any of "kv", "vk", "key-and-value",
              "value-and-key" for both.

    Raises:
        InvalidModeError: If mode is not a recognized spelling.
    """
    return template.Template(WEAK_MODES.fragment(mode))
