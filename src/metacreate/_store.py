"""
Weak storage backend for tables with a retention mode.

WeakStore holds its keys and/or values through weak references so that the
garbage collector may reclaim them. Objects that cannot be weakly referenced
(ints, strs, tuples, ...) are held strongly; they are never reclaimed, which
matches how numbers and strings behave as keys of a weak table.

Example:
    >>> store = WeakStore(weak_keys=False, weak_values=True)
    >>> class Node: ...
    >>> node = Node()
    >>> store["a"] = node
    >>> "a" in store
    True
    >>> del node  # the entry disappears once the node is reclaimed
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing
import weakref as _weakref


class _KeyRef(_weakref.ref):
    """Weak reference to a key held by a WeakStore."""

    __slots__ = ()


class _ValueRef(_weakref.KeyedRef):
    """Weak reference to a value, remembering the stored key it belongs to."""

    __slots__ = ()


_DEAD = object()


class WeakStore(_abc.MutableMapping[_typing.Any, _typing.Any]):
    """
    Mutable mapping with weakly held keys, values, or both.

    Entries are dropped as soon as a weakly held referent is reclaimed.
    Iteration works on a snapshot, so reclamation during a loop never
    raises "dictionary changed size during iteration".

    Thread safety: NOT thread-safe.
    """

    __slots__ = ("_data", "_weak_keys", "_weak_values", "_on_key_dead", "_on_value_dead", "__weakref__")

    def __init__(
        self,
        weak_keys: bool,
        weak_values: bool,
        data: _abc.Mapping[_typing.Any, _typing.Any] | None = None,
    ) -> None:
        self._data: dict[_typing.Any, _typing.Any] = {}
        self._weak_keys = weak_keys
        self._weak_values = weak_values

        # Callbacks only hold the store weakly, so a dropped store is not
        # kept alive by the references it owns.
        self_ref = _weakref.ref(self)

        def on_key_dead(ref: _KeyRef) -> None:
            store = self_ref()
            if store is not None:
                store._data.pop(ref, None)

        def on_value_dead(ref: _ValueRef) -> None:
            store = self_ref()
            if store is not None and store._data.get(ref.key) is ref:
                del store._data[ref.key]

        self._on_key_dead = on_key_dead
        self._on_value_dead = on_value_dead

        if data is not None:
            self.update(data)

    @property
    def weak_keys(self) -> bool:
        """Whether weak-referenceable keys are held weakly."""
        return self._weak_keys

    @property
    def weak_values(self) -> bool:
        """Whether weak-referenceable values are held weakly."""
        return self._weak_values

    def _lookup_key(self, key: _typing.Any) -> _typing.Any:
        """Return the form a key takes inside _data, for lookups."""
        if self._weak_keys:
            try:
                return _KeyRef(key)
            except TypeError:
                pass
        return key

    def _stored_key(self, key: _typing.Any) -> _typing.Any:
        """Return the form a key takes inside _data, for insertion."""
        if self._weak_keys:
            try:
                return _KeyRef(key, self._on_key_dead)
            except TypeError:
                pass
        return key

    def _stored_value(self, value: _typing.Any, stored_key: _typing.Any) -> _typing.Any:
        if self._weak_values:
            try:
                return _ValueRef(value, self._on_value_dead, stored_key)
            except TypeError:
                pass
        return value

    @staticmethod
    def _unwrap_key(stored: _typing.Any) -> _typing.Any:
        if isinstance(stored, _KeyRef):
            key = stored()
            return _DEAD if key is None else key
        return stored

    @staticmethod
    def _unwrap_value(stored: _typing.Any) -> _typing.Any:
        if isinstance(stored, _ValueRef):
            value = stored()
            return _DEAD if value is None else value
        return stored

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        try:
            stored = self._data[self._lookup_key(key)]
        except KeyError:
            raise KeyError(key) from None
        value = self._unwrap_value(stored)
        if value is _DEAD:
            raise KeyError(key)
        return value

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        stored_key = self._stored_key(key)
        self._data[stored_key] = self._stored_value(value, stored_key)

    def __delitem__(self, key: _typing.Any) -> None:
        try:
            del self._data[self._lookup_key(key)]
        except KeyError:
            raise KeyError(key) from None

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        for stored_key, stored_value in list(self._data.items()):
            key = self._unwrap_key(stored_key)
            if key is _DEAD or self._unwrap_value(stored_value) is _DEAD:
                continue
            yield key

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        try:
            self[key]
        except KeyError:
            return False
        return True

    def __repr__(self) -> str:
        content = {key: self[key] for key in self}
        return (
            f"WeakStore({content!r}, weak_keys={self._weak_keys}, "
            f"weak_values={self._weak_values})"
        )
