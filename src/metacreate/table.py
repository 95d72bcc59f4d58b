"""
Table: the key-value container that behavior specs are attached to.

A Table stores its own entries and consults an attached behavior spec
(a dict of trap name -> handler) for the operations it cannot answer from
its own storage:

- "getitem":  read of an absent key, called as trap(table, key)
- "setitem":  write of an absent key, called as trap(table, key, value)
- "delitem":  delete of an absent key, called as trap(table, key)
- "len":      size query, called as trap(table)
- "iter":     key enumeration, called as trap(table) -> iterator of keys
- "contains": membership test, called as trap(table, key) -> bool
- "indexed":  ordered index enumeration, trap(table) -> iterator of (i, value)
- "mode":     weak retention, "k", "v" or "kv"
- "call":     table(*args), called as trap(table, *args, **kwargs)
- "repr":     repr(table), called as trap(table)

A "getitem", "setitem" or "delitem" entry may also be a mapping (a Table
included), in which case reads fall back to it and writes and deletes are
redirected into it.

Example:
    >>> table = Table({"a": 1})
    >>> set_behavior(table, {"getitem": lambda t, key: 0})
    Table({'a': 1})
    >>> table["a"], table["missing"]
    (1, 0)
    >>> "missing" in table
    False
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import logging as _logging
import reprlib as _reprlib
import types as _types
import typing as _typing

import metacreate._store as _store
import metacreate.registry as registry

_logger = _logging.getLogger(__name__)

TRAP_GETITEM = "getitem"
TRAP_SETITEM = "setitem"
TRAP_DELITEM = "delitem"
TRAP_LEN = "len"
TRAP_ITER = "iter"
TRAP_CONTAINS = "contains"
TRAP_INDEXED = "indexed"
TRAP_MODE = "mode"
TRAP_CALL = "call"
TRAP_REPR = "repr"

TRAPS: frozenset[str] = frozenset(
    {
        TRAP_GETITEM,
        TRAP_SETITEM,
        TRAP_DELITEM,
        TRAP_LEN,
        TRAP_ITER,
        TRAP_CONTAINS,
        TRAP_INDEXED,
        TRAP_MODE,
        TRAP_CALL,
        TRAP_REPR,
    }
)
"""Trap names a Table acts on. Other names are kept in specs but ignored."""

Spec: _typing.TypeAlias = _abc.Mapping[str, _typing.Any]
Storage: _typing.TypeAlias = "dict[_typing.Any, _typing.Any] | _store.WeakStore"


def _weak_flags(spec: Spec | None) -> tuple[bool, bool]:
    """Return (weak_keys, weak_values) requested by a spec's mode entry."""
    if spec is None:
        return False, False
    mode = spec.get(TRAP_MODE)
    if not isinstance(mode, str):
        return False, False
    return "k" in mode, "v" in mode


def _new_storage(flags: tuple[bool, bool]) -> Storage:
    if flags == (False, False):
        return {}
    return _store.WeakStore(*flags)


def _storage_flags(storage: Storage) -> tuple[bool, bool]:
    if isinstance(storage, _store.WeakStore):
        return storage.weak_keys, storage.weak_values
    return False, False


class Table(_abc.MutableMapping[_typing.Any, _typing.Any]):
    """
    Mutable mapping whose behavior is driven by an attached spec.

    Without a spec a Table behaves like a dict. Entries already stored are
    read and overwritten directly; traps only see absent keys, so a table
    with no entries of its own (a proxy handle) routes every access through
    its traps.

    Note:
        Reads answered by a "getitem" trap do not change membership:
        ``key in table`` and iteration reflect stored entries (or whatever
        a "contains" or "iter" trap reports).
    """

    __slots__ = ("_store", "_behavior", "_target", "__weakref__")

    def __init__(
        self,
        data: _abc.Mapping[_typing.Any, _typing.Any]
        | _abc.Iterable[tuple[_typing.Any, _typing.Any]]
        | None = None,
        /,
        **kwargs: _typing.Any,
    ) -> None:
        self._behavior: Spec | None = None
        self._target: _typing.Any = None
        self._store: Storage = {}
        if data is not None:
            self._store.update(data)
        self._store.update(kwargs)

    @classmethod
    def from_sequence(cls, values: _abc.Iterable[_typing.Any]) -> Table:
        """
        Build a table keyed by consecutive indexes starting at 0.

        Example:
            >>> Table.from_sequence(["a", "b"])
            Table({0: 'a', 1: 'b'})
        """
        return cls(enumerate(values))

    def _trap(self, name: str) -> _typing.Any:
        if self._behavior is None:
            return None
        return self._behavior.get(name)

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        try:
            return self._store[key]
        except KeyError:
            pass

        trap = self._trap(TRAP_GETITEM)
        if trap is None:
            raise KeyError(key)
        # Tables are callable, so mappings are checked first.
        if isinstance(trap, _abc.Mapping):
            return trap[key]
        return trap(self, key)

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        if key in self._store:
            self._store[key] = value
            return

        trap = self._trap(TRAP_SETITEM)
        if trap is None:
            self._store[key] = value
        elif isinstance(trap, _abc.MutableMapping):
            trap[key] = value
        else:
            trap(self, key, value)

    def __delitem__(self, key: _typing.Any) -> None:
        if key in self._store:
            del self._store[key]
            return

        trap = self._trap(TRAP_DELITEM)
        if trap is None:
            raise KeyError(key)
        if isinstance(trap, _abc.MutableMapping):
            del trap[key]
        else:
            trap(self, key)

    def __len__(self) -> int:
        trap = self._trap(TRAP_LEN)
        if callable(trap):
            return trap(self)
        return len(self._store)

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        trap = self._trap(TRAP_ITER)
        if callable(trap):
            return iter(trap(self))
        return iter(list(self._store))

    def __contains__(self, key: object) -> bool:
        trap = self._trap(TRAP_CONTAINS)
        if callable(trap):
            return bool(trap(self, key))
        if self._trap(TRAP_ITER) is None:
            return key in self._store
        return any(candidate == key for candidate in self)

    def __call__(self, *args: _typing.Any, **kwargs: _typing.Any) -> _typing.Any:
        trap = self._trap(TRAP_CALL)
        if trap is None:
            raise TypeError(f"'{type(self).__name__}' object is not callable")
        return trap(self, *args, **kwargs)

    @_reprlib.recursive_repr()
    def __repr__(self) -> str:
        trap = self._trap(TRAP_REPR)
        if callable(trap):
            return str(trap(self))
        return f"{type(self).__name__}({dict(self._store.items())!r})"

    def indexed(self) -> _typing.Iterator[tuple[int, _typing.Any]]:
        """
        Iterate over (index, value) pairs in index order.

        Uses the "indexed" trap when one is attached. Otherwise walks the
        stored entries at 0, 1, 2, ... and stops at the first absent index.
        """
        trap = self._trap(TRAP_INDEXED)
        if callable(trap):
            return iter(trap(self))
        return self._raw_indexed()

    def _raw_indexed(self) -> _typing.Iterator[tuple[int, _typing.Any]]:
        index = 0
        while index in self._store:
            yield index, self._store[index]
            index += 1

    def raw_items(self) -> list[tuple[_typing.Any, _typing.Any]]:
        """Return a snapshot of the stored entries, bypassing all traps."""
        return list(self._store.items())

    def copy(self) -> Table:
        """
        Return a shallow copy sharing this table's behavior spec.

        A copied proxy handle shares the original's real container.
        """
        new = type(self).__new__(type(self))
        new._behavior = self._behavior
        new._target = None
        new._store = _new_storage(_storage_flags(self._store))
        new._store.update(self._store.items())

        real = registry.PROXIES.lookup(self)
        if real is not None:
            bind_proxy(new, real)
        return new

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> Table:
        new = type(self).__new__(type(self))
        memo[id(self)] = new
        new._behavior = self._behavior
        new._target = None
        new._store = _new_storage(_storage_flags(self._store))
        for key, value in self._store.items():
            new._store[_copy.deepcopy(key, memo)] = _copy.deepcopy(value, memo)

        # A copied proxy handle needs its own real container, or its traps
        # would have nothing to resolve.
        real = registry.PROXIES.lookup(self)
        if real is not None:
            bind_proxy(new, _copy.deepcopy(real, memo))
        return new


def bind_proxy(handle: Table, real: _typing.Any) -> Table:
    """
    Make handle a proxy for real and return the handle.

    The handle keeps real alive; the registry only refers to it weakly, so a
    real container holding its own handle is reclaimed with it.
    """
    handle._target = real
    registry.PROXIES.register(handle, real)
    return handle


def as_table(value: _typing.Any) -> Table:
    """
    Return value as a Table without copying its entries.

    A Table is returned unchanged. A mapping is wrapped into a new Table with
    the same keys and values; a list or other non-string sequence becomes a
    Table keyed by index.

    Raises:
        TypeError: If value is neither a mapping nor a sequence.
    """
    if isinstance(value, Table):
        return value
    if isinstance(value, _abc.Mapping):
        return Table(value)
    if isinstance(value, _abc.Sequence) and not isinstance(value, (str, bytes)):
        return Table.from_sequence(value)
    raise TypeError(
        f"cannot build a table from {type(value).__name__}; expected a mapping or sequence"
    )


def set_behavior(table: Table, spec: Spec | None) -> Table:
    """
    Attach a behavior spec to a table and return the table.

    The spec is held by reference. Passing None detaches any behavior. When
    the new spec asks for a different weak retention mode, the table's entries
    are moved to matching storage.

    Raises:
        TypeError: If table is not a Table or spec is not a mapping.
    """
    if not isinstance(table, Table):
        raise TypeError(f"expected a Table, got {type(table).__name__}")
    if spec is not None and not isinstance(spec, _abc.Mapping):
        raise TypeError(f"behavior spec must be a mapping, got {type(spec).__name__}")

    flags = _weak_flags(spec)
    if _storage_flags(table._store) != flags:
        _logger.debug("Moving table %#x to storage with weak flags %s", id(table), flags)
        storage = _new_storage(flags)
        storage.update(table._store.items())
        table._store = storage

    table._behavior = spec
    return table


def get_behavior(table: Table) -> _types.MappingProxyType[str, _typing.Any] | None:
    """Return a read-only view of the table's behavior spec, or None."""
    if table._behavior is None:
        return None
    return _types.MappingProxyType(dict(table._behavior))


def raw_get(table: Table, key: _typing.Any, default: _typing.Any = None) -> _typing.Any:
    """Read a stored entry without consulting traps."""
    try:
        return table._store[key]
    except KeyError:
        return default


def raw_set(table: Table, key: _typing.Any, value: _typing.Any) -> None:
    """Store an entry without consulting traps."""
    table._store[key] = value


def raw_contains(table: Table, key: _typing.Any) -> bool:
    """Check stored membership without consulting traps."""
    return key in table._store


def raw_len(table: Table) -> int:
    """Count stored entries without consulting traps."""
    return len(table._store)


def raw_iter(table: Table) -> _typing.Iterator[_typing.Any]:
    """Iterate over a snapshot of stored keys without consulting traps."""
    return iter(list(table._store))
