"""
Ready-made access policies built on intercepting templates.
"""

from __future__ import annotations

import typing as _typing

import metacreate.errors as errors
import metacreate.proxy as proxy
import metacreate.table as table_module
import metacreate.template as template


def _read(real: _typing.Any, _proxy: _typing.Any, key: _typing.Any) -> _typing.Any:
    return real[key]


def _reject_write(
    real: _typing.Any,  # noqa: ARG001
    _proxy: _typing.Any,
    key: _typing.Any,
    value: _typing.Any,  # noqa: ARG001
) -> None:
    raise errors.ReadOnlyError(key)


def _reject_delete(
    real: _typing.Any,  # noqa: ARG001
    _proxy: _typing.Any,
    key: _typing.Any,
) -> None:
    raise errors.ReadOnlyError(key)


def _has(real: _typing.Any, _proxy: _typing.Any, key: _typing.Any) -> bool:
    return key in real


def _size(real: _typing.Any, _proxy: _typing.Any) -> int:
    return len(real)


def _iterate_keys(real: _typing.Any, _proxy: _typing.Any) -> _typing.Iterator[_typing.Any]:
    for key in real:
        yield key


def _iterate_indexed(
    real: _typing.Any, _proxy: _typing.Any
) -> _typing.Iterator[tuple[int, _typing.Any]]:
    index = 0
    while index in real:
        yield index, real[index]
        index += 1


READ_ONLY_TRAPS: dict[str, _typing.Callable[..., _typing.Any]] = {
    table_module.TRAP_GETITEM: _read,
    table_module.TRAP_SETITEM: _reject_write,
    table_module.TRAP_DELITEM: _reject_delete,
    table_module.TRAP_CONTAINS: _has,
    table_module.TRAP_LEN: _size,
    table_module.TRAP_ITER: _iterate_keys,
    table_module.TRAP_INDEXED: _iterate_indexed,
}


def read_only() -> template.Template:
    """
    Build a template whose tables can be read and iterated but not written.

    Writing or deleting any key raises ReadOnlyError and leaves the data
    unchanged.
    Each iteration starts a fresh, lazy pass over the current entries.

    Example:
        >>> frozen = read_only().create([10, 20, 30])
        >>> frozen[1], len(frozen), list(frozen)
        (20, 3, [0, 1, 2])
        >>> frozen[0] = 99
        Traceback (most recent call last):
        ...
        metacreate.errors.ReadOnlyError: cannot write to read-only table
    """
    return proxy.make_intercepting(READ_ONLY_TRAPS)
