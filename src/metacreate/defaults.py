"""
Templates that synthesize values for missing keys.

- auto_zero(): missing keys read as 0; nothing is stored
- auto_nested(): missing keys are filled with a new table on first read
"""

from __future__ import annotations

import typing as _typing

import metacreate.table as table_module
import metacreate.template as template


def _zero(table: table_module.Table, key: _typing.Any) -> int:  # noqa: ARG001
    return 0


AUTO_ZERO_TRAPS: dict[str, _typing.Any] = {table_module.TRAP_GETITEM: _zero}


def auto_zero() -> template.Template:
    """
    Build a template whose tables read missing keys as 0.

    The read does not store anything; the key stays absent until written.

    Example:
        >>> counts = auto_zero().create()
        >>> counts["x"]
        0
        >>> "x" in counts
        False
    """
    return template.Template(AUTO_ZERO_TRAPS)


def auto_nested(sub: template.Template | None = None) -> template.Template:
    """
    Build a template whose tables create a nested table on a missing read.

    The new table is stored at the key before being returned, so later reads
    of the same key return the same table.

    Args:
        sub: Template used to create the nested tables. Defaults to plain
             empty tables.

    Example:
        >>> grid = auto_nested(auto_zero()).create()
        >>> grid["row"]["col"]
        0
        >>> grid["row"] is grid["row"]
        True
    """
    if sub is not None and not isinstance(sub, template.Template):
        raise TypeError(f"sub must be a Template, got {type(sub).__name__}")

    def materialize(table: table_module.Table, key: _typing.Any) -> _typing.Any:
        value = sub.create() if sub is not None else table_module.Table()
        table[key] = value
        return value

    return template.Template({table_module.TRAP_GETITEM: materialize})
