"""
metacreate - declarative behavior templates for key-value tables.

Templates describe how a table reacts to reads and writes of absent keys,
size queries and iteration, optionally with seed data and weak retention.
Templates combine into new templates and create independent tables.

Example:
    >>> import metacreate
    >>> grid = metacreate.auto_nested(metacreate.auto_zero()).create()
    >>> grid["a"]["b"] += 1
    >>> grid["a"]["b"], grid["a"]["c"]
    (1, 0)
    >>> frozen = metacreate.read_only().create({"x": 1})
    >>> frozen["x"] = 2
    Traceback (most recent call last):
    ...
    metacreate.errors.ReadOnlyError: cannot write to read-only table
"""

from metacreate.compose import combine
from metacreate.config import Settings, get_settings, reload_settings
from metacreate.constructors import (
    finalize,
    get_constructor,
    list_constructors,
    register_constructor,
)
from metacreate.defaults import auto_nested, auto_zero
from metacreate.errors import (
    ConstructorError,
    InvalidModeError,
    MetacreateError,
    ProxyLookupError,
    ReadOnlyError,
    UnknownTrapError,
)
from metacreate.policies import read_only
from metacreate.proxy import make_intercepting
from metacreate.registry import is_proxy, real_of
from metacreate.table import (
    Table,
    as_table,
    bind_proxy,
    get_behavior,
    raw_contains,
    raw_get,
    raw_iter,
    raw_len,
    raw_set,
    set_behavior,
)
from metacreate.template import Template, make_from_seed, make_template
from metacreate.weak import weak_template

__all__ = [
    "ConstructorError",
    "InvalidModeError",
    "MetacreateError",
    "ProxyLookupError",
    "ReadOnlyError",
    "Settings",
    "Table",
    "Template",
    "UnknownTrapError",
    "as_table",
    "auto_nested",
    "auto_zero",
    "bind_proxy",
    "combine",
    "finalize",
    "get_behavior",
    "get_constructor",
    "get_settings",
    "is_proxy",
    "list_constructors",
    "make_from_seed",
    "make_intercepting",
    "make_template",
    "raw_contains",
    "raw_get",
    "raw_iter",
    "raw_len",
    "raw_set",
    "read_only",
    "real_of",
    "register_constructor",
    "reload_settings",
    "set_behavior",
    "weak_template",
]
