"""
Intercepting templates.

A plain table only consults its traps for absent keys, so it cannot guard
reads and writes of entries it already holds. An intercepting template
creates two tables instead: the real table holding the data, and an empty
proxy handle that is returned to the caller. Because the handle owns no
entries, every access on it reaches its traps, and each trap receives the
real table as its first argument:

    handler(real, proxy, *args)

The link between handle and real table lives in metacreate.registry.
"""

from __future__ import annotations

import collections.abc as _abc
import functools as _functools
import typing as _typing

import metacreate.registry as registry
import metacreate.template as template

Handler: _typing.TypeAlias = _typing.Callable[..., _typing.Any]


def intercept(handler: Handler) -> Handler:
    """
    Wrap a handler so it is called with the real table ahead of the proxy.

    Raises (from the wrapper):
        ProxyLookupError: If the table the trap fires on is not a registered
                          proxy handle.
    """

    @_functools.wraps(handler)
    def trap(proxy: _typing.Any, *args: _typing.Any, **kwargs: _typing.Any) -> _typing.Any:
        real = registry.PROXIES.resolve(proxy)
        return handler(real, proxy, *args, **kwargs)

    return trap


def _is_handler(value: _typing.Any) -> bool:
    # Tables are callable but act as fallback mappings.
    return callable(value) and not isinstance(value, _abc.Mapping)


def make_intercepting(
    spec: _abc.Mapping[str, _typing.Any],
    seed: _typing.Any = None,
) -> template.Template:
    """
    Build an intercepting template from handlers written against the real table.

    Callable entries are wrapped with intercept(). Other entries, such as a
    "mode" string or a fallback mapping, are kept as they are.

    Example:
        >>> logged = make_intercepting({
        ...     "getitem": lambda real, proxy, key: real[key],
        ...     "setitem": lambda real, proxy, key, value: real.update({key: value}),
        ... })
        >>> handle = logged.create({"a": 1})
        >>> handle["a"]
        1
    """
    if not isinstance(spec, _abc.Mapping):
        raise TypeError(f"spec must be a mapping, got {type(spec).__name__}")

    wrapped = {
        name: intercept(value) if _is_handler(value) else value
        for name, value in spec.items()
    }
    return template.Template(wrapped, seed, intercepts=True)
