"""
Constructor registry and custom constructors.

register_constructor() turns a factory into a template constructor: whatever
the factory returns is finalized into a Template. Constructors registered
under a name can be looked up later, which is how the built-in constructors
and their short aliases are exposed.

Example:
    >>> @register_constructor
    ... def defaulting(value):
    ...     return {"spec": {"getitem": lambda table, key: value}}
    >>> defaulting("n/a").create()["anything"]
    'n/a'
"""

from __future__ import annotations

import collections.abc as _abc
import functools as _functools
import logging as _logging
import typing as _typing

import metacreate.compose as compose
import metacreate.defaults as defaults
import metacreate.errors as errors
import metacreate.policies as policies
import metacreate.proxy as proxy
import metacreate.template as template
import metacreate.weak as weak

_logger = _logging.getLogger(__name__)

ConstructorFn: _typing.TypeAlias = _typing.Callable[..., template.Template]

_TEMPLATE_FIELDS = frozenset({"spec", "seed", "intercepts"})


def finalize(result: _typing.Any) -> template.Template:
    """
    Turn a factory result into a Template.

    A Template is returned as-is. A mapping must provide "spec" and may
    provide "seed" and "intercepts"; it is passed to make_template().

    Raises:
        ConstructorError: If result is neither a Template nor a valid mapping.
    """
    if isinstance(result, template.Template):
        return result

    if isinstance(result, _abc.Mapping):
        unknown = sorted(str(key) for key in result if key not in _TEMPLATE_FIELDS)
        if unknown:
            raise errors.ConstructorError(
                f"constructor result has unknown field(s): {', '.join(unknown)}"
            )
        if "spec" not in result:
            raise errors.ConstructorError("constructor result is missing 'spec'")
        return template.make_template(
            result["spec"],
            result.get("seed"),
            bool(result.get("intercepts", False)),
        )

    raise errors.ConstructorError(
        f"constructor returned {type(result).__name__}, expected a Template or a mapping"
    )


class ConstructorRegistry:
    """Named template constructors, including aliases."""

    def __init__(self) -> None:
        self._constructors: dict[str, ConstructorFn] = {}

    def register(
        self,
        name: str,
        constructor: ConstructorFn,
        aliases: _abc.Iterable[str] = (),
    ) -> None:
        """
        Register a constructor under a name and its aliases.

        Raises:
            ConstructorError: If any of the names is already taken.
        """
        names = [name, *aliases]
        taken = [n for n in names if n in self._constructors]
        if taken:
            raise errors.ConstructorError(
                f"constructor name(s) already registered: {', '.join(taken)}"
            )
        if len(set(names)) != len(names):
            raise errors.ConstructorError(f"duplicate names in {names!r}")

        for n in names:
            self._constructors[n] = constructor
        _logger.debug("Registered constructor %r (aliases: %s)", name, list(aliases))

    def get(self, name: str) -> ConstructorFn | None:
        """Get a constructor by name or alias."""
        return self._constructors.get(name)

    def list_names(self) -> list[str]:
        """List all registered names and aliases, sorted."""
        return sorted(self._constructors)

    def __contains__(self, name: object) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)


CONSTRUCTORS = ConstructorRegistry()


def register_constructor(
    factory: _typing.Callable[..., _typing.Any] | None = None,
    *,
    name: str | None = None,
    aliases: _abc.Iterable[str] = (),
) -> _typing.Any:
    """
    Wrap a factory so its result is finalized into a Template.

    Usable directly or as a decorator, with or without arguments:

        ranked = register_constructor(make_ranked)
        @register_constructor(name="ranked", aliases=("r",))
        def make_ranked(...): ...

    Args:
        factory: Callable returning a Template or a {"spec", "seed",
                 "intercepts"} mapping.
        name: Register the constructor under this name when given.
        aliases: Extra names for the constructor; requires name.

    Returns:
        The wrapped constructor (or a decorator producing it).

    Raises:
        ConstructorError: If aliases are given without a name, or a name is
                          already registered.
    """
    aliases = tuple(aliases)
    if aliases and name is None:
        raise errors.ConstructorError("aliases require a constructor name")

    def decorate(func: _typing.Callable[..., _typing.Any]) -> ConstructorFn:
        @_functools.wraps(func)
        def constructor(*args: _typing.Any, **kwargs: _typing.Any) -> template.Template:
            return finalize(func(*args, **kwargs))

        if name is not None:
            CONSTRUCTORS.register(name, constructor, aliases)
        return constructor

    if factory is None:
        return decorate
    return decorate(factory)


def get_constructor(name: str) -> ConstructorFn | None:
    """Get a registered constructor by name or alias."""
    return CONSTRUCTORS.get(name)


def list_constructors() -> list[str]:
    """List registered constructor names and aliases."""
    return CONSTRUCTORS.list_names()


def _register_builtins() -> None:
    CONSTRUCTORS.register("template", template.make_template)
    CONSTRUCTORS.register("base", template.make_from_seed, aliases=("b",))
    CONSTRUCTORS.register("combined", compose.combine, aliases=("c",))
    CONSTRUCTORS.register("weak", weak.weak_template, aliases=("w",))
    CONSTRUCTORS.register("auto_zero", defaults.auto_zero, aliases=("a0",))
    CONSTRUCTORS.register("auto_nested", defaults.auto_nested, aliases=("a2d",))
    CONSTRUCTORS.register("intercepting", proxy.make_intercepting, aliases=("proxied",))
    CONSTRUCTORS.register("read_only", policies.read_only, aliases=("ro",))


_register_builtins()
