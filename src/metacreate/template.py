"""
Template: a reusable behavior spec with an optional seed.

A Template bundles three things:
- spec: trap name -> handler, attached to every table it creates
- seed: nested data copied into every table it creates
- intercepts: whether created tables are proxy handles (see metacreate.proxy)

Templates are immutable. Specs and seeds are deep-copied on the way in, and
each create() call deep-copies the seed again, so tables never share
mutable state with the template or with each other.

Example:
    >>> counts = make_template({"getitem": lambda table, key: 0})
    >>> table = counts.create()
    >>> table["apples"] += 1
    >>> table["apples"], table["pears"]
    (1, 0)
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import types as _types
import typing as _typing

import metacreate.config as config
import metacreate.errors as errors
import metacreate.table as table_module


def _check_trap_names(spec: _abc.Mapping[str, _typing.Any]) -> None:
    """Reject unrecognized trap names when strict mode is configured."""
    settings = config.get_settings()
    if not settings.strict_traps:
        return

    allowed = table_module.TRAPS | set(settings.extra_traps)
    unknown = sorted(str(name) for name in spec if name not in allowed)
    if unknown:
        raise errors.UnknownTrapError(f"unknown trap name(s): {', '.join(unknown)}")


class Template:
    """
    Immutable behavior template.

    Use make_template(), make_from_seed() or the other constructors rather
    than instantiating this class directly.
    """

    __slots__ = ("_spec", "_seed", "_intercepts")

    _spec: dict[str, _typing.Any]
    _seed: _typing.Any
    _intercepts: bool

    def __init__(
        self,
        spec: _abc.Mapping[str, _typing.Any] | None = None,
        seed: _typing.Any = None,
        intercepts: bool = False,
    ) -> None:
        if spec is None:
            spec = {}
        if not isinstance(spec, _abc.Mapping):
            raise TypeError(f"spec must be a mapping, got {type(spec).__name__}")
        _check_trap_names(spec)

        object.__setattr__(self, "_spec", _copy.deepcopy(dict(spec)))
        object.__setattr__(self, "_seed", _copy.deepcopy(seed))
        object.__setattr__(self, "_intercepts", bool(intercepts))

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> Template:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> Template:
        return self

    @property
    def spec(self) -> _types.MappingProxyType[str, _typing.Any]:
        """Read-only view of the behavior spec."""
        return _types.MappingProxyType(self._spec)

    @property
    def seed(self) -> _typing.Any:
        """A fresh copy of the seed, or None when the template has none."""
        return _copy.deepcopy(self._seed)

    @property
    def intercepts(self) -> bool:
        """Whether created tables are proxy handles."""
        return self._intercepts

    def create(self, base: _typing.Any = None) -> table_module.Table:
        """
        Create a table with this template's behavior.

        Args:
            base: Existing data to decorate. A Table keeps its identity and
                  entries; a mapping or sequence is wrapped into a new Table
                  holding the same values. When omitted, the table starts as
                  a deep copy of the seed, or empty.

        Returns:
            The new table, or its proxy handle when the template intercepts.

        Raises:
            TypeError: If base (or the seed) is not a mapping or sequence.
        """
        if base is not None:
            working = table_module.as_table(base)
        elif self._seed is not None:
            working = table_module.as_table(_copy.deepcopy(self._seed))
        else:
            working = table_module.Table()

        if not self._intercepts:
            return table_module.set_behavior(working, self._spec)

        proxy = table_module.Table()
        table_module.bind_proxy(proxy, working)
        return table_module.set_behavior(proxy, self._spec)

    def combine_with(self, *others: Template) -> Template:
        """Combine this template with others; see metacreate.compose.combine."""
        import metacreate.compose as compose

        return compose.combine(self, *others)

    def __or__(self, other: object) -> Template:
        if not isinstance(other, Template):
            return NotImplemented
        return self.combine_with(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return (
            self._spec == other._spec
            and self._seed == other._seed
            and self._intercepts == other._intercepts
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Template(spec={sorted(self._spec, key=str)!r}, "
            f"seed={self._seed!r}, intercepts={self._intercepts})"
        )


def make_template(
    spec: _abc.Mapping[str, _typing.Any] | None = None,
    seed: _typing.Any = None,
    intercepts: bool = False,
) -> Template:
    """
    Build a template from a behavior spec and an optional seed.

    Args:
        spec: Trap name -> handler (or sentinel value). Deep-copied.
        seed: Initial data for created tables. Deep-copied.
        intercepts: Create proxy handles instead of plain tables. Handlers are
                    NOT rewritten; use metacreate.proxy.make_intercepting for
                    handlers that need the real container.

    Raises:
        TypeError: If spec is not a mapping.
        UnknownTrapError: If strict trap checking is enabled and spec names
                          an unrecognized trap.
    """
    return Template(spec, seed, intercepts)


def make_from_seed(seed: _typing.Any) -> Template:
    """Build a template with an empty spec and the given seed."""
    return Template({}, seed)
