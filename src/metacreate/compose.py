"""
Composition of templates.

combine() merges any number of templates left to right:
- spec: union of all specs; for a trap named by several templates the
  later template wins
- seed: the last seed that is present; a later template without a seed
  does not clear an earlier one
- intercepts: always False on the result

Example:
    >>> zero = make_template({"getitem": lambda t, k: 0})
    >>> seeded = make_from_seed({"a": 1})
    >>> counts = combine(zero, seeded)
    >>> table = counts.create()
    >>> table["a"], table["b"]
    (1, 0)

Order matters: combine(a, b) and combine(b, a) differ whenever a and b
define the same trap.
"""

from __future__ import annotations

import typing as _typing

import metacreate.template as template


def combine(*templates: template.Template) -> template.Template:
    """
    Merge templates into a new one; later templates override earlier ones.

    Raises:
        TypeError: If an argument is not a Template.
    """
    spec: dict[str, _typing.Any] = {}
    seed: _typing.Any = None

    for item in templates:
        if not isinstance(item, template.Template):
            raise TypeError(f"can only combine Templates, got {type(item).__name__}")
        spec.update(item._spec)
        if item._seed is not None:
            seed = item._seed

    return template.Template(spec, seed)
