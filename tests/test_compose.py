"""
Tests for combine(), the template composition algebra.
"""

import pytest as _pytest

import metacreate.compose as compose
import metacreate.proxy as proxy
import metacreate.template as template


def _handler(name: str):
    def handler(*args: object) -> str:
        return name

    handler.__name__ = name
    return handler


A = _handler("a")
B = _handler("b")
C = _handler("c")


class TestCombine:
    """Tests for spec merging and seed selection."""

    def test_no_arguments(self) -> None:
        """combine() yields an empty template."""
        result = compose.combine()

        assert dict(result.spec) == {}
        assert result.seed is None
        assert result.intercepts is False

    def test_later_template_wins(self) -> None:
        """For shared trap names the later template's handler is used."""
        t1 = template.make_template({"getitem": A, "len": A})
        t2 = template.make_template({"getitem": B})

        result = compose.combine(t1, t2)

        assert result.spec["getitem"] is B
        assert result.spec["len"] is A

    def test_not_commutative(self) -> None:
        """Swapping conflicting templates changes the winner."""
        t1 = template.make_template({"getitem": A})
        t2 = template.make_template({"getitem": B})

        assert compose.combine(t1, t2).spec["getitem"] is B
        assert compose.combine(t2, t1).spec["getitem"] is A

    def test_associative(self) -> None:
        """Grouping does not change the resolved spec or seed."""
        t1 = template.make_template({"getitem": A, "len": A}, {"one": 1})
        t2 = template.make_template({"len": B, "iter": B})
        t3 = template.make_template({"iter": C}, {"three": 3})

        left = compose.combine(compose.combine(t1, t2), t3)
        right = compose.combine(t1, compose.combine(t2, t3))
        flat = compose.combine(t1, t2, t3)

        assert left == right == flat

    def test_last_present_seed_wins(self) -> None:
        """A later template without a seed keeps the earlier seed."""
        seeded = template.make_from_seed({"a": 1})
        later = template.make_from_seed({"b": 2})
        unseeded = template.make_template({"getitem": A})

        assert compose.combine(seeded, unseeded).seed == {"a": 1}
        assert compose.combine(seeded, later, unseeded).seed == {"b": 2}

    def test_inputs_are_unchanged(self) -> None:
        """Combining never modifies the input templates."""
        t1 = template.make_template({"getitem": A})
        t2 = template.make_template({"getitem": B})

        compose.combine(t1, t2)

        assert t1.spec["getitem"] is A
        assert t2.spec["getitem"] is B

    def test_intercepts_is_not_propagated(self) -> None:
        """The result of a generic combine never intercepts."""
        intercepting = proxy.make_intercepting({"len": lambda real, handle: 0})

        assert compose.combine(intercepting).intercepts is False

    def test_result_does_not_alias_inputs(self) -> None:
        """The combined seed is a copy of the input seed."""
        seeded = template.make_from_seed({"items": [1]})
        combined = compose.combine(seeded)

        combined.create()["items"].append(2)

        assert seeded.seed == {"items": [1]}
        assert combined.seed == {"items": [1]}

    def test_rejects_non_templates(self) -> None:
        """Only Templates can be combined."""
        with _pytest.raises(TypeError):
            compose.combine(template.make_template(), {"getitem": A})  # type: ignore[arg-type]
