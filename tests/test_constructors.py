"""
Tests for custom constructors and the constructor registry.
"""

import pytest as _pytest

import metacreate.constructors as constructors
import metacreate.errors as errors
import metacreate.registry as registry
import metacreate.template as template


class TestFinalize:
    """Tests for finalize()."""

    def test_template_passes_through(self) -> None:
        """A Template is returned unchanged."""
        tmpl = template.make_template()

        assert constructors.finalize(tmpl) is tmpl

    def test_mapping_becomes_template(self) -> None:
        """A spec/seed/intercepts mapping is built into a Template."""
        result = constructors.finalize({"spec": {"len": None}, "seed": {"a": 1}})

        assert isinstance(result, template.Template)
        assert set(result.spec) == {"len"}
        assert result.seed == {"a": 1}
        assert result.intercepts is False

    def test_mapping_with_intercepts(self) -> None:
        """The intercepts flag is honoured."""
        result = constructors.finalize({"spec": {}, "intercepts": True})

        assert registry.is_proxy(result.create())

    def test_missing_spec(self) -> None:
        """A mapping without spec is rejected."""
        with _pytest.raises(errors.ConstructorError, match="spec"):
            constructors.finalize({"seed": {}})

    def test_unknown_field(self) -> None:
        """Unexpected fields are rejected."""
        with _pytest.raises(errors.ConstructorError, match="colour"):
            constructors.finalize({"spec": {}, "colour": "red"})

    def test_other_types(self) -> None:
        """Anything else is rejected."""
        with _pytest.raises(errors.ConstructorError, match="list"):
            constructors.finalize([])


class TestRegisterConstructor:
    """Tests for register_constructor()."""

    def test_wraps_factory(self) -> None:
        """The wrapped factory returns a Template."""

        def defaulting(value: object) -> dict:
            return {"spec": {"getitem": lambda table, key: value}}

        make_defaulting = constructors.register_constructor(defaulting)

        tmpl = make_defaulting("n/a")

        assert isinstance(tmpl, template.Template)
        assert tmpl.create()["missing"] == "n/a"
        assert make_defaulting.__name__ == "defaulting"

    def test_as_decorator_with_name(self, monkeypatch) -> None:
        """Named constructors can be looked up by name and alias."""
        monkeypatch.setattr(constructors, "CONSTRUCTORS", constructors.ConstructorRegistry())

        @constructors.register_constructor(name="seeded", aliases=("s",))
        def seeded(**values: object) -> template.Template:
            return template.make_from_seed(values)

        assert constructors.get_constructor("seeded") is seeded
        assert constructors.get_constructor("s") is seeded
        assert constructors.get_constructor("s")(a=1).seed == {"a": 1}
        assert constructors.list_constructors() == ["s", "seeded"]

    def test_bad_result_raises_on_call(self) -> None:
        """Finalization errors surface when the constructor is called."""
        broken = constructors.register_constructor(lambda: 42)

        with _pytest.raises(errors.ConstructorError):
            broken()

    def test_aliases_require_name(self) -> None:
        """Aliases without a name are rejected."""
        with _pytest.raises(errors.ConstructorError):
            constructors.register_constructor(lambda: {}, aliases=("x",))

    def test_duplicate_name(self, monkeypatch) -> None:
        """A name can only be registered once."""
        monkeypatch.setattr(constructors, "CONSTRUCTORS", constructors.ConstructorRegistry())
        constructors.register_constructor(lambda: {"spec": {}}, name="once")

        with _pytest.raises(errors.ConstructorError, match="once"):
            constructors.register_constructor(lambda: {"spec": {}}, name="once")


class TestConstructorRegistry:
    """Tests for ConstructorRegistry."""

    def test_register_is_all_or_nothing(self) -> None:
        """A clash on an alias registers none of the names."""
        reg = constructors.ConstructorRegistry()
        reg.register("taken", template.make_template)

        with _pytest.raises(errors.ConstructorError):
            reg.register("fresh", template.make_template, aliases=("taken",))

        assert "fresh" not in reg
        assert len(reg) == 1

    def test_duplicate_alias_in_one_call(self) -> None:
        """The same name twice in one registration is rejected."""
        reg = constructors.ConstructorRegistry()

        with _pytest.raises(errors.ConstructorError):
            reg.register("x", template.make_template, aliases=("x",))

    def test_get_unknown(self) -> None:
        """get() returns None for unknown names."""
        assert constructors.ConstructorRegistry().get("nope") is None


class TestBuiltins:
    """The built-in constructors are registered with their aliases."""

    @_pytest.mark.parametrize(
        ("name", "alias"),
        [
            ("base", "b"),
            ("combined", "c"),
            ("weak", "w"),
            ("auto_zero", "a0"),
            ("auto_nested", "a2d"),
            ("intercepting", "proxied"),
            ("read_only", "ro"),
        ],
    )
    def test_alias_resolves_to_same_constructor(self, name: str, alias: str) -> None:
        """Each alias maps to its constructor."""
        assert constructors.get_constructor(name) is not None
        assert constructors.get_constructor(alias) is constructors.get_constructor(name)

    def test_template_constructor(self) -> None:
        """'template' is make_template."""
        assert constructors.get_constructor("template") is template.make_template

    def test_short_names_compose(self) -> None:
        """The aliases build working templates."""
        get = constructors.get_constructor
        counts = get("c")(get("a0")(), get("b")({"seen": 1})).create()

        assert counts["seen"] == 1
        assert counts["unseen"] == 0
