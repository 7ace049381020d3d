#!/usr/bin/env python3
"""
Unit tests for signature introspection and pluggable reflectors.
"""

import inspect
import unittest
from typing import Annotated, Any, ClassVar, Literal, Optional
from unittest.mock import patch

from autowire.runtime import (
    BindingResolutionError,
    Container,
    Data,
    Inject,
    IntrospectionError,
    ParameterInfo,
    PropertyInfo,
    Reflector,
    SignatureIntrospector,
    data,
)
from autowire.runtime.introspection import EMPTY, accepts_none, is_class_like, is_instance_of


class Engine:
    pass


class Plain:
    pass


class Configured:
    @data("db.host", "host")
    @data("db.port", "port")
    def __init__(self, host: str, port: int = 5432, *, engine: Optional[Engine] = None):
        self.host = host
        self.port = port
        self.engine = engine


class Base:
    engine: Annotated[Engine, Inject()] = None  # type: ignore[assignment]


class Child(Base):
    name: Annotated[str, Data("child.name")] = "child"
    counter: ClassVar[int] = 0
    untyped_default = 5
    required_field: int


class Listish(list):
    pass


def helper(container, value: Annotated[int, Data("helper.value")], *rest, flag: bool = False, **extra) -> int:
    return value


class TestSignatureIntrospector(unittest.TestCase):
    """Test the default reflector."""

    def setUp(self):
        self.reflector = SignatureIntrospector()

    def test_function_parameters(self):
        parameters = self.reflector.get_parameters(helper)

        self.assertEqual([p.name for p in parameters], ["container", "value", "rest", "flag", "extra"])
        self.assertEqual([p.position for p in parameters], [0, 1, 2, 3, 4])

        container, value, rest, flag, extra = parameters
        self.assertFalse(container.has_type)
        self.assertTrue(container.nullable)
        self.assertIs(value.type_hint, int)
        self.assertFalse(value.nullable)
        self.assertEqual(value.data_dependencies, (Data("helper.value"),))
        self.assertTrue(rest.is_variadic)
        self.assertTrue(flag.is_keyword_only)
        self.assertFalse(flag.default)
        self.assertFalse(flag.is_required)
        self.assertTrue(extra.is_variadic)

    def test_constructor_parameters_drop_receiver(self):
        constructor = self.reflector.get_constructor(Configured)
        parameters = self.reflector.get_parameters(constructor)

        self.assertEqual([p.name for p in parameters], ["host", "port", "engine"])
        host, port, engine = parameters
        self.assertEqual(host.position, 0)
        self.assertTrue(host.is_required)
        self.assertEqual(port.default, 5432)
        self.assertIs(engine.type_hint, Engine)
        self.assertTrue(engine.nullable)

    def test_constructor(self):
        self.assertIsNone(self.reflector.get_constructor(Plain))
        self.assertIsNone(self.reflector.get_constructor(Listish))
        self.assertIs(self.reflector.get_constructor(Configured), Configured.__init__)

        with self.assertRaises(IntrospectionError):
            self.reflector.get_constructor("Configured")  # type: ignore[arg-type]

    def test_constructor_data_dependencies_keep_declaration_order(self):
        dependencies = self.reflector.get_data_dependencies(Configured.__init__)

        self.assertEqual(dependencies, [Data("db.host", "host"), Data("db.port", "port")])
        self.assertEqual(self.reflector.get_data_dependencies(helper), [])

    def test_properties(self):
        properties = {p.name: p for p in self.reflector.get_properties(Child)}

        self.assertEqual(set(properties), {"engine", "name", "required_field"})
        self.assertTrue(properties["engine"].inject)
        self.assertIs(properties["engine"].type_hint, Engine)
        self.assertIsNone(properties["engine"].default)
        self.assertEqual(properties["name"].data_dependencies, (Data("child.name"),))
        self.assertEqual(properties["name"].default, "child")
        self.assertFalse(properties["required_field"].has_default)

    def test_unresolvable_annotations_are_ignored(self):
        def uses_forward_reference(value: "MissingType") -> None:  # noqa: F821
            pass

        (parameter,) = self.reflector.get_parameters(uses_forward_reference)
        self.assertFalse(parameter.has_type)

    def test_resolve_type(self):
        self.assertIs(self.reflector.resolve_type(f"{__name__}.Engine"), Engine)
        self.assertIs(self.reflector.resolve_type(f"{__name__}:Engine"), Engine)
        self.assertIs(self.reflector.resolve_type("collections.OrderedDict"), __import__("collections").OrderedDict)

    def test_resolve_type_errors(self):
        names = ["Engine", "no_such_module.Engine", f"{__name__}.Missing", f"{__name__}.helper", ":Engine", "..Engine"]
        for name in names:
            with self.subTest(name=name), self.assertRaises(IntrospectionError):
                self.reflector.resolve_type(name)

    def test_resolve_callable(self):
        self.assertIs(self.reflector.resolve_callable(f"{__name__}.helper"), helper)

        with self.assertRaises(IntrospectionError):
            self.reflector.resolve_callable(f"{__name__}.Engine")

    def test_import_time_failures(self):
        with patch("importlib.import_module", side_effect=RuntimeError("broken module")):
            with self.assertRaises(IntrospectionError):
                self.reflector.resolve_type("broken.Thing")

            with self.assertRaises(BindingResolutionError):
                Container().make("broken.Thing")


class TestTypeHelpers(unittest.TestCase):
    """Test the runtime type helpers."""

    def test_accepts_none(self):
        self.assertTrue(accepts_none(EMPTY))
        self.assertTrue(accepts_none(Any))
        self.assertTrue(accepts_none(Optional[int]))
        self.assertTrue(accepts_none(int | None))
        self.assertTrue(accepts_none(int, None))
        self.assertFalse(accepts_none(int))
        self.assertFalse(accepts_none(int | str))

    def test_is_class_like(self):
        self.assertTrue(is_class_like(Engine))
        self.assertFalse(is_class_like(int))
        self.assertFalse(is_class_like(dict))
        self.assertFalse(is_class_like(list[Engine]))
        self.assertFalse(is_class_like(Any))
        self.assertFalse(is_class_like(Engine | None))

    def test_is_instance_of(self):
        self.assertTrue(is_instance_of(1, int))
        self.assertTrue(is_instance_of(1, float))
        self.assertTrue(is_instance_of(1.5, complex))
        self.assertTrue(is_instance_of("x", Any))
        self.assertTrue(is_instance_of(None, type(None)))
        self.assertTrue(is_instance_of("a", Literal["a", "b"]))
        self.assertTrue(is_instance_of({"a": 1}, dict[str, int]))
        self.assertTrue(is_instance_of(Engine(), Annotated[Engine, Inject()]))
        self.assertTrue(is_instance_of(True, bool))
        self.assertTrue(is_instance_of(False, int | bool))
        self.assertFalse(is_instance_of(True, int))
        self.assertFalse(is_instance_of(False, float))
        self.assertFalse(is_instance_of("1", int))
        self.assertFalse(is_instance_of("c", Literal["a", "b"]))
        self.assertFalse(is_instance_of(Plain(), Engine | int))


class Widget:
    def __init__(self, *args: Any, **kwargs: Any):
        self.args = args
        self.kwargs = kwargs


class FakeReflector(Reflector):
    """Reflector serving hand-written metadata."""

    def __init__(self, fail: bool = False):
        self.fail = fail

    def resolve_type(self, name: str) -> type:
        raise IntrospectionError(name)

    def resolve_callable(self, name: str):
        raise IntrospectionError(name)

    def get_constructor(self, cls: type):
        if self.fail:
            raise IntrospectionError(f"cannot reflect on {cls}")
        return cls.__init__

    def get_parameters(self, func) -> list[ParameterInfo]:
        return [
            ParameterInfo("size", 0, type_hint=int, nullable=False, data_dependencies=(Data("widget.size"),)),
            ParameterInfo("label", 1, type_hint=str, nullable=False, default="plain"),
        ]

    def get_properties(self, cls: type) -> list[PropertyInfo]:
        return [PropertyInfo("color", type_hint=str, default="none", data_dependencies=(Data("widget.color"),))]

    def get_data_dependencies(self, target) -> list[Data]:
        return []


class TestCustomReflector(unittest.TestCase):
    """Test driving the container from a custom metadata source."""

    def test_container_uses_reflector_metadata(self):
        container = Container({"widget": {"size": 3, "color": "red"}}, reflector=FakeReflector())

        widget = container.make(Widget)

        self.assertEqual(widget.args, (3, "plain"))
        self.assertEqual(widget.color, "red")
        self.assertIsInstance(container.reflector, FakeReflector)

    def test_reflection_failure_surfaces_at_make(self):
        container = Container(reflector=FakeReflector(fail=True))

        with self.assertRaises(BindingResolutionError):
            container.make(Widget)

    def test_default_reflector(self):
        self.assertIsInstance(Container().reflector, SignatureIntrospector)

    def test_parameter_info_defaults(self):
        parameter = ParameterInfo("x", 0)

        self.assertIs(parameter.kind, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        self.assertFalse(parameter.has_type)
        self.assertFalse(parameter.has_default)
        self.assertTrue(parameter.is_required)


if __name__ == "__main__":
    unittest.main()
