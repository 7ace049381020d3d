"""
Signature and class introspection for automatic construction.

The resolution engine only talks to the ``Reflector`` interface, so any source
of structural metadata can drive it. ``SignatureIntrospector`` is the default
implementation backed by ``inspect`` and ``typing``.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import sys
import types
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Literal, Union, get_args, get_origin, get_type_hints

from .annotations import DATA_DEPENDENCIES_ATTR, Data, Inject
from .errors import IntrospectionError

logger = logging.getLogger(__name__)

EMPTY = inspect.Parameter.empty

_UNION_ORIGINS = (Union, types.UnionType)
_NONE_TYPES = (None, type(None))


@dataclass(frozen=True)
class ParameterInfo:
    """Structural description of a single callable parameter."""

    name: str
    position: int
    kind: inspect._ParameterKind = inspect.Parameter.POSITIONAL_OR_KEYWORD
    type_hint: Any = EMPTY
    default: Any = EMPTY
    nullable: bool = True
    data_dependencies: tuple[Data, ...] = ()

    @property
    def has_type(self) -> bool:
        return self.type_hint is not EMPTY

    @property
    def has_default(self) -> bool:
        return self.default is not EMPTY

    @property
    def is_variadic(self) -> bool:
        return self.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY

    @property
    def is_required(self) -> bool:
        return not self.is_variadic and not self.has_default


@dataclass(frozen=True)
class PropertyInfo:
    """Structural description of a class-level annotated attribute."""

    name: str
    type_hint: Any = EMPTY
    default: Any = EMPTY
    inject: bool = False
    data_dependencies: tuple[Data, ...] = ()

    @property
    def has_default(self) -> bool:
        return self.default is not EMPTY


class Reflector(ABC):
    """
    Source of structural metadata about types and callables.

    Implementations raise ``IntrospectionError`` when the target cannot be
    reflected on (an unknown name, a non-class, an unsupported callable).
    """

    @abstractmethod
    def resolve_type(self, name: str) -> type:
        """Return the class named by an importable dotted path."""

    @abstractmethod
    def resolve_callable(self, name: str) -> Callable[..., Any]:
        """Return the function named by an importable dotted path."""

    @abstractmethod
    def get_constructor(self, cls: type) -> Callable[..., Any] | None:
        """Return the initialiser declared for ``cls``, or None if it only inherits ``object``'s."""

    @abstractmethod
    def get_parameters(self, func: Callable[..., Any]) -> list[ParameterInfo]:
        """Return the declared parameters of ``func`` in declaration order."""

    @abstractmethod
    def get_properties(self, cls: type) -> list[PropertyInfo]:
        """Return the annotated class-level attributes of ``cls``."""

    @abstractmethod
    def get_data_dependencies(self, target: Any) -> list[Data]:
        """Return the ``Data`` declarations attached to ``target`` itself."""


class SignatureIntrospector(Reflector):
    """Reflector built on runtime signatures and type hints."""

    def resolve_type(self, name: str) -> type:
        target = self._import(name)
        if not inspect.isclass(target):
            raise IntrospectionError(f"{name} does not name a class")
        return target

    def resolve_callable(self, name: str) -> Callable[..., Any]:
        target = self._import(name)
        if inspect.isclass(target) or not (inspect.isfunction(target) or inspect.isbuiltin(target)):
            raise IntrospectionError(f"{name} does not name a function")
        return target

    def get_constructor(self, cls: type) -> Callable[..., Any] | None:
        if not inspect.isclass(cls):
            raise IntrospectionError(f"{cls!r} is not a class")

        init = cls.__init__
        # Slot wrappers (object and builtin bases) carry no usable signature.
        if init is object.__init__ or not inspect.isfunction(init):
            return None
        return init

    def get_parameters(self, func: Callable[..., Any]) -> list[ParameterInfo]:
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError, NameError) as e:
            raise IntrospectionError(f"Cannot read signature of {func!r}: {e}") from e

        hints = self._type_hints(func)
        parameters = list(signature.parameters.values())

        # Unbound initialisers still declare their receiver.
        if inspect.isfunction(func) and func.__name__ == "__init__" and parameters:
            parameters = parameters[1:]

        result: list[ParameterInfo] = []
        for position, parameter in enumerate(parameters):
            annotation = hints.get(parameter.name, parameter.annotation)
            type_hint, metadata = _unwrap(annotation)
            if isinstance(annotation, str):
                # Declared type unknown: only an explicit None default admits None
                nullable = parameter.default is None
            else:
                nullable = accepts_none(type_hint, parameter.default)
            result.append(
                ParameterInfo(
                    name=parameter.name,
                    position=position,
                    kind=parameter.kind,
                    type_hint=_strip_none(type_hint),
                    default=parameter.default,
                    nullable=nullable,
                    data_dependencies=tuple(m for m in metadata if isinstance(m, Data)),
                )
            )
        return result

    def get_properties(self, cls: type) -> list[PropertyInfo]:
        if not inspect.isclass(cls):
            raise IntrospectionError(f"{cls!r} is not a class")

        annotations: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            annotations.update(_raw_annotations(klass))
        annotations.update(self._type_hints(cls))

        properties: list[PropertyInfo] = []
        for name, annotation in annotations.items():
            type_hint, metadata = _unwrap(annotation)
            if type_hint is ClassVar or get_origin(type_hint) is ClassVar:
                continue
            properties.append(
                PropertyInfo(
                    name=name,
                    type_hint=_strip_none(type_hint),
                    default=getattr(cls, name, EMPTY),
                    inject=any(isinstance(m, Inject) for m in metadata),
                    data_dependencies=tuple(m for m in metadata if isinstance(m, Data)),
                )
            )
        return properties

    def get_data_dependencies(self, target: Any) -> list[Data]:
        return list(getattr(target, DATA_DEPENDENCIES_ATTR, ()))

    def _type_hints(self, target: Any) -> dict[str, Any]:
        try:
            return get_type_hints(target, include_extras=True)
        except (NameError, TypeError, AttributeError) as e:
            logger.debug("Evaluating annotations of %r one by one: %s", target, e)

        # One unresolvable forward reference must not hide the others
        hints: dict[str, Any] = {}
        owners = reversed(target.__mro__) if inspect.isclass(target) else [inspect.unwrap(target)]
        for owner in owners:
            globalns = getattr(owner, "__globals__", None)
            if globalns is None:
                module = sys.modules.get(getattr(owner, "__module__", ""), None)
                globalns = vars(module) if module is not None else {}
            localns = dict(vars(owner)) if inspect.isclass(owner) else None

            for name, annotation in _raw_annotations(owner).items():
                hints[name] = annotation
                if isinstance(annotation, str):
                    try:
                        hints[name] = eval(annotation, globalns, localns)
                    except (NameError, AttributeError, SyntaxError, TypeError) as e:
                        logger.debug("Leaving %s of %r unresolved: %s", name, owner, e)
        return hints

    def _import(self, name: str) -> Any:
        if ":" in name:
            module_name, _, qualname = name.partition(":")
        else:
            module_name, _, qualname = name.rpartition(".")

        if not module_name or not qualname:
            raise IntrospectionError(f"{name} is not an importable path")

        try:
            target: Any = importlib.import_module(module_name)
            for attribute in qualname.split("."):
                target = getattr(target, attribute)
        except Exception as e:
            # Relative paths raise TypeError; modules may fail with anything while importing
            raise IntrospectionError(f"Cannot import {name}: {e}") from e
        return target


def _raw_annotations(owner: Any) -> dict[str, Any]:
    """Annotations declared directly on ``owner``, unevaluated where they are strings."""
    try:
        return dict(inspect.get_annotations(owner))
    except (NameError, TypeError) as e:
        logger.debug("Cannot read annotations of %r: %s", owner, e)
        return {}


def _unwrap(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, ...]`` into ``T`` and its metadata."""
    if isinstance(annotation, str):
        # An unresolved forward reference tells us nothing usable
        return EMPTY, ()
    if get_origin(annotation) is Annotated:
        return annotation.__origin__, tuple(annotation.__metadata__)
    return annotation, ()


def _strip_none(type_hint: Any) -> Any:
    if get_origin(type_hint) in _UNION_ORIGINS:
        members = [arg for arg in get_args(type_hint) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return type_hint


def accepts_none(type_hint: Any, default: Any = EMPTY) -> bool:
    """Whether a declaration admits ``None`` as a value."""
    if default is None:
        return True
    if type_hint is EMPTY or type_hint is Any or type_hint in _NONE_TYPES:
        return True
    if get_origin(type_hint) in _UNION_ORIGINS:
        return type(None) in get_args(type_hint)
    return False


def is_class_like(type_hint: Any) -> bool:
    """True for user classes the container can construct; False for builtins, Any and generics."""
    return (
        inspect.isclass(type_hint)
        and get_origin(type_hint) is None
        and type_hint.__module__ != "builtins"
    )


def is_instance_of(value: Any, type_hint: Any) -> bool:
    """Runtime compatibility check between a value and a declared type hint."""
    if type_hint is EMPTY or type_hint is Any:
        return True
    if type_hint in _NONE_TYPES:
        return value is None

    origin = get_origin(type_hint)
    if origin is Annotated:
        return is_instance_of(value, type_hint.__origin__)
    if origin in _UNION_ORIGINS:
        return any(is_instance_of(value, member) for member in get_args(type_hint))
    if origin is Literal:
        return value in get_args(type_hint)
    if origin is not None:
        type_hint = origin

    if not inspect.isclass(type_hint):
        # TypeVar, NewType and friends cannot be checked at runtime
        return True
    if isinstance(value, bool) and type_hint in (int, float, complex):
        return False
    if type_hint is float and isinstance(value, int):
        return True
    if type_hint is complex and isinstance(value, (int, float)):
        return True

    try:
        return isinstance(value, type_hint)
    except TypeError:
        # Non runtime-checkable protocols
        return True
