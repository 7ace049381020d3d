"""
Binding definitions and the five resolution strategies.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import BindingError, BindingResolutionError, IntrospectionError, type_name
from .introspection import PropertyInfo, is_class_like
from .parameters import (
    Arguments,
    bind_arguments,
    normalize_arguments,
    resolve_parameters,
    split_arguments,
)

if TYPE_CHECKING:
    from .container_base import ArgumentsLike, ContainerBase

logger = logging.getLogger(__name__)


class BindingKind(Enum):
    """Kinds of bindings supported."""

    CLASS = "class"
    CLOSURE = "closure"
    FUNCTION = "function"
    METHOD = "method"
    OBJECT = "object"


class Binding(ABC):
    """
    A registered strategy for producing a value.

    Shared bindings cache the first value they produce and hand it out again
    until a fresh value is explicitly requested.
    """

    kind: BindingKind

    def __init__(self, shared: bool = False):
        self._shared = shared
        self._resolved: Any = None
        self._is_resolved = False

    @property
    def shared(self) -> bool:
        return self._shared

    @property
    def is_resolved(self) -> bool:
        """Check if a shared value has been cached."""
        return self._is_resolved

    def resolve(self, container: ContainerBase, new: bool = False, arguments: ArgumentsLike = None) -> Any:
        """
        Produce the bound value.

        Args:
            container: Container used for nested resolution
            new: Produce a fresh value even if a shared one is cached
            arguments: Caller-supplied arguments keyed by name or position

        Returns:
            The produced value, or None when construction is not possible
        """
        if not new and self._shared and self._is_resolved:
            logger.debug("Reusing shared value of %s", self)
            return self._resolved

        resolved = self._produce(container, normalize_arguments(arguments))

        # Empty results are not cached so a later resolve can retry
        if self._shared and not new and resolved is not None:
            self._resolved = resolved
            self._is_resolved = True

        return resolved

    @abstractmethod
    def _produce(self, container: ContainerBase, arguments: Arguments) -> Any:
        """Produce a new value."""

    def _describe(self) -> str:
        return ""

    def __str__(self) -> str:
        shared_str = " shared" if self._shared else ""
        return f"{self.kind.value}({self._describe()}){shared_str}"


class ClassBinding(Binding):
    """Constructs instances of a class, resolving constructor parameters and properties."""

    kind = BindingKind.CLASS

    def __init__(self, cls: type | str, shared: bool = False):
        super().__init__(shared)
        self._class = cls

    @property
    def target(self) -> type | str:
        return self._class

    def _describe(self) -> str:
        return type_name(self._class)

    def _produce(self, container: ContainerBase, arguments: Arguments) -> Any:
        reflector = container.reflector

        try:
            cls = self._class if inspect.isclass(self._class) else reflector.resolve_type(self._class)
            constructor = reflector.get_constructor(cls)
            parameters = reflector.get_parameters(constructor) if constructor is not None else []
            dependencies = reflector.get_data_dependencies(constructor) if constructor is not None else []
            properties = reflector.get_properties(cls)
        except IntrospectionError as e:
            logger.debug("Cannot construct %s: %s", type_name(self._class), e)
            return None

        needs_resolution = (
            arguments
            or dependencies
            or any(p.is_required or p.data_dependencies for p in parameters)
        )

        if constructor is None or not needs_resolution:
            instance = cls()
        else:
            for dependency in dependencies:
                if dependency.target is not None and arguments.get(dependency.target) is None:
                    arguments[dependency.target] = container.data().get(dependency.key)

            values = resolve_parameters(container, parameters, arguments)
            args, kwargs = bind_arguments(parameters, values, arguments)
            instance = cls(*args, **kwargs)

        self._inject_properties(container, instance, properties)
        return instance

    def _inject_properties(self, container: ContainerBase, instance: Any, properties: list[PropertyInfo]) -> None:
        for prop in properties:
            if prop.inject and prop.has_default and is_class_like(prop.type_hint):
                # Values assigned during construction win over injection
                if getattr(instance, prop.name, prop.default) is prop.default:
                    setattr(instance, prop.name, container.make(prop.type_hint))

            if prop.data_dependencies:
                default = prop.default if prop.has_default else None
                setattr(instance, prop.name, container.data().get(prop.data_dependencies[0].key, default))


class ClosureBinding(Binding):
    """Invokes a callable with the container followed by the caller's arguments."""

    kind = BindingKind.CLOSURE

    def __init__(self, closure: Callable[..., Any], shared: bool = False):
        super().__init__(shared)
        self._closure = closure

    def _describe(self) -> str:
        return type_name(self._closure)

    def _produce(self, container: ContainerBase, arguments: Arguments) -> Any:
        args, kwargs = split_arguments(arguments)
        return self._closure(container, *args, **kwargs)


class FunctionBinding(Binding):
    """Invokes a named function with the container followed by the caller's arguments."""

    kind = BindingKind.FUNCTION

    def __init__(self, function: Callable[..., Any] | str, shared: bool = False):
        super().__init__(shared)
        self._function = function

    def _describe(self) -> str:
        return type_name(self._function)

    def _produce(self, container: ContainerBase, arguments: Arguments) -> Any:
        function = self._function
        if isinstance(function, str):
            function = container.reflector.resolve_callable(function)
        args, kwargs = split_arguments(arguments)
        return function(container, *args, **kwargs)


class MethodBinding(Binding):
    """Invokes a method on the value produced by a parent binding."""

    kind = BindingKind.METHOD

    def __init__(self, parent: Binding | None, method: str, shared: bool = False):
        super().__init__(shared)
        self._parent = parent
        self._method = method

    @property
    def parent(self) -> Binding | None:
        return self._parent

    def _describe(self) -> str:
        return f"{self._parent}.{self._method}"

    def _produce(self, container: ContainerBase, arguments: Arguments) -> Any:
        if self._parent is None:
            raise BindingError(f"No receiver bound for method {self._method}")

        receiver = self._parent.resolve(container)
        if receiver is None:
            raise BindingResolutionError(f"Unable to resolve receiver for method {self._method}")

        args, kwargs = split_arguments(arguments)
        return getattr(receiver, self._method)(*args, **kwargs)


class ObjectBinding(Binding):
    """Hands out a pre-built object. Always shared."""

    kind = BindingKind.OBJECT

    def __init__(self, obj: Any):
        super().__init__(shared=True)
        self._object = obj
        self._resolved = obj
        self._is_resolved = True

    def _describe(self) -> str:
        return type_name(type(self._object))

    def resolve(self, container: ContainerBase, new: bool = False, arguments: ArgumentsLike = None) -> Any:
        return self._object

    def _produce(self, container: ContainerBase, arguments: Arguments) -> Any:
        return self._object
