"""
Concrete implementation of ContainerBase.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from .bindings import Binding, ClassBinding, ClosureBinding, FunctionBinding, MethodBinding, ObjectBinding
from .container_base import ArgumentsLike, ContainerBase, DataStoreBase, Key, Provider
from .data_store import DataStore
from .errors import BindingError, BindingResolutionError, IntrospectionError, type_name
from .introspection import Reflector, SignatureIntrospector

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _is_named_function(target: Any) -> bool:
    return (
        inspect.isfunction(target)
        and target.__name__ != "<lambda>"
        and "<locals>" not in target.__qualname__
    )


def _is_closure(target: Any) -> bool:
    return (
        inspect.isfunction(target)
        or inspect.ismethod(target)
        or inspect.isbuiltin(target)
        or isinstance(target, functools.partial)
    )


class Container(ContainerBase):
    """
    Registry of bindings that resolves abstract keys into values.

    Keys without a binding are treated as classes and constructed on demand:
    constructor parameters are satisfied from caller arguments, other bindings,
    the data store and declared defaults.

    Example:
        ```python
        container = Container({"db": {"dsn": "sqlite://"}})
        container.bind(Repository, SqlRepository, shared=True)
        service = container.make(UserService)
        ```
    """

    def __init__(
        self,
        items: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        providers: Mapping[str, Provider] | None = None,
        *,
        reflector: Reflector | None = None,
    ):
        """
        Create a new Container.

        Args:
            items: Initial data for the owned data store
            providers: Initial data providers keyed by provider key
            reflector: Reflection provider; defaults to SignatureIntrospector
        """
        self._reflector = reflector if reflector is not None else SignatureIntrospector()
        self._data_store = DataStore(self, items, providers)
        self._bindings: dict[Key, Binding] = {}
        self._binding_aliases: dict[Key, Key] = {}
        self._class_bindings: dict[type, Binding] = {}
        self._function_bindings: dict[Callable[..., Any], Binding] = {}

    @property
    def reflector(self) -> Reflector:
        return self._reflector

    def alias(self, abstract: Key, *aliases: Key) -> Container:
        """
        Register alternative keys for ``abstract``.

        Aliases may point at other aliases; they are followed on lookup.
        """
        for alias in aliases:
            self._binding_aliases[alias] = abstract
            logger.debug("Aliased %s to %s", type_name(alias), type_name(abstract))

        return self

    def bind(self, abstract: Key, concrete: Any, shared: bool = False) -> Container:
        """
        Bind a concrete implementation to an abstract key.

        ``concrete`` may be a class, a function, a lambda or other callable, a
        ``(class_or_object, "method")`` pair, an importable dotted path naming a
        class or function, or any other object (which is returned as-is).

        Args:
            abstract: The key to bind
            concrete: The implementation
            shared: Whether the first resolved value is reused

        Returns:
            This container

        Raises:
            BindingError: If ``concrete`` cannot be turned into a binding
        """
        binding = self._create_binding(concrete, shared)

        if binding is None:
            raise BindingError(f"Invalid binding provided for {type_name(abstract)}")

        self._add_binding(abstract, binding)
        return self

    def call(self, target: Any, arguments: ArgumentsLike = None) -> Any:
        """
        Resolve ``target`` as ``bind`` would, without registering it.

        Args:
            target: The callable to resolve
            arguments: Caller-supplied arguments

        Returns:
            Whatever the resolved binding produces; the type is not checked

        Raises:
            BindingError: If ``target`` cannot be turned into a binding
        """
        binding = self._create_binding(target, False)

        if binding is None:
            raise BindingError(f"Invalid callable provided: {target!r}")

        return binding.resolve(self, False, arguments)

    def data(self) -> DataStoreBase:
        return self._data_store

    def get(self, abstract: Key) -> Binding | None:
        if abstract in self._binding_aliases:
            return self.get(self._binding_aliases[abstract])

        return self._bindings.get(abstract)

    def make(
        self,
        abstract: type[T] | str,
        arguments: ArgumentsLike = None,
        new: bool = False,
        shared: bool = False,
    ) -> T:
        """
        Produce a value for ``abstract``, constructing the class if nothing is bound.

        Args:
            abstract: A class or a key registered with ``bind``
            arguments: Caller-supplied arguments keyed by parameter name or position
            new: Produce a fresh value even if a shared one is cached
            shared: Sharing for the class binding created when nothing is bound

        Returns:
            The resolved value

        Raises:
            BindingResolutionError: If resolution fails or the value has the wrong type
        """
        binding = self.get(abstract)

        if binding is None:
            binding = ClassBinding(abstract, shared)
            self._add_binding(abstract, binding)

        logger.debug("Resolving %s via %s", type_name(abstract), binding)

        try:
            resolved = binding.resolve(self, new, arguments)
        except Exception as e:
            raise BindingResolutionError(f"There was an error resolving {type_name(abstract)}", abstract) from e

        if not self._matches(resolved, abstract):
            raise BindingResolutionError(
                f"Binding for {type_name(abstract)} does not return the correct type", abstract
            )

        return resolved  # type: ignore[no-any-return]

    def _matches(self, resolved: Any, abstract: Key) -> bool:
        if resolved is None:
            return False

        cls: type | None = abstract if inspect.isclass(abstract) else None
        if cls is None and isinstance(abstract, str):
            try:
                cls = self._reflector.resolve_type(abstract)
            except IntrospectionError:
                # Free-form keys only require a value
                return True

        if cls is None:
            return True

        try:
            return isinstance(resolved, cls)
        except TypeError:
            return True

    def _create_binding(self, concrete: Any, shared: bool) -> Binding | None:
        """Classify ``concrete`` into one of the binding variants."""
        if concrete is None:
            return None

        if isinstance(concrete, str):
            return self._create_named_binding(concrete, shared)

        if isinstance(concrete, tuple):
            return self._create_method_binding(concrete, shared)

        if inspect.isclass(concrete):
            return self._get_class_binding(concrete, shared)

        if _is_named_function(concrete):
            return self._get_function_binding(concrete, shared)

        if _is_closure(concrete):
            return ClosureBinding(concrete, shared)

        return ObjectBinding(concrete)

    def _create_named_binding(self, name: str, shared: bool) -> Binding | None:
        try:
            return self._get_class_binding(self._reflector.resolve_type(name), shared)
        except IntrospectionError:
            pass

        try:
            return self._get_function_binding(self._reflector.resolve_callable(name), shared)
        except IntrospectionError:
            logger.debug("%s names neither a class nor a function", name)
            return None

    def _create_method_binding(self, concrete: tuple[Any, ...], shared: bool) -> Binding | None:
        if len(concrete) != 2:
            return None

        target, method = concrete
        if not isinstance(method, str) or target is None:
            return None

        parent: Binding
        if isinstance(target, str):
            try:
                parent = ClassBinding(self._reflector.resolve_type(target), shared)
            except IntrospectionError:
                return None
        elif inspect.isclass(target):
            parent = ClassBinding(target, shared)
        else:
            parent = ObjectBinding(target)

        return MethodBinding(parent, method, shared)

    def _get_class_binding(self, cls: type, shared: bool) -> Binding:
        binding = self._class_bindings.get(cls)

        if binding is None:
            binding = ClassBinding(cls, shared)
            self._class_bindings[cls] = binding

        return binding

    def _get_function_binding(self, function: Callable[..., Any], shared: bool) -> Binding:
        binding = self._function_bindings.get(function)

        if binding is None:
            binding = FunctionBinding(function, shared)
            self._function_bindings[function] = binding

        return binding

    def _add_binding(self, abstract: Key, binding: Binding) -> None:
        self._bindings[abstract] = binding
        logger.debug("Bound %s -> %s", type_name(abstract), binding)
