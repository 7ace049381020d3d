"""
Abstract Container and DataStore interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from .bindings import Binding
    from .introspection import Reflector

T = TypeVar("T")

Key = type | str
Provider = Callable[[str, Any, "ContainerBase"], Any]
ArgumentsLike = Mapping[int | str, Any] | Sequence[Any] | None


class DataStoreBase(ABC):
    """
    Abstract interface for hierarchical data stores.

    Values live under dot-delimited keys; keys without a value may be computed
    on demand by providers registered under a matching key.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get the value stored or provided for ``key``.

        Args:
            key: Dot-delimited key
            default: Value returned when neither data nor a provider matches

        Returns:
            The stored value, a provider's result, or ``default``
        """

    @abstractmethod
    def set(self, key: str, value: Any) -> DataStoreBase:
        """Store ``value`` under ``key``."""

    @abstractmethod
    def provide(self, key: str, provider: Provider, shared: bool = True) -> DataStoreBase:
        """
        Register a provider computing values for keys matching ``key``.

        Args:
            key: Provider key
            provider: Callable invoked as ``provider(key, default, container)``
            shared: Whether computed values are written back into the data
        """

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check if a value is stored or can be provided for ``key``."""


class ContainerBase(ABC):
    """
    Abstract interface for dependency containers.

    A container maps abstract keys to bindings and resolves them on request,
    constructing unknown classes automatically.
    """

    @property
    @abstractmethod
    def reflector(self) -> Reflector:
        """Get the reflection provider used for automatic construction."""

    @abstractmethod
    def alias(self, abstract: Key, *aliases: Key) -> ContainerBase:
        """Register ``aliases`` as alternative keys for ``abstract``."""

    @abstractmethod
    def bind(self, abstract: Key, concrete: Any, shared: bool = False) -> ContainerBase:
        """
        Bind a concrete implementation to an abstract key.

        Raises:
            BindingError: If ``concrete`` cannot be turned into a binding
        """

    @abstractmethod
    def call(self, target: Any, arguments: ArgumentsLike = None) -> Any:
        """Resolve a callable without registering it and return its result."""

    @abstractmethod
    def data(self) -> DataStoreBase:
        """Get the data store owned by this container."""

    @abstractmethod
    def get(self, abstract: Key) -> Binding | None:
        """Get the binding for ``abstract``, following aliases."""

    @abstractmethod
    def make(
        self,
        abstract: type[T] | str,
        arguments: ArgumentsLike = None,
        new: bool = False,
        shared: bool = False,
    ) -> T:
        """
        Produce a value for ``abstract``.

        Raises:
            BindingResolutionError: If resolution fails or produces the wrong type
        """
