"""
Declarative markers consumed by the reflector.

``Data`` links a parameter, property or constructor to a key in the data store,
``Inject`` marks a class-level attribute for injection after construction.

Example:
    ```python
    class Repository:
        cache: Annotated[Cache, Inject()] = NULL_CACHE
        table: Annotated[str, Data("db.table")] = "users"

        @data("db.dsn", "dsn")
        def __init__(self, dsn: str, timeout: Annotated[int, Data("db.timeout")] = 5):
            ...
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

DATA_DEPENDENCIES_ATTR = "__data_dependencies__"


@dataclass(frozen=True)
class Data:
    """A dependency on a value held in the data store."""

    key: str
    target: str | None = None

    def __repr__(self) -> str:
        if self.target is None:
            return f"Data({self.key!r})"
        return f"Data({self.key!r}, {self.target!r})"


@dataclass(frozen=True)
class Inject:
    """Marks a class attribute to be filled from the container after construction."""

    def __repr__(self) -> str:
        return "Inject()"


def data(key: str, target: str | None = None) -> Callable[[F], F]:
    """
    Declare a constructor-level data dependency.

    The value stored under ``key`` is passed to the parameter named ``target``
    unless the caller already supplied an argument with that name.
    """

    def decorator(func: F) -> F:
        # Decorators apply bottom-up; prepend to keep declaration order.
        existing = getattr(func, DATA_DEPENDENCIES_ATTR, ())
        setattr(func, DATA_DEPENDENCIES_ATTR, (Data(key, target), *existing))
        return func

    return decorator
