"""
Autowire runtime - a dependency-resolution container for Python.

This library provides:
- Bindings for classes, closures, functions, methods and pre-built objects
- Automatic construction driven by signature introspection
- Data dependencies resolved from a hierarchical data store with providers
"""

from .annotations import Data, Inject, data
from .bindings import (
    Binding,
    BindingKind,
    ClassBinding,
    ClosureBinding,
    FunctionBinding,
    MethodBinding,
    ObjectBinding,
)
from .container import Container
from .container_base import ContainerBase, DataStoreBase
from .data_store import DataStore
from .errors import (
    ArgumentTypeError,
    BindingError,
    BindingResolutionError,
    ContainerError,
    IntrospectionError,
    UnresolvableArgumentError,
)
from .flat_map import FlatMap
from .introspection import ParameterInfo, PropertyInfo, Reflector, SignatureIntrospector
from .parameters import resolve_parameter, resolve_parameters

__all__ = [
    "ArgumentTypeError",
    "Binding",
    "BindingError",
    "BindingKind",
    "BindingResolutionError",
    "ClassBinding",
    "ClosureBinding",
    "Container",
    "ContainerBase",
    "ContainerError",
    "Data",
    "DataStore",
    "DataStoreBase",
    "FlatMap",
    "FunctionBinding",
    "Inject",
    "IntrospectionError",
    "MethodBinding",
    "ObjectBinding",
    "ParameterInfo",
    "PropertyInfo",
    "Reflector",
    "SignatureIntrospector",
    "UnresolvableArgumentError",
    "data",
    "resolve_parameter",
    "resolve_parameters",
]
