"""
Parameter resolution shared by the binding variants.

Sources are tried from most to least specific: caller-supplied arguments,
autowiring through the container, declared data dependencies, defaults and
finally ``None`` for parameters that accept it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .errors import ArgumentTypeError, BindingResolutionError, UnresolvableArgumentError
from .introspection import ParameterInfo, is_class_like, is_instance_of

if TYPE_CHECKING:
    from .container_base import ContainerBase

logger = logging.getLogger(__name__)

Arguments = dict[int | str, Any]


def normalize_arguments(arguments: Mapping[int | str, Any] | Sequence[Any] | None) -> Arguments:
    """Copy caller arguments into a mutable pool keyed by name or position."""
    if arguments is None:
        return {}
    if isinstance(arguments, Mapping):
        return dict(arguments)
    if isinstance(arguments, (str, bytes)):
        raise TypeError(f"Arguments must be a mapping or a sequence, got {type(arguments).__name__}")
    return dict(enumerate(arguments))


def split_arguments(arguments: Arguments) -> tuple[list[Any], dict[str, Any]]:
    """Split a pool into positional values (by index order) and keyword values."""
    positional = [arguments[index] for index in sorted(k for k in arguments if isinstance(k, int))]
    named = {k: v for k, v in arguments.items() if isinstance(k, str)}
    return positional, named


def _take(arguments: Arguments, parameter: ParameterInfo) -> Any:
    """Consume the entry supplied for ``parameter``; a ``None`` value counts as absent."""
    provided = arguments.pop(parameter.name, None)
    if provided is not None:
        return provided
    if not parameter.is_keyword_only:
        return arguments.pop(parameter.position, None)
    return None


def resolve_parameter(container: ContainerBase, parameter: ParameterInfo, arguments: Arguments) -> Any:
    """
    Resolve a single declared parameter.

    Consumes the matching entry of ``arguments`` when one was supplied.

    Raises:
        ArgumentTypeError: If the supplied value conflicts with the declared type
        UnresolvableArgumentError: If no source can satisfy the parameter
    """
    provided = _take(arguments, parameter)
    type_hint = parameter.type_hint

    if parameter.has_type:
        if provided is None and parameter.nullable:
            return None

        if provided is not None:
            if not is_instance_of(provided, type_hint):
                raise ArgumentTypeError(parameter.name, type_hint, type(provided))
            return provided

        if is_class_like(type_hint):
            try:
                return container.make(type_hint)
            except BindingResolutionError:
                if not (parameter.data_dependencies or parameter.has_default):
                    raise
                logger.debug("Autowiring %s failed, falling back to declared value", parameter.name)

    elif provided is not None:
        return provided

    if parameter.data_dependencies:
        default = parameter.default if parameter.has_default else None
        return container.data().get(parameter.data_dependencies[0].key, default)

    if parameter.has_default:
        return parameter.default

    if parameter.nullable:
        return None

    raise UnresolvableArgumentError(parameter.name, type_hint)


def resolve_parameters(
    container: ContainerBase, parameters: Sequence[ParameterInfo], arguments: Arguments
) -> list[Any]:
    """Resolve every non-variadic parameter in declaration order."""
    return [resolve_parameter(container, parameter, arguments) for parameter in parameters if not parameter.is_variadic]


def bind_arguments(
    parameters: Sequence[ParameterInfo], values: Sequence[Any], remaining: Arguments
) -> tuple[list[Any], dict[str, Any]]:
    """
    Turn resolved values into call arguments.

    Leftover caller arguments flow into ``*args`` / ``**kwargs`` when the callable
    declares them and are dropped otherwise.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    resolved = iter(values)

    for parameter in parameters:
        if parameter.is_variadic:
            continue
        value = next(resolved)
        if parameter.is_keyword_only:
            kwargs[parameter.name] = value
        else:
            args.append(value)

    extra_positional, extra_named = split_arguments(remaining)
    kinds = {parameter.kind.name for parameter in parameters}
    if "VAR_POSITIONAL" in kinds:
        args.extend(extra_positional)
    if "VAR_KEYWORD" in kinds:
        kwargs.update({k: v for k, v in extra_named.items() if k not in kwargs})

    return args, kwargs
