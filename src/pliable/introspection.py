"""Runtime introspection of binding targets.

Builds :class:`TypeDescriptor` values describing how a type can be
constructed: its constructors and their parameters, whether it is abstract,
and whether it is array- or container-shaped.

Constructors are discovered without any registration on the target type:

- each ``typing.overload`` declared on the class's ``__init__`` is a
  separate constructor, in declaration order;
- otherwise a class that defines ``__init__`` or ``__new__`` in Python
  (including dataclasses and named tuples) has a single constructor with
  the class's own signature;
- otherwise the class (a C-implemented type, or one inheriting ``object``'s
  constructor) has a single zero-parameter constructor.

Abstract classes and protocols have no constructors.
"""

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Callable,
    Optional,
    Sequence,
    get_overloads,
    get_type_hints,
)

from pliable.shapes import (
    ContainerShape,
    analyse_shape,
    array_element_type,
    runtime_class,
    substitute,
    type_bindings,
    type_name,
)

__all__ = [
    "NO_DEFAULT",
    "ParameterKind",
    "Parameter",
    "Constructor",
    "TypeDescriptor",
    "describe",
    "is_abstract",
    "has_parameterless_constructor",
]

logger = logging.getLogger(__name__)


class _NoDefault:
    def __repr__(self):
        return "NO_DEFAULT"


NO_DEFAULT = _NoDefault()
"""Marker for parameters that declare no default value."""


class ParameterKind(Enum):
    POSITIONAL_ONLY = "positional-only"
    POSITIONAL_OR_KEYWORD = "positional-or-keyword"
    KEYWORD_ONLY = "keyword-only"
    VAR_POSITIONAL = "var-positional"


_KINDS = {
    inspect.Parameter.POSITIONAL_ONLY: ParameterKind.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD: ParameterKind.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY: ParameterKind.KEYWORD_ONLY,
    inspect.Parameter.VAR_POSITIONAL: ParameterKind.VAR_POSITIONAL,
}


@dataclass(frozen=True)
class Parameter:
    """A constructor parameter.

    Attributes:
        name: The parameter name, matched against configuration keys.
        declared_type: The parameter's type; ``tuple[T, ...]`` for ``*args: T``.
        default: The declared default, or :data:`NO_DEFAULT`.
        kind: How the argument is passed when the constructor is invoked.
    """

    name: str
    declared_type: Any
    default: Any = NO_DEFAULT
    kind: ParameterKind = ParameterKind.POSITIONAL_OR_KEYWORD

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


@dataclass(frozen=True)
class Constructor:
    """One way of constructing a type.

    Attributes:
        target: The class to call.
        parameters: The constructor's parameters in declaration order.
        index: Declaration index among the type's constructors.
    """

    target: type
    parameters: tuple[Parameter, ...]
    index: int = 0

    @property
    def is_parameterless(self) -> bool:
        return len(self.parameters) == 0

    def invoke(self, arguments: Sequence[Any]) -> Any:
        """Call the target with one argument per parameter.

        Positional-only arguments are passed positionally, ``*args`` are
        splatted and all other arguments are passed by keyword. A value of
        ``...`` for a keyword-capable parameter is left out of the call so
        that the implementation supplies its own default.
        """
        args = []
        kwargs = {}
        for parameter, argument in zip(self.parameters, arguments):
            if parameter.kind is ParameterKind.POSITIONAL_ONLY:
                args.append(argument)
            elif parameter.kind is ParameterKind.VAR_POSITIONAL:
                args.extend(argument)
            elif argument is not Ellipsis:
                kwargs[parameter.name] = argument
        return self.target(*args, **kwargs)

    def __str__(self):
        parameters = ", ".join(
            f"{p.name}: {type_name(p.declared_type)}" for p in self.parameters
        )
        return f"{self.target.__qualname__}({parameters})"


@dataclass(frozen=True)
class TypeDescriptor:
    """Structured metadata about a binding target.

    Attributes:
        target: The annotation being described, e.g. ``list[int]``.
        origin: The runtime class behind the annotation, if any.
        constructors: The ways of constructing the type.
        is_abstract: Whether the type cannot be instantiated directly.
        array_element: Element type if the target is array-shaped.
        shape: Container shape if the target is sequence- or mapping-shaped.
    """

    target: Any
    origin: Optional[type]
    constructors: tuple[Constructor, ...]
    is_abstract: bool
    array_element: Optional[Any]
    shape: Optional[ContainerShape]

    @property
    def parameterless_constructor(self) -> Optional[Constructor]:
        return next((c for c in self.constructors if c.is_parameterless), None)


def describe(target: Any) -> TypeDescriptor:
    """Describe a binding target.

    Args:
        target: A class or generic alias such as ``Bag[Shape]``.

    Returns:
        The :class:`TypeDescriptor` for the target.

    Example:
        >>> descriptor = describe(Triple)
        >>> [str(c) for c in descriptor.constructors]
        ['Triple(a: int, b: int, c: int, d: int)', 'Triple(a: int, b: str, c: str)', ...]
    """
    origin = runtime_class(target)
    abstract = origin is None or is_abstract(origin)
    constructors = () if abstract else _constructors_of(target, origin)
    return TypeDescriptor(
        target,
        origin,
        constructors,
        abstract,
        array_element_type(target),
        analyse_shape(target),
    )


def is_abstract(cls: type) -> bool:
    """Check whether a class cannot be instantiated directly.

    Classes with unimplemented abstract methods and protocols are abstract.
    """
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))


def has_parameterless_constructor(cls: type) -> bool:
    """Check whether a class can be called with no arguments."""
    if is_abstract(cls):
        return False
    try:
        signature = inspect.signature(cls)
    except (ValueError, TypeError):
        # C-implemented types expose no signature; they are callable without arguments
        return True
    return all(
        p.default is not inspect.Parameter.empty
        or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


def _constructors_of(target: Any, cls: type) -> tuple[Constructor, ...]:
    bindings = type_bindings(target)

    init = cls.__init__
    overloads = get_overloads(init) if inspect.isfunction(init) else []
    if overloads:
        return tuple(
            Constructor(cls, _parameters_of(overload, bindings, skip_first=True), index)
            for index, overload in enumerate(overloads)
        )

    implementation = _python_constructor(cls)
    if implementation is None:
        return (Constructor(cls, ()),)

    try:
        signature = inspect.signature(cls)
    except (ValueError, TypeError) as e:
        logger.debug("No signature available for %s: %s", cls, e)
        return ()
    hints = _type_hints(implementation)
    return (Constructor(cls, _parameters_from_signature(signature, hints, bindings)),)


def _python_constructor(cls: type) -> Optional[Callable]:
    if inspect.isfunction(cls.__init__):
        return cls.__init__
    if inspect.isfunction(cls.__new__):
        return cls.__new__
    return None


def _parameters_of(func: Callable, bindings: dict, skip_first: bool) -> tuple[Parameter, ...]:
    signature = inspect.signature(func)
    if skip_first:
        remaining = list(signature.parameters.values())[1:]
        signature = signature.replace(parameters=remaining)
    return _parameters_from_signature(signature, _type_hints(func), bindings)


def _parameters_from_signature(
    signature: inspect.Signature, hints: dict[str, Any], bindings: dict
) -> tuple[Parameter, ...]:
    parameters = []
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_KEYWORD:
            continue

        annotation = hints.get(parameter.name, parameter.annotation)
        if annotation is inspect.Parameter.empty or isinstance(annotation, str):
            annotation = Any
        declared_type = substitute(annotation, bindings)

        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            parameters.append(
                Parameter(
                    parameter.name,
                    tuple[declared_type, ...],
                    (),
                    ParameterKind.VAR_POSITIONAL,
                )
            )
            continue

        default = (
            NO_DEFAULT if parameter.default is inspect.Parameter.empty else parameter.default
        )
        parameters.append(
            Parameter(parameter.name, declared_type, default, _KINDS[parameter.kind])
        )
    return tuple(parameters)


def _type_hints(func: Callable) -> dict[str, Any]:
    try:
        return get_type_hints(func)
    except (NameError, TypeError) as e:
        logger.debug("Unable to evaluate type hints of %s: %s", func, e)
        return {}
