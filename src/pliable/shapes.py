"""Classification of types as arrays, sequences or mappings.

Binding treats three families of types specially:

- **arrays**: ``tuple[T, ...]`` (and bare ``tuple``), bound element by element
  into a fixed-size tuple;
- **sequences**: any iterable class other than text, such as ``list[T]``,
  ``Iterable[T]``, ``AbstractSet[T]`` or a user class deriving from
  ``Iterable[T]``;
- **mappings**: any ``Mapping[K, V]`` subclass.

Element, key and value types are recovered from type arguments, following
generic base classes and substituting their type variables where needed.
"""

import collections.abc
import inspect
import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, TypeVar, Union, get_args, get_origin

__all__ = [
    "ShapeKind",
    "ContainerShape",
    "analyse_shape",
    "array_element_type",
    "unwrap_optional",
    "union_members",
    "runtime_class",
    "substitute",
    "type_bindings",
    "is_assignable",
    "type_name",
]

_TEXT_TYPES = (str, bytes, bytearray, memoryview)


class ShapeKind(Enum):
    SEQUENCE = "sequence"
    DICTIONARY = "dictionary"


@dataclass(frozen=True)
class ContainerShape:
    """The container shape of a type.

    Attributes:
        kind: Whether the type is a sequence or a mapping.
        element_type: Element type of a sequence.
        key_type: Key type of a mapping.
        value_type: Value type of a mapping.
    """

    kind: ShapeKind
    element_type: Any = Any
    key_type: Any = Any
    value_type: Any = Any

    @property
    def is_dictionary(self) -> bool:
        return self.kind is ShapeKind.DICTIONARY


def union_members(target: Any) -> tuple:
    """Return the members of a union type, or an empty tuple for anything else."""
    origin = get_origin(target)
    if origin is Union or origin is types.UnionType:
        return get_args(target)
    return ()


def unwrap_optional(target: Any) -> Any:
    """Strip ``None`` from ``Optional[T]``.

    Unions with more than one non-``None`` member are returned as a union of
    the remaining members.

    Example:
        >>> unwrap_optional(Optional[int])
        <class 'int'>
        >>> unwrap_optional(int | str | None)
        typing.Union[int, str]
    """
    members = union_members(target)
    if not members:
        return target
    remaining = tuple(m for m in members if m is not type(None))
    if len(remaining) == len(members):
        return target
    if len(remaining) == 1:
        return remaining[0]
    return Union[remaining]


def runtime_class(target: Any) -> Optional[type]:
    """Return the class behind a type annotation, or None if there is none."""
    origin = get_origin(target) or target
    if origin is Any or not inspect.isclass(origin):
        return None
    return origin


def type_name(target: Any) -> str:
    if inspect.isclass(target) and not get_args(target):
        return target.__qualname__
    return str(target).replace("typing.", "")


def array_element_type(target: Any) -> Optional[Any]:
    """Return the element type of an array-shaped type.

    Example:
        >>> array_element_type(tuple[int, ...])
        <class 'int'>
        >>> array_element_type(list[int]) is None
        True
    """
    target = unwrap_optional(target)
    if target is tuple:
        return Any
    if get_origin(target) is tuple:
        args = get_args(target)
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
    return None


def analyse_shape(target: Any) -> Optional[ContainerShape]:
    """Classify a type as a sequence or mapping shape.

    Args:
        target: The type annotation to classify.

    Returns:
        The :class:`ContainerShape`, or None if the type is neither a sequence
        nor a mapping. Text types and tuples are never container-shaped.

    Example:
        >>> analyse_shape(Mapping[str, int])
        ContainerShape(kind=<ShapeKind.DICTIONARY: 'dictionary'>, element_type=typing.Any, key_type=<class 'str'>, value_type=<class 'int'>)
        >>> analyse_shape(str) is None
        True
    """
    target = unwrap_optional(target)
    origin = runtime_class(target)
    if origin is None or issubclass(origin, _TEXT_TYPES) or issubclass(origin, tuple):
        return None

    if issubclass(origin, collections.abc.Mapping):
        key_type, value_type = _parameters_of(target, collections.abc.Mapping, 2)
        return ContainerShape(ShapeKind.DICTIONARY, key_type=key_type, value_type=value_type)

    if issubclass(origin, collections.abc.Iterable):
        (element_type,) = _parameters_of(target, collections.abc.Iterable, 1)
        return ContainerShape(ShapeKind.SEQUENCE, element_type=element_type)

    return None


def substitute(target: Any, bindings: dict) -> Any:
    """Replace type variables in ``target`` using ``bindings``.

    Example:
        >>> T = TypeVar("T")
        >>> substitute(Iterable[T], {T: int})
        typing.Iterable[int]
    """
    if isinstance(target, TypeVar):
        return bindings.get(target, target)
    parameters = getattr(target, "__parameters__", ())
    if not bindings or not parameters or not get_args(target):
        return target
    return target[tuple(bindings.get(p, p) for p in parameters)]


def type_bindings(target: Any) -> dict:
    """Map the type variables of a generic class to the arguments in ``target``."""
    origin = runtime_class(target)
    if origin is None:
        return {}
    return dict(zip(getattr(origin, "__parameters__", ()), get_args(target)))


def is_assignable(candidate: type, target: Any) -> bool:
    """Check whether instances of ``candidate`` can be passed where ``target`` is declared.

    Targets that carry no class information (``Any``, type variables, bare
    callables) accept everything.
    """
    if target is None or target is Any or isinstance(target, TypeVar):
        return True
    target = unwrap_optional(target)
    members = union_members(target)
    if members:
        return any(is_assignable(candidate, m) for m in members)
    origin = runtime_class(target)
    if origin is None:
        return True
    return inspect.isclass(candidate) and issubclass(candidate, origin)


def _parameters_of(target: Any, abc_class: type, arity: int) -> tuple:
    origin = runtime_class(target)
    args = get_args(target)

    if origin is abc_class or origin.__module__ in (
        "builtins",
        "collections",
        "collections.abc",
        "typing",
    ):
        if len(args) >= arity:
            return tuple(_erase(a) for a in args[:arity])
        return (Any,) * arity

    bindings = type_bindings(target)
    for base in getattr(origin, "__orig_bases__", ()):
        base_origin = runtime_class(base)
        if base_origin is not None and issubclass(base_origin, abc_class):
            return _parameters_of(substitute(base, bindings), abc_class, arity)
    return (Any,) * arity


def _erase(argument: Any) -> Any:
    return Any if isinstance(argument, TypeVar) else argument
