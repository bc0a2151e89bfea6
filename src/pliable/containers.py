"""Selection and population of concrete containers.

When a parameter is declared with a container shape that no constructor can
satisfy (typically an abstract type such as ``Iterable[T]`` or
``Mapping[K, V]``), the binder falls back to building a container directly.
Abstract types are replaced with a standard implementation from a
prioritised list of substitutions; concrete types are used as they are.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from pliable.errors import ConversionError
from pliable.introspection import has_parameterless_constructor, is_abstract
from pliable.nodes import ConfigurationNode
from pliable.plans import BoundValue, ContainerPlan, ContainerType
from pliable.shapes import ContainerShape, ShapeKind, runtime_class, type_name

__all__ = ["Substitution", "SUBSTITUTIONS", "select_container", "plan_container"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Substitution:
    """A standard implementation used in place of an abstract container type.

    Attributes:
        kind: The shape the substitution applies to.
        concrete_type: The implementation class.
        append_name: Name of the method that adds to an instance.
    """

    kind: ShapeKind
    concrete_type: type
    append_name: str


SUBSTITUTIONS: tuple[Substitution, ...] = (
    Substitution(ShapeKind.DICTIONARY, dict, "__setitem__"),
    Substitution(ShapeKind.SEQUENCE, list, "append"),
    Substitution(ShapeKind.SEQUENCE, set, "add"),
)

_APPEND_NAMES = {
    ShapeKind.DICTIONARY: ("__setitem__",),
    ShapeKind.SEQUENCE: ("append", "add"),
}


def select_container(
    target_type: Any,
    shape: ContainerShape,
    concrete_type: Optional[type] = None,
) -> Optional[ContainerType]:
    """Choose a concrete container type for a container-shaped target.

    Args:
        target_type: The requested type, e.g. ``AbstractSet[int]``.
        shape: The container shape of the requested type.
        concrete_type: An explicitly requested implementation, e.g. from a
            type directive. It must be assignment-compatible with the target.

    Returns:
        The :class:`ContainerType` to build, or None if no concrete type with a
        zero-argument constructor and a suitable append operation qualifies.

    Example:
        >>> select_container(Iterable[int], analyse_shape(Iterable[int])).concrete_type
        <class 'list'>
        >>> select_container(AbstractSet[int], analyse_shape(AbstractSet[int])).concrete_type
        <class 'set'>
    """
    origin = runtime_class(target_type)
    if origin is None:
        return None

    if concrete_type is not None:
        if not issubclass(concrete_type, origin) or is_abstract(concrete_type):
            return None
        return _container_type(concrete_type, shape, _APPEND_NAMES[shape.kind])

    if not is_abstract(origin):
        return _container_type(origin, shape, _APPEND_NAMES[shape.kind])

    for substitution in SUBSTITUTIONS:
        if substitution.kind is shape.kind and issubclass(substitution.concrete_type, origin):
            return _container_type(
                substitution.concrete_type, shape, (substitution.append_name,)
            )

    logger.debug("No standard container substitutes for %s", type_name(target_type))
    return None


def plan_container(
    container_type: ContainerType,
    node: ConfigurationNode,
    bind_element: Callable[[ConfigurationNode, Any], Optional[BoundValue]],
    convert_key: Callable[[str, Any], Any],
) -> Optional[ContainerPlan]:
    """Bind every child of ``node`` as an element of the container.

    Args:
        container_type: The selected concrete container.
        node: The node whose children become the container's contents.
        bind_element: Binds a child node to an element (or value) type.
        convert_key: Converts a child's key text to the mapping key type.

    Returns:
        The :class:`ContainerPlan`, or None if any element fails to bind.
    """
    shape = container_type.shape
    items = []
    for child in node.children:
        if shape.is_dictionary:
            try:
                key = convert_key(child.key, shape.key_type)
            except ConversionError as e:
                logger.debug("Unable to convert key at '%s': %s", child.path, e)
                return None
            value = bind_element(child, shape.value_type)
            if value is None:
                return None
            items.append((key, value))
        else:
            element = bind_element(child, shape.element_type)
            if element is None:
                return None
            items.append(element)
    return ContainerPlan(container_type, tuple(items))


def _container_type(
    concrete_type: type, shape: ContainerShape, append_names: tuple[str, ...]
) -> Optional[ContainerType]:
    if not has_parameterless_constructor(concrete_type):
        logger.debug("%s has no zero-argument constructor", concrete_type.__qualname__)
        return None

    arity = 2 if shape.is_dictionary else 1
    accepted = (
        (shape.key_type, shape.value_type) if shape.is_dictionary else (shape.element_type,)
    )
    for name in append_names:
        append = getattr(concrete_type, name, None)
        if callable(append) and _accepts(append, arity, accepted):
            return ContainerType(concrete_type, shape, append)

    logger.debug(
        "%s has no %d-argument append operation for %s",
        concrete_type.__qualname__,
        arity,
        ", ".join(type_name(t) for t in accepted),
    )
    return None


def _accepts(method: Callable, arity: int, accepted: tuple) -> bool:
    try:
        signature = inspect.signature(method)
    except (ValueError, TypeError):
        return True

    parameters = list(signature.parameters.values())[1:]
    positional = [
        p
        for p in parameters
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    required = [p for p in positional if p.default is inspect.Parameter.empty]
    if len(required) > arity or len(positional) < arity:
        return False
    return all(
        _annotation_accepts(p.annotation, t) for p, t in zip(positional, accepted)
    )


def _annotation_accepts(annotation: Any, argument_type: Any) -> bool:
    if annotation in (inspect.Parameter.empty, Any, object) or isinstance(annotation, TypeVar):
        return True
    if isinstance(annotation, str) or argument_type is Any:
        return True
    annotation_class = runtime_class(annotation)
    argument_class = runtime_class(argument_type)
    if annotation_class is None or argument_class is None:
        return annotation == argument_type
    return issubclass(argument_class, annotation_class)
