"""Bound values and construction plans.

Binding produces a tree of :class:`BoundValue` objects rather than live
instances. The tree is inert until :func:`invoke` (or
:meth:`BoundValue.materialise`) runs it, so a failed binding attempt never
constructs anything.

Each bound value renders as a readable expression, which makes plans easy to
inspect and to assert on in tests:

    >>> str(plan)
    "Sink(level=<Level.DEBUG: 10>, formatter=JsonFormatter(), tags=('a', 'b'))"
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from pliable.errors import ContainerMaterialisationError
from pliable.introspection import Constructor
from pliable.shapes import ContainerShape

__all__ = [
    "BoundValue",
    "Constant",
    "ArrayInit",
    "BindingPlan",
    "ContainerType",
    "ContainerPlan",
    "invoke",
]


class BoundValue(ABC):
    """A value bound for a specific target type, ready to be materialised."""

    @abstractmethod
    def materialise(self) -> Any:
        """Produce the live value."""


@dataclass(frozen=True)
class Constant(BoundValue):
    """An already-resolved value: a converted scalar or a literal default."""

    value: Any
    declared_type: Any

    def materialise(self) -> Any:
        return self.value

    def __str__(self):
        return "..." if self.value is Ellipsis else repr(self.value)


@dataclass(frozen=True)
class ArrayInit(BoundValue):
    """A fixed-size sequence of bound elements, materialised as a tuple."""

    element_type: Any
    elements: tuple[BoundValue, ...]

    def materialise(self) -> tuple:
        return tuple(element.materialise() for element in self.elements)

    def __str__(self):
        if len(self.elements) == 1:
            return f"({self.elements[0]},)"
        return f"({', '.join(str(e) for e in self.elements)})"


@dataclass(frozen=True)
class BindingPlan(BoundValue):
    """A selected constructor with one bound value per parameter.

    Attributes:
        constructor: The constructor to call.
        arguments: Bound values in parameter order.
    """

    constructor: Constructor
    arguments: tuple[BoundValue, ...]

    def materialise(self) -> Any:
        return self.constructor.invoke([a.materialise() for a in self.arguments])

    def __str__(self):
        rendered = ", ".join(
            f"{p.name}={a}"
            for p, a in zip(self.constructor.parameters, self.arguments)
        )
        return f"{self.constructor.target.__qualname__}({rendered})"


@dataclass(frozen=True)
class ContainerType:
    """A concrete container class and the operation used to populate it.

    Attributes:
        concrete_type: The class instantiated with no arguments.
        shape: The shape being populated.
        append: Unbound operation adding one element (sequences) or one
            key and value (mappings) to an instance.
    """

    concrete_type: type
    shape: ContainerShape
    append: Callable[..., Any]

    @property
    def append_name(self) -> str:
        return getattr(self.append, "__name__", repr(self.append))


@dataclass(frozen=True)
class ContainerPlan(BoundValue):
    """A container to construct and populate in order.

    Attributes:
        container_type: The concrete container and its append operation.
        items: For sequences, the bound elements. For mappings, pairs of
            converted key and bound value.
    """

    container_type: ContainerType
    items: tuple

    def materialise(self) -> Any:
        concrete_type = self.container_type.concrete_type
        try:
            instance = concrete_type()
        except Exception as e:
            raise ContainerMaterialisationError(
                f"Container type {concrete_type.__qualname__} was selected as "
                f"constructible but could not be created: {e}"
            ) from e

        if self.container_type.shape.is_dictionary:
            for key, value in self.items:
                self._append(instance, key, value.materialise())
        else:
            for element in self.items:
                self._append(instance, element.materialise())
        return instance

    def _append(self, instance: Any, *arguments: Any):
        try:
            self.container_type.append(instance, *arguments)
        except TypeError as e:
            raise ContainerMaterialisationError(
                f"Unable to populate {self.container_type.concrete_type.__qualname__} "
                f"using {self.container_type.append_name}: {e}"
            ) from e

    def __str__(self):
        if self.container_type.shape.is_dictionary:
            rendered = ", ".join(f"{k!r}: {v}" for k, v in self.items)
            body = f"{{{rendered}}}"
        else:
            body = f"[{', '.join(str(e) for e in self.items)}]"
        return f"{self.container_type.concrete_type.__qualname__}({body})"


def invoke(plan: BoundValue) -> Any:
    """Materialise a plan into a live object.

    Args:
        plan: A :class:`BindingPlan`, :class:`ContainerPlan` or any other
            bound value.

    Returns:
        The constructed instance.

    Raises:
        ContainerMaterialisationError: If a selected container type turns out
            not to be constructible.
    """
    return plan.materialise()
