"""Recursive binding of configuration nodes to typed values.

:class:`ArgumentBinder` turns a configuration node into a
:class:`~pliable.plans.BoundValue` for a target type. Every failure is soft:
the binder returns None and logs at DEBUG, so that callers can try the next
constructor or alternative. Only the public entry points in
:mod:`pliable.builders` turn an overall failure into an exception.

Binding a value to a target type applies the first rule that fits:

1. a literal default binds as a constant;
2. host argument sources (see :mod:`pliable.argument_sources`);
3. scalar text is converted by the scalar converter;
4. children bound to ``tuple[T, ...]`` become a tuple of ``T``;
5. children otherwise build a construction plan, trying in order the node's
   type directive, the target type's constructors and finally a container
   for sequence- or mapping-shaped targets;
6. an empty node fails.

Only the top-ranked constructor is bound. If one of its arguments fails, the
constructor path fails; lower-ranked constructors are not tried.
"""

import logging
from typing import Any, Optional, Union

from pliable.containers import plan_container, select_container
from pliable.context import BindingContext
from pliable.directives import resolve_directive
from pliable.errors import ConversionError
from pliable.introspection import describe
from pliable.nodes import ConfigurationNode, SuppliedArguments
from pliable.overloads import select_constructor
from pliable.plans import (
    ArrayInit,
    BindingPlan,
    BoundValue,
    Constant,
    ContainerPlan,
)
from pliable.shapes import (
    analyse_shape,
    array_element_type,
    is_assignable,
    type_name,
    union_members,
    unwrap_optional,
)

__all__ = ["ArgumentBinder", "ConstructionPlan"]

logger = logging.getLogger(__name__)

ConstructionPlan = Union[BindingPlan, ContainerPlan]


class ArgumentBinder:
    """Bind configuration nodes to constructor arguments, recursively.

    The binder holds no state beyond its context and may be shared between
    threads.

    Args:
        context: Collaborators and settings for binding.
    """

    def __init__(self, context: BindingContext):
        if context is None:
            raise TypeError("ArgumentBinder requires a BindingContext")
        self.context = context

    def bind(self, value: Any, target_type: Any) -> Optional[BoundValue]:
        """Bind a node or literal to ``target_type``.

        Args:
            value: A :class:`ConfigurationNode`, or a literal default value
                taken from a constructor parameter.
            target_type: The declared type of the receiving parameter.

        Returns:
            The bound value, or None if the value cannot be bound.
        """
        if not isinstance(value, ConfigurationNode):
            return Constant(value, target_type)

        for source in self.context.argument_sources:
            bound = source(value, target_type, self)
            if bound is not None:
                return bound

        if value.value is not None:
            return self._bind_scalar(value, target_type)

        if not value.has_children:
            logger.debug(
                "Empty configuration at '%s' cannot bind to %s",
                value.path,
                type_name(target_type),
            )
            return None

        element_type = array_element_type(target_type)
        if element_type is not None:
            return self._bind_array(value, element_type)

        return self.build_construction_plan(value, target_type)

    def build_construction_plan(
        self, node: ConfigurationNode, target_type: Any = None
    ) -> Optional[ConstructionPlan]:
        """Plan the construction of an object from a node's children.

        The node's type directive is tried first, provided it names a class
        assignable to ``target_type``. Then ``target_type`` itself is tried:
        through its constructors, or as a container when it is sequence- or
        mapping-shaped.

        Args:
            node: The node whose children supply constructor arguments.
            target_type: The expected type; may be None when the node carries
                a type directive.

        Returns:
            A :class:`BindingPlan` or :class:`ContainerPlan`, or None.
        """
        target_type = unwrap_optional(target_type)
        directive = resolve_directive(node, self.context)

        if directive is not None:
            plan = self._plan_from_directive(node, target_type, *directive)
            if plan is not None:
                return plan

        if target_type is None:
            logger.debug("No usable type directive at '%s'", node.path)
            return None

        supplied = SuppliedArguments.from_node(node)
        # a resolved directive key is never a container entry
        container_supplied = directive[1] if directive is not None else supplied

        for member in union_members(target_type) or (target_type,):
            plan = self._plan_constructor(node, member, supplied)
            if plan is None:
                plan = self._plan_container(node, member, None, container_supplied)
            if plan is not None:
                return plan
        return None

    def _plan_from_directive(
        self,
        node: ConfigurationNode,
        target_type: Any,
        resolved_type: type,
        supplied: SuppliedArguments,
    ) -> Optional[ConstructionPlan]:
        if not is_assignable(resolved_type, target_type):
            logger.debug(
                "Ignoring type directive at '%s': %s is not assignable to %s",
                node.path,
                resolved_type.__qualname__,
                type_name(target_type),
            )
            return None

        plan = self._plan_constructor(node, resolved_type, supplied)
        if plan is not None:
            return plan

        container_target = target_type if target_type is not None else resolved_type
        return self._plan_container(node, container_target, resolved_type, supplied)

    def _plan_constructor(
        self, node: ConfigurationNode, target_type: Any, supplied: SuppliedArguments
    ) -> Optional[BindingPlan]:
        descriptor = describe(target_type)
        candidate = select_constructor(descriptor, supplied)
        if candidate is None:
            return None

        arguments = []
        for binding in candidate.bindings:
            bound = self.bind(binding.value, binding.parameter.declared_type)
            if bound is None:
                logger.debug(
                    "Unable to bind parameter '%s' of %s at '%s'",
                    binding.parameter.name,
                    candidate.constructor,
                    node.path,
                )
                return None
            arguments.append(bound)
        return BindingPlan(candidate.constructor, tuple(arguments))

    def _plan_container(
        self,
        node: ConfigurationNode,
        target_type: Any,
        concrete_type: Optional[type],
        supplied: SuppliedArguments,
    ) -> Optional[ContainerPlan]:
        shape = analyse_shape(target_type)
        if shape is None:
            return None

        container_type = select_container(target_type, shape, concrete_type)
        if container_type is None:
            return None

        plan = plan_container(
            container_type,
            _with_children(node, supplied),
            self.bind,
            self.context.scalar_converter,
        )
        if plan is None:
            logger.debug(
                "Unable to populate %s at '%s'",
                container_type.concrete_type.__qualname__,
                node.path,
            )
        return plan

    def _bind_scalar(self, node: ConfigurationNode, target_type: Any) -> Optional[Constant]:
        try:
            converted = self.context.scalar_converter(node.value, target_type)
        except ConversionError as e:
            logger.debug("Unable to convert value at '%s': %s", node.path, e)
            return None
        return Constant(converted, target_type)

    def _bind_array(self, node: ConfigurationNode, element_type: Any) -> Optional[ArrayInit]:
        elements = []
        for child in node.children:
            element = self.bind(child, element_type)
            if element is None:
                logger.debug(
                    "Unable to bind element '%s' of array at '%s'", child.key, node.path
                )
                return None
            elements.append(element)
        return ArrayInit(element_type, tuple(elements))


def _with_children(node: ConfigurationNode, supplied: SuppliedArguments) -> ConfigurationNode:
    if len(supplied) == len(node.children):
        return node
    children = tuple(child for child in node.children if child.key in supplied)
    return ConfigurationNode(node.key, node.value, children, node.path)
