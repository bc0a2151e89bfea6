"""High level entry points for binding configuration."""

from typing import Any, Optional

from pliable.binder import ArgumentBinder, ConstructionPlan
from pliable.context import BindingContext
from pliable.errors import BindingError
from pliable.nodes import ConfigurationNode
from pliable.plans import invoke
from pliable.shapes import type_name

__all__ = ["try_build_construction_plan", "invoke", "bind"]


def try_build_construction_plan(
    node: ConfigurationNode,
    target_type: Any = None,
    context: Optional[BindingContext] = None,
) -> Optional[ConstructionPlan]:
    """Plan the construction of an object from a configuration node.

    The node's children are the named constructor arguments. A type directive
    on the node (``$type`` or ``type``) takes precedence over ``target_type``
    when it names a concrete class assignable to it.

    Args:
        node: The node to bind.
        target_type: The type to construct. May be omitted when the node
            carries a type directive.
        context: Collaborators and settings; defaults to
            :class:`BindingContext` with its standard collaborators.

    Returns:
        A :class:`~pliable.plans.BindingPlan` or
        :class:`~pliable.plans.ContainerPlan` ready for :func:`invoke`, or
        None if no constructor or container can be bound.

    Example:
        >>> node = node_from_mapping({"path": "app.log", "level": "warning"})
        >>> plan = try_build_construction_plan(node, FileSink)
        >>> str(plan)
        "FileSink(path='app.log', level=<Level.WARNING: 30>)"
        >>> sink = invoke(plan)
    """
    return ArgumentBinder(context or BindingContext()).build_construction_plan(
        node, target_type
    )


def bind(
    node: ConfigurationNode,
    target_type: Any,
    context: Optional[BindingContext] = None,
) -> Any:
    """Bind a configuration node of any kind to ``target_type`` and build it.

    Unlike :func:`try_build_construction_plan`, scalar nodes are converted
    and array-shaped targets are accepted.

    Args:
        node: The node to bind.
        target_type: The type to produce.
        context: Collaborators and settings.

    Returns:
        The constructed value.

    Raises:
        BindingError: If the node cannot be bound to ``target_type``. The
            error's ``path`` names the offending node.
    """
    bound = ArgumentBinder(context or BindingContext()).bind(node, target_type)
    if bound is None:
        location = f"'{node.path}'" if node.path else "the configuration root"
        raise BindingError(
            f"Unable to bind configuration at {location} to {type_name(target_type)}",
            node.path,
        )
    return invoke(bound)
