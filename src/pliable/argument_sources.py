"""Host-supplied argument sources.

An argument source gets the first chance to bind every configuration node.
It returns a :class:`~pliable.plans.BoundValue` to take over binding for that
node, or None to let the standard rules apply. Sources let a host handle
parameters that are not built from configuration values, such as a
parameter that wants the raw node, or a callback that applies a nested
section to an object created elsewhere.
"""

import collections.abc
import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, get_args, get_origin

from pliable.nodes import ConfigurationNode
from pliable.plans import BoundValue, Constant
from pliable.shapes import unwrap_optional

if TYPE_CHECKING:
    from pliable.binder import ArgumentBinder

__all__ = ["ArgumentSource", "node_passthrough", "NestedConfigurationSource"]

ArgumentSource = Callable[[ConfigurationNode, Any, "ArgumentBinder"], Optional[BoundValue]]


def node_passthrough(
    node: ConfigurationNode, target_type: Any, binder: "ArgumentBinder"
) -> Optional[BoundValue]:
    """Bind parameters declared as :class:`ConfigurationNode` to the node itself."""
    if unwrap_optional(target_type) is ConfigurationNode:
        return Constant(node, ConfigurationNode)
    return None


@dataclass(frozen=True)
class NestedConfigurationSource:
    """Bind ``Callable[[T], ...]`` parameters to a callback configuring a ``T``.

    The callback applies the node to whatever ``T`` instance it is later
    called with, so a component can defer configuration of an object it
    creates itself.

    Attributes:
        configured_type: The ``T`` in ``Callable[[T], ...]``.
        apply: Called as ``apply(node, instance)`` when the callback runs.

    Example:
        >>> def configure_pipeline(node, pipeline):
        ...     for stage in node.children:
        ...         pipeline.add(stage.value)
        >>> context = BindingContext(
        ...     argument_sources=(NestedConfigurationSource(Pipeline, configure_pipeline),)
        ... )
    """

    configured_type: type
    apply: Callable[[ConfigurationNode, Any], Any]

    def __call__(
        self, node: ConfigurationNode, target_type: Any, binder: "ArgumentBinder"
    ) -> Optional[BoundValue]:
        target_type = unwrap_optional(target_type)
        if get_origin(target_type) is not collections.abc.Callable:
            return None
        arguments = get_args(target_type)
        if not arguments or arguments[0] != [self.configured_type]:
            return None
        return Constant(functools.partial(self.apply, node), target_type)
