"""Resolution of explicit type directives.

A node may name the type to construct through a reserved key, ``$type`` or
``type`` by default::

    {"$type": "myapp.sinks.FileSink", "path": "app.log"}

A directive that cannot be resolved, or that names an abstract type, is
treated as absent so that binding can fall back to the statically declared
type.
"""

import inspect
import logging
from typing import Optional

from pliable.context import BindingContext
from pliable.errors import TypeResolutionError
from pliable.introspection import is_abstract
from pliable.nodes import ConfigurationNode, SuppliedArguments

__all__ = ["resolve_directive"]

logger = logging.getLogger(__name__)


def resolve_directive(
    node: ConfigurationNode, context: BindingContext
) -> Optional[tuple[type, SuppliedArguments]]:
    """Resolve the type directive carried by ``node``, if any.

    The first directive key holding a scalar value is used; later keys are
    not consulted even if the first fails to resolve.

    Args:
        node: The node that may carry a directive.
        context: Supplies the directive keys and the type resolver.

    Returns:
        The resolved concrete class and the node's remaining children as
        supplied arguments, or None if there is no usable directive.
    """
    directive_key = next(
        (key for key in context.type_directive_keys if node.child_value(key) is not None),
        None,
    )
    if directive_key is None:
        return None

    type_name = node.child_value(directive_key)
    try:
        resolved = context.type_resolver(type_name)
    except TypeResolutionError as e:
        logger.debug("Ignoring type directive at '%s': %s", node.path, e)
        return None

    if not inspect.isclass(resolved) or is_abstract(resolved):
        logger.debug(
            "Ignoring type directive at '%s': '%s' is not a concrete class",
            node.path,
            type_name,
        )
        return None

    return resolved, SuppliedArguments.from_node(node, excluded_key=directive_key)
