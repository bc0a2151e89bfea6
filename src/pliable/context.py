"""Collaborators and settings shared by one binding operation."""

from dataclasses import dataclass, field
from typing import Any, Callable

from pliable.argument_sources import ArgumentSource, node_passthrough
from pliable.converters import ImportTypeResolver, ScalarConverter

__all__ = ["BindingContext", "DEFAULT_TYPE_DIRECTIVE_KEYS"]

DEFAULT_TYPE_DIRECTIVE_KEYS = ("$type", "type")


@dataclass(frozen=True)
class BindingContext:
    """Everything the binder needs beyond the node and the target type.

    Attributes:
        type_resolver: Resolves type directive values to classes, raising
            :class:`~pliable.errors.TypeResolutionError` on failure.
        scalar_converter: Converts scalar text to a target type, raising
            :class:`~pliable.errors.ConversionError` on failure.
        argument_sources: Consulted in order before the standard rules for
            every node being bound; the first non-None result is used.
        type_directive_keys: Reserved keys naming an explicit type, in
            priority order.

    Example:
        >>> context = BindingContext(
        ...     type_resolver=ImportTypeResolver({"console": ConsoleSink}),
        ...     scalar_converter=ScalarConverter({Colour: Colour.parse}),
        ... )
    """

    type_resolver: Callable[[str], type] = field(default_factory=ImportTypeResolver)
    scalar_converter: Callable[[str, Any], Any] = field(default_factory=ScalarConverter)
    argument_sources: tuple[ArgumentSource, ...] = (node_passthrough,)
    type_directive_keys: tuple[str, ...] = DEFAULT_TYPE_DIRECTIVE_KEYS

    def __post_init__(self):
        for name in ("type_resolver", "scalar_converter"):
            if getattr(self, name) is None:
                raise TypeError(f"BindingContext requires a {name}")
        if self.argument_sources is None:
            raise TypeError("BindingContext requires argument_sources; use () for none")
        object.__setattr__(self, "argument_sources", tuple(self.argument_sources))
        object.__setattr__(self, "type_directive_keys", tuple(self.type_directive_keys))
