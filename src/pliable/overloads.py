"""Constructor overload selection.

Given a type and the arguments supplied by a configuration node, choose the
constructor to bind. Selection works on names only; argument values are not
converted here, so the chosen constructor may still fail to bind later.

Ranking, highest first:

1. with no supplied arguments, a zero-parameter constructor wins outright;
2. more parameters matched by name;
3. more matched parameters declared as ``str``;
4. earlier declaration.

Constructors with a parameter that is neither matched nor defaulted are never
selected. A zero-parameter constructor consumes no arguments, so it is only
selected through rule 1.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pliable.introspection import Constructor, Parameter, TypeDescriptor
from pliable.nodes import ConfigurationNode
from pliable.shapes import type_name, unwrap_optional

__all__ = [
    "Outcome",
    "ParameterBinding",
    "ConstructorCandidate",
    "select_constructor",
    "rank_constructors",
    "make_candidate",
]

logger = logging.getLogger(__name__)


class Outcome(Enum):
    MATCHED = "matched"
    DEFAULTED = "defaulted"
    UNBINDABLE = "unbindable"


@dataclass(frozen=True)
class ParameterBinding:
    """The outcome of resolving one parameter against the supplied arguments.

    Attributes:
        parameter: The constructor parameter.
        outcome: Whether it was matched, defaulted or unbindable.
        value: The supplied node when matched, the default when defaulted.
    """

    parameter: Parameter
    outcome: Outcome
    value: Any = None


@dataclass(frozen=True)
class ConstructorCandidate:
    """A constructor together with the binding outcome of each parameter."""

    constructor: Constructor
    bindings: tuple[ParameterBinding, ...]

    @property
    def is_viable(self) -> bool:
        return all(b.outcome is not Outcome.UNBINDABLE for b in self.bindings)

    @property
    def matched_count(self) -> int:
        return sum(1 for b in self.bindings if b.outcome is Outcome.MATCHED)

    @property
    def string_matched_count(self) -> int:
        return sum(
            1
            for b in self.bindings
            if b.outcome is Outcome.MATCHED
            and unwrap_optional(b.parameter.declared_type) is str
        )

    def rank(self) -> tuple[int, int, int]:
        """Sort key placing the preferred candidate first."""
        return (-self.matched_count, -self.string_matched_count, self.constructor.index)


def make_candidate(
    constructor: Constructor, supplied: Mapping[str, ConfigurationNode]
) -> ConstructorCandidate:
    """Resolve every parameter of ``constructor`` against ``supplied``."""
    return ConstructorCandidate(
        constructor, tuple(_bind_parameter(p, supplied) for p in constructor.parameters)
    )


def select_constructor(
    descriptor: TypeDescriptor, supplied: Mapping[str, ConfigurationNode]
) -> Optional[ConstructorCandidate]:
    """Select the constructor to bind for the supplied arguments.

    Args:
        descriptor: The type being constructed.
        supplied: Configuration nodes keyed by argument name. Lookups must
            ignore case, as :class:`~pliable.nodes.SuppliedArguments` does.

    Returns:
        The top-ranked viable :class:`ConstructorCandidate`, or None if no
        constructor can be called with the supplied arguments.

    Example:
        >>> node = node_from_mapping({"a": "1", "b": "2", "c": "3"})
        >>> candidate = select_constructor(describe(Triple), SuppliedArguments.from_node(node))
        >>> str(candidate.constructor)
        'Triple(a: str, b: str, c: str)'
    """
    return next(iter(rank_constructors(descriptor, supplied)), None)


def rank_constructors(
    descriptor: TypeDescriptor, supplied: Mapping[str, ConfigurationNode]
) -> list[ConstructorCandidate]:
    """Return every viable candidate, preferred first."""
    if len(supplied) == 0 and descriptor.parameterless_constructor is not None:
        return [ConstructorCandidate(descriptor.parameterless_constructor, ())]

    candidates = [
        make_candidate(constructor, supplied)
        for constructor in descriptor.constructors
        if not constructor.is_parameterless
    ]
    viable = sorted(
        (c for c in candidates if c.is_viable), key=ConstructorCandidate.rank
    )
    if not viable:
        logger.debug(
            "No constructor of %s accepts arguments %s",
            type_name(descriptor.target),
            sorted(supplied),
        )
    return viable


def _bind_parameter(
    parameter: Parameter, supplied: Mapping[str, ConfigurationNode]
) -> ParameterBinding:
    if parameter.name in supplied:
        return ParameterBinding(parameter, Outcome.MATCHED, supplied[parameter.name])
    if parameter.has_default:
        return ParameterBinding(parameter, Outcome.DEFAULTED, parameter.default)
    return ParameterBinding(parameter, Outcome.UNBINDABLE)
