"""Configuration nodes and the argument sets derived from them.

A configuration tree is made of :class:`ConfigurationNode` values. Each node has
a key, an optional scalar value and an ordered tuple of children whose keys are
unique without regard to case. The binding engine only ever reads nodes.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

__all__ = ["ConfigurationNode", "SuppliedArguments", "node_from_mapping"]

PATH_SEPARATOR = ":"


@dataclass(frozen=True)
class ConfigurationNode:
    """A keyed unit of hierarchical settings data.

    Attributes:
        key: The node's key within its parent; empty for the root.
        value: The scalar text of the node, if any.
        children: Child nodes in configuration order.
        path: Colon-separated keys from the root to this node.

    Example:
        >>> node = node_from_mapping({"Level": "Debug", "Sinks": ["console"]})
        >>> node.child("level").value
        'Debug'
        >>> node.child("sinks").children[0].path
        'Sinks:0'
    """

    key: str = ""
    value: Optional[str] = None
    children: tuple["ConfigurationNode", ...] = ()
    path: str = ""
    _index: dict[str, "ConfigurationNode"] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self):
        index = {}
        for child in self.children:
            folded = child.key.casefold()
            if folded in index:
                raise ValueError(
                    f"Duplicate key '{child.key}' under configuration path '{self.path}'"
                )
            index[folded] = child
        object.__setattr__(self, "_index", index)

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def is_empty(self) -> bool:
        return self.value is None and not self.children

    def child(self, key: str) -> Optional["ConfigurationNode"]:
        """Look up a direct child by key, ignoring case."""
        return self._index.get(key.casefold())

    def child_value(self, key: str) -> Optional[str]:
        """Return the scalar value of a direct child, or None if absent."""
        found = self.child(key)
        return found.value if found is not None else None


class SuppliedArguments(Mapping):
    """Read-only, case-insensitive mapping of argument names to nodes.

    Built once per binding attempt from the children of a node, optionally
    excluding the key that carried a type directive.
    """

    def __init__(self, nodes: Mapping[str, ConfigurationNode]):
        self._nodes = {name.casefold(): node for name, node in nodes.items()}

    @classmethod
    def from_node(
        cls, node: ConfigurationNode, excluded_key: Optional[str] = None
    ) -> "SuppliedArguments":
        excluded = excluded_key.casefold() if excluded_key is not None else None
        return cls(
            {
                child.key: child
                for child in node.children
                if child.key.casefold() != excluded
            }
        )

    def __getitem__(self, name: str) -> ConfigurationNode:
        return self._nodes[name.casefold()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._nodes

    def __iter__(self) -> Iterator[str]:
        return (node.key for node in self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"SuppliedArguments({list(self)})"


def node_from_mapping(data: Any, key: str = "", path: str = "") -> ConfigurationNode:
    """Build a node tree from plain Python data.

    Mappings become keyed children, lists and tuples become children keyed by
    their index, ``None`` becomes an empty node and every other value becomes
    scalar text (booleans as ``"true"``/``"false"``).

    Args:
        data: The data to convert.
        key: Key of the node being built.
        path: Path of the node being built.

    Returns:
        The root :class:`ConfigurationNode` of the converted data.
    """
    if isinstance(data, Mapping):
        items = [(str(k), v) for k, v in data.items()]
    elif isinstance(data, (list, tuple)):
        items = [(str(i), v) for i, v in enumerate(data)]
    else:
        return ConfigurationNode(key, _scalar_text(data), (), path)

    children = tuple(
        node_from_mapping(value, child_key, _join(path, child_key))
        for child_key, value in items
    )
    return ConfigurationNode(key, None, children, path)


def _scalar_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _join(path: str, key: str) -> str:
    return f"{path}{PATH_SEPARATOR}{key}" if path else key
