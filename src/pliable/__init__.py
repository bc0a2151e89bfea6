"""Pliable configuration binding.

Pliable binds hierarchical, loosely-typed configuration onto strongly-typed
object graphs. It needs no factories or registration on the target types:
constructors are discovered from signatures, type hints and
``typing.overload`` declarations on ``__init__``, and every argument is
converted recursively to its declared type.

Key Features:
    - Constructor overload selection by argument name, with defaults
    - Recursive binding of nested objects, tuples, lists, sets and mappings
    - Explicit type directives (``$type``) overriding the declared type
    - Standard implementations substituted for abstract container types
    - Plans that are inspectable before anything is constructed

Basic Usage:
    >>> from pliable.nodes import node_from_mapping
    >>> from pliable.builders import bind
    >>>
    >>> class FileSink:
    ...     def __init__(self, path: str, buffered: bool = False):
    ...         self.path = path
    ...         self.buffered = buffered
    >>>
    >>> node = node_from_mapping({"path": "app.log", "buffered": "true"})
    >>> sink = bind(node, FileSink)

The package consists of several modules:
    - builders: High-level entry points
    - binder: Recursive argument binding
    - overloads: Constructor selection
    - containers: Concrete container selection
    - directives: Type directive resolution
    - introspection: Type descriptors built from runtime introspection
    - shapes: Array, sequence and mapping classification
    - plans: Bound values and construction plans
    - converters: Default scalar converter and type resolver
    - argument_sources: Host-supplied argument sources
    - context: Binding collaborators and settings
    - nodes: Configuration nodes
    - errors: Framework-specific exceptions
"""
