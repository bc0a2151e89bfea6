"""Default scalar conversion and type-name resolution.

The binding engine treats both as capabilities supplied through
:class:`~pliable.context.BindingContext`: a scalar converter is any callable
``(text, target_type) -> value`` raising :class:`ConversionError`, and a type
resolver is any callable ``(name) -> type`` raising
:class:`TypeResolutionError`. The implementations here are used when the host
supplies nothing else.
"""

import builtins
import datetime
import enum
import functools
import importlib
import inspect
import re
from typing import Any, Callable, Literal, Mapping, Optional, TypeVar, get_args, get_origin

from pydantic import PydanticSchemaGenerationError, TypeAdapter

from pliable.errors import ConversionError, TypeResolutionError
from pliable.shapes import type_name, union_members

__all__ = ["ScalarConverter", "ImportTypeResolver", "parse_timedelta"]

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}

_TIMESPAN = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?$"
)

# Raised by importlib for names that are not importable modules, including
# empty and relative names.
_NOT_A_MODULE = (ImportError, ValueError, TypeError)


class ScalarConverter:
    """Convert configuration text to typed values.

    Text is validated with pydantic in lax mode, which covers numbers,
    booleans, dates and times, decimals, UUIDs, paths, IP addresses and
    bytes. Enums additionally match member names ignoring case, timedeltas
    accept ``[-][d.]hh:mm[:ss[.fffffff]]``, and optional targets convert
    empty text or ``null`` to None.

    Args:
        converters: Optional per-type conversion functions taking the text and
            returning a value. They take precedence over the built-in rules.

    Example:
        >>> convert = ScalarConverter()
        >>> convert("00:01:30", datetime.timedelta)
        datetime.timedelta(seconds=90)
        >>> convert("warning", LogLevel)
        <LogLevel.WARNING: 30>
    """

    def __init__(self, converters: Optional[Mapping[type, Callable[[str], Any]]] = None):
        self._converters = dict(converters or {})

    def __call__(self, text: str, target_type: Any) -> Any:
        try:
            return self._convert(text, target_type)
        except ConversionError:
            raise
        except (ValueError, TypeError, ArithmeticError, KeyError) as e:
            raise ConversionError(
                f"Cannot convert '{text}' to {type_name(target_type)}: {e}"
            ) from e

    def _convert(self, text: str, target_type: Any) -> Any:
        if target_type is Any or target_type is object or isinstance(target_type, TypeVar):
            return text

        if target_type in self._converters:
            return self._converters[target_type](text)

        members = union_members(target_type)
        if members:
            return self._convert_union(text, target_type, members)

        if get_origin(target_type) is Literal:
            return self._convert_literal(text, target_type)

        if inspect.isclass(target_type):
            if issubclass(target_type, str):
                return target_type(text)
            if issubclass(target_type, enum.Enum):
                return _parse_enum(text, target_type)
            if issubclass(target_type, datetime.timedelta):
                return parse_timedelta(text)

        return _adapter(target_type).validate_python(text.strip())

    def _convert_union(self, text: str, target_type: Any, members: tuple) -> Any:
        if type(None) in members and text.strip() in ("", "null"):
            return None
        failures = []
        for member in members:
            if member is type(None):
                continue
            try:
                return self(text, member)
            except ConversionError as e:
                failures.append(str(e))
        raise ConversionError(
            f"Cannot convert '{text}' to {type_name(target_type)}: {'; '.join(failures)}"
        )

    def _convert_literal(self, text: str, target_type: Any) -> Any:
        for allowed in get_args(target_type):
            if str(allowed) == text or (
                isinstance(allowed, bool) and _matches_bool(text, allowed)
            ):
                return allowed
        raise ConversionError(f"'{text}' is not one of {get_args(target_type)}")


@functools.lru_cache(maxsize=256)
def _adapter(target_type: Any) -> TypeAdapter:
    try:
        return TypeAdapter(target_type)
    except PydanticSchemaGenerationError as e:
        raise ConversionError(f"No scalar conversion to {type_name(target_type)}") from e


def parse_timedelta(text: str) -> datetime.timedelta:
    """Parse ``[-][d.]hh:mm[:ss[.fffffff]]`` or a number of seconds.

    Example:
        >>> parse_timedelta("1.02:00:00")
        datetime.timedelta(days=1, seconds=7200)
        >>> parse_timedelta("2.5")
        datetime.timedelta(seconds=2, microseconds=500000)
    """
    text = text.strip()
    match = _TIMESPAN.match(text)
    if match is None:
        return datetime.timedelta(seconds=float(text))

    fraction = match["fraction"] or "0"
    value = datetime.timedelta(
        days=int(match["days"] or 0),
        hours=int(match["hours"]),
        minutes=int(match["minutes"]),
        seconds=int(match["seconds"] or 0),
        microseconds=int(fraction.ljust(7, "0")) / 10,
    )
    return -value if match["sign"] else value


def _parse_bool(text: str) -> bool:
    folded = text.strip().casefold()
    if folded in _TRUE:
        return True
    if folded in _FALSE:
        return False
    raise ValueError(f"'{text}' is not a boolean")


def _matches_bool(text: str, expected: bool) -> bool:
    try:
        return _parse_bool(text) is expected
    except ValueError:
        return False


def _parse_enum(text: str, enum_type: type[enum.Enum]) -> enum.Enum:
    stripped = text.strip()
    for member in enum_type:
        if member.name.casefold() == stripped.casefold():
            return member
    for member in enum_type:
        if str(member.value) == stripped:
            return member
    raise ValueError(f"'{text}' is not a member of {enum_type.__qualname__}")


class ImportTypeResolver:
    """Resolve type names by importing the module that defines them.

    Accepted forms are ``package.module.Name``, ``package.module:Outer.Inner``
    and the names of builtins such as ``dict``. Aliases are checked first.

    Args:
        aliases: Optional mapping of short names to classes.

    Example:
        >>> resolve = ImportTypeResolver({"console": ConsoleSink})
        >>> resolve("collections.OrderedDict")
        <class 'collections.OrderedDict'>
        >>> resolve("console")
        <class 'ConsoleSink'>
    """

    def __init__(self, aliases: Optional[Mapping[str, type]] = None):
        self._aliases = dict(aliases or {})

    def __call__(self, name: str) -> type:
        name = name.strip()
        if name in self._aliases:
            return self._aliases[name]

        resolved = self._import(name)
        if not inspect.isclass(resolved):
            raise TypeResolutionError(f"'{name}' does not name a class")
        return resolved

    def _import(self, name: str) -> Any:
        if ":" in name:
            module_name, _, qualified_name = name.partition(":")
            return _lookup(_import_module(module_name, name), qualified_name, name)

        if "." not in name:
            if hasattr(builtins, name):
                return getattr(builtins, name)
            raise TypeResolutionError(f"Unknown type '{name}'")

        parts = name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
            except _NOT_A_MODULE:
                continue
            except Exception as e:
                raise _import_failed(module_name, name, e) from e
            return _lookup(module, ".".join(parts[split:]), name)
        raise TypeResolutionError(f"No module found for type '{name}'")


def _import_module(module_name: str, name: str) -> Any:
    try:
        return importlib.import_module(module_name)
    except Exception as e:
        raise _import_failed(module_name, name, e) from e


def _import_failed(module_name: str, name: str, error: Exception) -> TypeResolutionError:
    return TypeResolutionError(
        f"Cannot import module '{module_name}' for type '{name}': {error!r}"
    )


def _lookup(module: Any, qualified_name: str, name: str) -> Any:
    resolved = module
    for attribute in qualified_name.split("."):
        try:
            resolved = getattr(resolved, attribute)
        except AttributeError as e:
            raise TypeResolutionError(f"Unknown type '{name}'") from e
    return resolved
