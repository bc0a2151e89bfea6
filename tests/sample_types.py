import typing
from abc import ABC, abstractmethod
from collections.abc import (
    Collection,
    Iterable,
    Iterator,
    Mapping,
    MutableMapping,
    MutableSequence,
    MutableSet,
    Sequence,
    Set as AbstractSet,
)
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Callable, Optional, TypeVar, overload

from pliable.nodes import ConfigurationNode

T = TypeVar("T")


def directive(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class Shape(ABC):
    @abstractmethod
    def area(self) -> float:
        pass


class Square(Shape):
    def area(self) -> float:
        return 1.0


class Circle(Shape):
    def area(self) -> float:
        return 3.14


class Level(Enum):
    DEBUG = 10
    INFO = 20
    WARNING = 30


class Endpoint:
    @overload
    def __init__(self, a: int, b: timedelta, c: str, d: str = "d") -> None: ...

    @overload
    def __init__(self, a: int, c: Shape) -> None: ...

    def __init__(self, a, b=None, c=None, d=None):
        self.a = a
        self.b = b
        self.c = c
        self.d = d


class Holder:
    def __init__(self, b: int, a: Endpoint, c: Optional[int] = None):
        self.b = b
        self.a = a
        self.c = c


class Triple:
    @overload
    def __init__(self, a: int, b: int, c: int, d: int = 4) -> None: ...

    @overload
    def __init__(self, a: int, b: str, c: str) -> None: ...

    @overload
    def __init__(self, a: str, b: str, c: str) -> None: ...

    def __init__(self, a, b, c, d=None):
        self.values = (a, b, c, d)


class Labelled:
    def __init__(self, type: str, e: Triple):
        self.type = type
        self.e = e


class Pair:
    @overload
    def __init__(self) -> None: ...

    @overload
    def __init__(self, a: int = 1, b: int = 2) -> None: ...

    def __init__(self, a=None, b=None):
        self.a = a
        self.b = b


class Bag(typing.Iterable[T]):
    def __init__(self):
        self.items: list[T] = []

    def add(self, item: T) -> None:
        self.items.append(item)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)


class FrozenBag(typing.Iterable[T]):
    def __init__(self, items: tuple[T, ...] = ()):
        self.items = items

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)


class Drawing:
    @overload
    def __init__(self, *strings: str) -> None: ...

    @overload
    def __init__(self, *, array: tuple[Shape, ...]) -> None: ...

    @overload
    def __init__(self, *, concrete: Bag[Shape]) -> None: ...

    @overload
    def __init__(self, *, iterable: Iterable[Shape]) -> None: ...

    @overload
    def __init__(self, *, collection: Collection[Shape]) -> None: ...

    @overload
    def __init__(self, *, sequence: Sequence[Shape]) -> None: ...

    @overload
    def __init__(self, *, mutable_sequence: MutableSequence[Shape]) -> None: ...

    @overload
    def __init__(self, *, set: AbstractSet[Shape]) -> None: ...

    @overload
    def __init__(self, *, mutable_set: MutableSet[Shape]) -> None: ...

    @overload
    def __init__(self, *, mapping: Mapping[str, Shape]) -> None: ...

    @overload
    def __init__(self, *, mutable_mapping: MutableMapping[str, Shape]) -> None: ...

    def __init__(self, *strings, **shapes):
        self.strings = strings
        self.shapes = shapes


@dataclass(frozen=True)
class Colour:
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class Canvas:
    background: Colour
    title: str = "untitled"


@dataclass(frozen=True)
class Sink:
    level: Level
    flush_interval: timedelta = timedelta(seconds=5)
    tags: tuple[str, ...] = ()
    properties: Optional[Mapping[str, int]] = None


class Pipeline:
    def __init__(self):
        self.stages = []

    def add(self, stage: str) -> None:
        self.stages.append(stage)


class Application:
    def __init__(self, name: str, configure: Callable[[Pipeline], None]):
        self.name = name
        self.configure = configure


class Inspector:
    def __init__(self, settings: ConfigurationNode, name: str = "inspector"):
        self.settings = settings
        self.name = name


class Port:
    def __init__(self, number: int, /, host: str = "localhost"):
        self.number = number
        self.host = host


class Lazy:
    @overload
    def __init__(self, name: str, retries: int = ...) -> None: ...

    def __init__(self, name, retries=3):
        self.name = name
        self.retries = retries
