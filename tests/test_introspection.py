from collections import OrderedDict
from datetime import timedelta
from typing import Any

import pytest

from pliable.introspection import (
    NO_DEFAULT,
    Parameter,
    ParameterKind,
    describe,
    has_parameterless_constructor,
    is_abstract,
)
from sample_types import (
    Bag,
    Colour,
    Drawing,
    Endpoint,
    FrozenBag,
    Lazy,
    Pair,
    Port,
    Shape,
    Square,
    Triple,
)


def signatures(target):
    return [str(c) for c in describe(target).constructors]


def test_overloads_are_constructors_in_declaration_order():
    assert signatures(Triple) == [
        "Triple(a: int, b: int, c: int, d: int)",
        "Triple(a: int, b: str, c: str)",
        "Triple(a: str, b: str, c: str)",
    ]
    assert [c.index for c in describe(Triple).constructors] == [0, 1, 2]


def test_overload_parameters_keep_types_and_defaults():
    first, second = describe(Endpoint).constructors

    assert first.parameters == (
        Parameter("a", int),
        Parameter("b", timedelta),
        Parameter("c", str),
        Parameter("d", str, "d"),
    )
    assert second.parameters == (Parameter("a", int), Parameter("c", Shape))


def test_dataclass_has_single_constructor_from_signature():
    (constructor,) = describe(Colour).constructors

    assert str(constructor) == "Colour(r: int, g: int, b: int)"
    assert all(p.default is NO_DEFAULT for p in constructor.parameters)


def test_parameterless_constructor_is_found():
    descriptor = describe(Pair)

    assert descriptor.parameterless_constructor is descriptor.constructors[0]
    assert not descriptor.constructors[1].is_parameterless


def test_classes_without_python_constructor_are_parameterless():
    assert signatures(Square) == ["Square()"]
    assert signatures(list) == ["list()"]
    assert signatures(OrderedDict) == ["OrderedDict()"]


def test_abstract_classes_have_no_constructors():
    descriptor = describe(Shape)

    assert descriptor.is_abstract
    assert descriptor.constructors == ()
    assert describe(Any).constructors == ()


def test_generic_arguments_are_substituted():
    (constructor,) = describe(FrozenBag[Shape]).constructors

    assert constructor.parameters[0].declared_type == tuple[Shape, ...]


def test_descriptor_records_shapes():
    assert describe(tuple[int, ...]).array_element is int
    assert describe(Bag[Shape]).shape.element_type is Shape
    assert describe(Colour).shape is None


def test_var_positional_parameter_is_an_array():
    strings = describe(Drawing).constructors[0].parameters[0]

    assert strings == Parameter(
        "strings", tuple[str, ...], (), ParameterKind.VAR_POSITIONAL
    )


def test_invoke_splats_var_positional_arguments():
    constructor = describe(Drawing).constructors[0]

    drawing = constructor.invoke([("a", "b")])

    assert drawing.strings == ("a", "b")
    assert drawing.shapes == {}


def test_invoke_passes_positional_only_arguments_positionally():
    (constructor,) = describe(Port).constructors

    port = constructor.invoke([8080, "example.com"])

    assert constructor.parameters[0].kind is ParameterKind.POSITIONAL_ONLY
    assert (port.number, port.host) == (8080, "example.com")


def test_invoke_omits_ellipsis_defaults():
    (constructor,) = describe(Lazy).constructors

    lazy = constructor.invoke(["worker", ...])

    assert (lazy.name, lazy.retries) == ("worker", 3)


def test_is_abstract():
    assert is_abstract(Shape)
    assert not is_abstract(Square)
    assert not is_abstract(Bag)


@pytest.mark.parametrize(
    "cls, expected",
    [(list, True), (Bag, True), (Pair, True), (FrozenBag, True), (Colour, False), (Shape, False)],
)
def test_has_parameterless_constructor(cls, expected):
    assert has_parameterless_constructor(cls) is expected
