import datetime
import decimal
import ipaddress
import uuid
from collections import OrderedDict
from pathlib import PurePath
from typing import Any, Literal, Optional, Union

import pytest

from pliable.converters import ImportTypeResolver, ScalarConverter, parse_timedelta
from pliable.errors import BindingError, ConversionError, TypeResolutionError
from sample_types import Colour, Level, Shape, Square


@pytest.fixture
def convert():
    return ScalarConverter()


@pytest.mark.parametrize(
    "text, target_type, expected",
    [
        ("hello", str, "hello"),
        ("hello", Any, "hello"),
        (" 42 ", int, 42),
        ("2.5", float, 2.5),
        ("Yes", bool, True),
        ("off", bool, False),
        ("warning", Level, Level.WARNING),
        ("20", Level, Level.INFO),
        ("1.5", decimal.Decimal, decimal.Decimal("1.5")),
        ("logs/app.log", PurePath, PurePath("logs/app.log")),
        (
            "12345678-1234-5678-1234-567812345678",
            uuid.UUID,
            uuid.UUID("12345678-1234-5678-1234-567812345678"),
        ),
        ("2024-02-29", datetime.date, datetime.date(2024, 2, 29)),
        ("2024-02-29T10:30:00", datetime.datetime, datetime.datetime(2024, 2, 29, 10, 30)),
        ("abc", bytes, b"abc"),
        ("10.0.0.1", ipaddress.IPv4Address, ipaddress.IPv4Address("10.0.0.1")),
        ("7", Optional[int], 7),
        ("", Optional[int], None),
        ("null", Optional[int], None),
        ("x", Union[int, str], "x"),
        ("fast", Literal["fast", "slow"], "fast"),
    ],
)
def test_converts_scalar_text(convert, text, target_type, expected):
    assert convert(text, target_type) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("23:59:59", datetime.timedelta(hours=23, minutes=59, seconds=59)),
        ("1.02:00:00", datetime.timedelta(days=1, hours=2)),
        ("00:00:01.5", datetime.timedelta(seconds=1, microseconds=500000)),
        ("-00:30", datetime.timedelta(minutes=-30)),
        ("2.5", datetime.timedelta(seconds=2.5)),
    ],
)
def test_parses_timedeltas(text, expected):
    assert parse_timedelta(text) == expected


@pytest.mark.parametrize(
    "text, target_type",
    [
        ("one", int),
        ("maybe", bool),
        ("critical", Level),
        ("not a timespan", datetime.timedelta),
        ("medium", Literal["fast", "slow"]),
        ("x", Union[int, float]),
        ("1", Colour),
        ("x", Shape),
        ("256.0.0.1", ipaddress.IPv4Address),
    ],
)
def test_conversion_failures_raise_conversion_error(convert, text, target_type):
    with pytest.raises(ConversionError):
        convert(text, target_type)


def test_conversion_error_is_a_binding_error(convert):
    with pytest.raises(BindingError, match="Cannot convert 'one' to int"):
        convert("one", int)


def test_custom_converters_take_precedence():
    convert = ScalarConverter({Colour: lambda text: Colour(*map(int, text.split(",")))})

    assert convert("1,2,3", Colour) == Colour(1, 2, 3)


def test_custom_converter_failures_are_wrapped():
    convert = ScalarConverter({Colour: lambda text: Colour(*map(int, text.split(",")))})

    with pytest.raises(ConversionError):
        convert("red", Colour)


@pytest.fixture
def resolve():
    return ImportTypeResolver({"square": Square})


@pytest.mark.parametrize(
    "name, expected",
    [
        ("collections.OrderedDict", OrderedDict),
        ("collections:OrderedDict", OrderedDict),
        ("datetime.timedelta", datetime.timedelta),
        ("dict", dict),
        ("sample_types.Square", Square),
        ("square", Square),
    ],
)
def test_resolves_type_names(resolve, name, expected):
    assert resolve(name) is expected


@pytest.mark.parametrize(
    "name",
    [
        "no.such.Type",
        "collections.NoSuchType",
        "NoSuchType",
        "os.path.join",
        "paramType",
        "..x.Colour",
        "..x:Colour",
        ".Colour",
        "broken_settings.Settings",
        "broken_settings:Settings",
    ],
)
def test_unresolvable_type_names(resolve, name):
    with pytest.raises(TypeResolutionError):
        resolve(name)


def test_import_failure_names_module(resolve):
    with pytest.raises(TypeResolutionError, match="broken_settings"):
        resolve("broken_settings.Settings")
