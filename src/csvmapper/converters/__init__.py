"""
Column converters and the registry that maps type names to them.

Converters hold no per-column state, so one instance of each is shared by
every column of that type.
"""

import logging
from typing import Dict, List

from csvmapper.converters.base import Converter
from csvmapper.converters.boolean import BooleanConverter
from csvmapper.converters.date import DateConverter, DateTimeConverter
from csvmapper.converters.number import DecimalConverter, FloatConverter, IntegerConverter
from csvmapper.converters.text import StringConverter, UuidConverter

logger = logging.getLogger(__name__)

_REGISTRY: Dict[str, Converter] = {}


def register_converter(type_name: str, converter: Converter) -> None:
    """Register a converter under a type name (case-insensitive)."""
    key = type_name.lower()
    if key in _REGISTRY:
        logger.debug(f"Replacing converter registered for '{key}'")
    _REGISTRY[key] = converter


def get_converter(type_name: str) -> Converter:
    """Look up the converter for a type name.

    Raises:
        KeyError: If no converter is registered for the name
    """
    try:
        return _REGISTRY[type_name.lower()]
    except KeyError:
        raise KeyError(f"No converter registered for type '{type_name}'") from None


def registered_types() -> List[str]:
    return sorted(_REGISTRY)


_boolean = BooleanConverter()
_integer = IntegerConverter()
_decimal = DecimalConverter()

for _name, _converter in (
    ("string", StringConverter()),
    ("boolean", _boolean),
    ("bool", _boolean),
    ("int", _integer),
    ("integer", _integer),
    ("decimal", _decimal),
    ("number", _decimal),
    ("float", FloatConverter()),
    ("date", DateConverter()),
    ("datetime", DateTimeConverter()),
    ("uuid", UuidConverter()),
):
    register_converter(_name, _converter)

__all__ = [
    "Converter",
    "BooleanConverter",
    "StringConverter",
    "UuidConverter",
    "IntegerConverter",
    "DecimalConverter",
    "FloatConverter",
    "DateConverter",
    "DateTimeConverter",
    "get_converter",
    "register_converter",
    "registered_types",
]
