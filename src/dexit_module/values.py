"""Core value type definitions.

This module defines the value types exchanged between the runner, module
handlers, and the schema engine. Command arguments and results are plain
JSON-like structures; the runner passes them through as is.

It also provides the structural predicates used by the contract validator
to tell structured objects apart from scalars and sequences.
"""

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timedelta
from types import BuiltinFunctionType, FunctionType, MethodType
from typing import Any, TypeAlias

#: Scalars represent atomic values that can be rendered directly
#: in error snippets.
Scalar: TypeAlias = date | datetime | timedelta | str | bytes | int | float | bool

#: A structured value as produced by YAML or JSON loaders and consumed
#: by JSON Schema validators.
Value: TypeAlias = Scalar | Sequence['Value'] | Mapping[str, 'Value'] | None

#: A value in runtime represents any Python object received from
#: module handlers prior to any inspection.
RuntimeValue: TypeAlias = Any

#: JSON Schema document: an object schema or a boolean schema.
JSONSchema: TypeAlias = Mapping[str, Any] | bool

MAPPINGS = (dict,)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set, frozenset)
ROUTINES = (BuiltinFunctionType, FunctionType, MethodType)


def is_structured(value: RuntimeValue) -> bool:
    """Check whether a value is a structured object.

    A structured object is either a mapping or an object exposing
    attributes (a Python module, a namespace, a class instance).
    Scalars, sequences, and plain functions are not structured objects.

    Args:
        value: Candidate value.

    Returns:
        True if the value may hold named fields.
    """
    if value is None or isinstance(value, SCALARS + SEQUENCES + ROUTINES):
        return False

    if isinstance(value, Mapping):
        return True

    return hasattr(value, '__dict__')


def is_schema(value: RuntimeValue) -> bool:
    """Check whether a value may be used as a JSON Schema document.

    Args:
        value: Candidate value.

    Returns:
        True for mappings and boolean schemas.
    """
    return isinstance(value, (Mapping, bool))
