"""
Value coercion helpers.

Cells arrive untyped: a CSV parser hands over strings, a spreadsheet
parser hands over numbers, and an upstream editor may hand over values
that are already decoded (lists, dicts). Every rule converts cells
through these helpers, and every conversion failure surfaces as a
single exception type, CoercionError, which the rules turn into Issues.
"""

import json
import math
import numbers
from typing import Any, List, Optional

import pandas as pd


class CoercionError(ValueError):
    """A cell value could not be converted to the requested type."""

    def __init__(self, value: Any, expected: str, reason: Optional[str] = None):
        self.value = value
        self.expected = expected
        self.reason = reason
        detail = f": {reason}" if reason else ''
        super().__init__(f"cannot read {value!r} as {expected}{detail}")


def is_missing(value: Any) -> bool:
    """True for None, NaN and pandas missing markers."""
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    return isinstance(value, float) and math.isnan(value)


def is_blank(value: Any) -> bool:
    """True for missing values and strings that are empty once stripped."""
    if is_missing(value):
        return True
    return isinstance(value, str) and not value.strip()


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid number here
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def to_float(value: Any) -> float:
    """Read a finite float from a number or numeric string."""
    if _is_number(value):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            raise CoercionError(value, 'number', 'not numeric') from None
    else:
        raise CoercionError(value, 'number', f'unsupported type {type(value).__name__}')

    if not math.isfinite(result):
        raise CoercionError(value, 'number', 'not finite')
    return result


def to_int(value: Any) -> int:
    """
    Read an integer.

    Accepts ints, integral floats and strings such as ``"4"`` or
    ``"4.0"``. Fractions, booleans and text fail.
    """
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
    result = to_float(value)
    if not result.is_integer():
        raise CoercionError(value, 'integer', 'has a fractional part')
    return int(result)


def _reject_constant(name: str):
    # json accepts NaN and Infinity, which are not JSON
    raise ValueError(f"non-standard literal {name}")


def _loads(value: str) -> Any:
    return json.loads(value, parse_constant=_reject_constant)


def _json_reason(exc: ValueError) -> str:
    return getattr(exc, 'msg', None) or str(exc)


def to_number_list(value: Any) -> List[float]:
    """
    Decode an array of numbers.

    Strings must hold a JSON array of numbers. Lists and tuples are
    taken as already decoded and returned as a list without checking
    their elements.
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    if not isinstance(value, str):
        raise CoercionError(value, 'number list', f'unsupported type {type(value).__name__}')

    try:
        decoded = _loads(value)
    except ValueError as exc:
        raise CoercionError(value, 'number list', f'invalid JSON ({_json_reason(exc)})') from None

    if not isinstance(decoded, list):
        raise CoercionError(value, 'number list', 'not an array')
    if not all(_is_number(item) and math.isfinite(item) for item in decoded):
        raise CoercionError(value, 'number list', 'array contains non-numeric values')
    return decoded


def to_json(value: Any) -> Any:
    """Decode a JSON document. Non-string values are already decoded."""
    if not isinstance(value, str):
        return value
    try:
        return _loads(value)
    except ValueError as exc:
        raise CoercionError(value, 'JSON document', _json_reason(exc)) from None


def to_items(value: Any) -> List[str]:
    """
    Split a comma-separated list into stripped, non-empty items.

    An already-decoded list is used item by item.
    """
    if isinstance(value, (list, tuple, set, frozenset)):
        raw = [str(item) for item in value if not is_blank(item)]
    else:
        raw = str(value).split(',')
    return [item.strip() for item in raw if item.strip()]
