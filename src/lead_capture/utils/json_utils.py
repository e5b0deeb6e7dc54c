"""
Strict JSON decoding for request and relay bodies.

Only standard JSON is accepted: the NaN/Infinity constants and numbers that
overflow to an infinite float are rejected, so anything decoded here can be
serialized again with ``allow_nan=False``.
"""

import json
import math
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {literal}")
    return value


def loads_strict(text: str | bytes) -> Any:
    """
    Decode ``text`` as standard JSON.

    Raises:
        ValueError: If the text is not standard JSON (json.JSONDecodeError
            is a subclass)
    """
    return json.loads(
        text,
        parse_constant=_reject_constant,
        parse_float=_parse_finite_float,
    )
