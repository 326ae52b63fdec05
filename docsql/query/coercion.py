"""
Literal coercion for WHERE clause values.

Turns a raw statement token into a bool, a number or a string.
"""

import json
import math
import re
from typing import Any, Optional, Union

Literal = Union[bool, int, float, str]

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def coerce_literal(token: str) -> Literal:
    """
    Convert a raw token into a typed value.

    Rules, in order:
        1. ``true`` / ``false`` (case-sensitive) become booleans.
        2. Finite decimal numeric literals become ``int`` or ``float``. The
           empty string is never a number.
        3. A token wrapped in one matching pair of single or double quotes
           loses exactly that layer.
        4. Anything else is returned verbatim.

    Args:
        token: Trimmed token text, possibly still quoted

    Returns:
        The coerced value
    """
    if token == "true":
        return True
    if token == "false":
        return False

    number = parse_number(token)
    if number is not None:
        return number

    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        return token[1:-1]

    return token


def parse_number(token: str) -> Optional[Union[int, float]]:
    """
    Parse a decimal numeric literal.

    Returns None for anything else, including the empty string, `nan`,
    `inf`, underscores and literals that overflow to infinity.
    """
    if not token or not _NUMBER_RE.match(token):
        return None
    if _INTEGER_RE.match(token):
        return int(token)
    value = float(token)
    if not math.isfinite(value):
        return None
    return value


def strip_quotes(token: str) -> str:
    """Remove one matching pair of surrounding quotes, if present."""
    token = token.strip()
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        return token[1:-1]
    return token


def format_literal(value: Any) -> str:
    """
    Render a typed value back into statement text.

    Booleans render as ``true``/``false`` and ``None`` as ``null``, so that
    numbers and booleans survive a format/coerce round trip. Mappings and
    lists render as JSON.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)
