"""
Statement parser.

Recognizes four fixed statement shapes and turns them into Commands:

    SELECT * FROM <collection> [WHERE <field> <op> <value>]
    INSERT INTO <collection> JSON <json-object>
    UPDATE <collection> SET JSON <json-object> WHERE id = <value>
    DELETE FROM <collection> WHERE id = <value>

Shapes are tried in that order and the first match wins.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from docsql.core.exceptions import InvalidPayloadError, StatementSyntaxError
from docsql.core.models import Command, CommandKind, Filter, FilterOperator
from docsql.query.coercion import coerce_literal, strip_quotes

logger = logging.getLogger(__name__)

_COLLECTION = r"([A-Za-z0-9_/-]+)"
_FIELD = r"([A-Za-z0-9_.]+)"
# Longest operators first, otherwise ">=" would match as ">" with "= value".
_OPERATOR = r"(array-contains|==|!=|>=|<=|=|>|<)"

SELECT_RE = re.compile(
    rf"^SELECT\s+\*\s+FROM\s+{_COLLECTION}"
    rf"(?:\s+WHERE\s+{_FIELD}\s*{_OPERATOR}\s*(.+))?$",
    re.IGNORECASE,
)
INSERT_RE = re.compile(
    rf"^INSERT\s+INTO\s+{_COLLECTION}\s+JSON\s+(.+)$",
    re.IGNORECASE,
)
UPDATE_RE = re.compile(
    rf"^UPDATE\s+{_COLLECTION}\s+SET\s+JSON\s+(.+)\s+WHERE\s+id\s*=\s*(.+)$",
    re.IGNORECASE,
)
DELETE_RE = re.compile(
    rf"^DELETE\s+FROM\s+{_COLLECTION}\s+WHERE\s+id\s*=\s*(.+)$",
    re.IGNORECASE,
)

OPERATOR_MAP: Dict[str, FilterOperator] = {
    "=": FilterOperator.EQ,
    "==": FilterOperator.EQ,
    "!=": FilterOperator.NE,
    ">": FilterOperator.GT,
    "<": FilterOperator.LT,
    ">=": FilterOperator.GE,
    "<=": FilterOperator.LE,
    "array-contains": FilterOperator.CONTAINS,
}

UNRECOGNIZED_MESSAGE = (
    "Syntax error: Query not recognized. "
    "Use SELECT, INSERT, UPDATE, or DELETE with supported syntax."
)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_payload(text: str, kind: CommandKind) -> Dict[str, Any]:
    """Parse a strict JSON object body."""
    statement = kind.value.upper()
    try:
        payload = json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise InvalidPayloadError(f"Invalid JSON in {statement} statement.") from e

    if not isinstance(payload, dict):
        raise InvalidPayloadError(
            f"Invalid JSON in {statement} statement: expected an object."
        )
    return payload


def _match_select(statement: str) -> Optional[Command]:
    match = SELECT_RE.match(statement)
    if not match:
        return None

    collection, field, operator, raw_value = match.groups()
    where = None
    if field and operator and raw_value is not None:
        where = Filter(
            field=field,
            operator=OPERATOR_MAP[operator.lower()],
            value=coerce_literal(raw_value.strip()),
        )
    return Command(kind=CommandKind.SELECT, collection=collection, filter=where)


def _match_insert(statement: str) -> Optional[Command]:
    match = INSERT_RE.match(statement)
    if not match:
        return None

    collection, body = match.groups()
    payload = _parse_payload(body, CommandKind.INSERT)
    return Command(kind=CommandKind.INSERT, collection=collection, payload=payload)


def _match_update(statement: str) -> Optional[Command]:
    match = UPDATE_RE.match(statement)
    if not match:
        return None

    collection, body, raw_id = match.groups()
    payload = _parse_payload(body, CommandKind.UPDATE)
    return Command(
        kind=CommandKind.UPDATE,
        collection=collection,
        payload=payload,
        target_id=strip_quotes(raw_id),
    )


def _match_delete(statement: str) -> Optional[Command]:
    match = DELETE_RE.match(statement)
    if not match:
        return None

    collection, raw_id = match.groups()
    return Command(
        kind=CommandKind.DELETE,
        collection=collection,
        target_id=strip_quotes(raw_id),
    )


# Precedence is explicit: the first matcher that returns a Command wins.
SHAPE_MATCHERS: List[Tuple[CommandKind, Callable[[str], Optional[Command]]]] = [
    (CommandKind.SELECT, _match_select),
    (CommandKind.INSERT, _match_insert),
    (CommandKind.UPDATE, _match_update),
    (CommandKind.DELETE, _match_delete),
]


def parse_statement(text: str) -> Command:
    """
    Parse a statement into a Command.

    Args:
        text: Statement text; surrounding whitespace is ignored

    Returns:
        The parsed Command

    Raises:
        InvalidPayloadError: If an INSERT/UPDATE body is not a JSON object
        StatementSyntaxError: If no supported shape matches
    """
    statement = text.strip()

    for kind, matcher in SHAPE_MATCHERS:
        command = matcher(statement)
        if command is not None:
            logger.debug("Parsed %s statement on '%s'", kind.value, command.collection)
            return command

    raise StatementSyntaxError(UNRECOGNIZED_MESSAGE)
