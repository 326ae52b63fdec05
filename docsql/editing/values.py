"""
Typed edit values for inline cell edits and row inserts.

Edit input arrives as text plus an explicit edit type; these helpers turn it
into the value written to the store.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from docsql.core.exceptions import EditError, EditValueError
from docsql.query.coercion import parse_number


class EditType(str, Enum):
    """Value types offered by the editors."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"
    NULL = "null"


def infer_edit_type(value: Any) -> Tuple[EditType, str]:
    """
    Pick the edit type and initial edit text for an existing cell value.

    Args:
        value: Current cell value (None for a missing field)

    Returns:
        Tuple of (edit type, initial text)
    """
    if value is None:
        return EditType.NULL, ""
    if isinstance(value, bool):
        return EditType.BOOLEAN, "true" if value else "false"
    if isinstance(value, (int, float)):
        return EditType.NUMBER, str(value)
    if isinstance(value, (dict, list)):
        return EditType.JSON, json.dumps(value, indent=2)
    return EditType.STRING, str(value)


def _parse_number(text: str) -> Any:
    number = parse_number(text)
    if number is None:
        raise ValueError(f"not a finite decimal number: {text!r}")
    return number


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_edit_value(text: str, edit_type: EditType) -> Any:
    """
    Convert edit text into a typed value.

    An empty number defaults to 0. A boolean is true only for the text
    ``true`` in any case.

    Raises:
        EditValueError: If the text is not valid for `edit_type`
    """
    edit_type = EditType(edit_type)
    try:
        if edit_type == EditType.NUMBER:
            if text.strip() == "":
                return 0
            return _parse_number(text.strip())
        if edit_type == EditType.BOOLEAN:
            return text.lower() == "true"
        if edit_type == EditType.NULL:
            return None
        if edit_type == EditType.JSON:
            return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise EditValueError(f"Invalid {edit_type.value} format: {e}") from e
    return str(text)


class InsertField(BaseModel):
    """One key/value row of the insert form."""

    key: str = ""
    value: str = ""
    type: EditType = EditType.STRING


def insert_fields_for(columns: List[str]) -> List[InsertField]:
    """Pre-fill insert fields from the result columns, excluding `id`."""
    fields = [InsertField(key=column) for column in columns if column != "id"]
    return fields or [InsertField()]


def build_insert_payload(fields: List[InsertField]) -> Dict[str, Any]:
    """
    Build a document payload from insert form rows.

    Rows with a blank key are skipped.

    Raises:
        EditValueError: Naming the first field whose value does not parse
    """
    payload: Dict[str, Any] = {}
    for field in fields:
        key = field.key.strip()
        if not key:
            continue
        try:
            payload[key] = parse_edit_value(field.value, field.type)
        except EditValueError as e:
            raise EditValueError(
                f"Error parsing field '{key}': Invalid {field.type.value} format."
            ) from e
    return payload


class CellEditor:
    """
    Editing state for a single table cell.

    `save` parses the pending text; on a parse failure the editor stays open
    and nothing is written.
    """

    def __init__(self):
        self.document_id: Optional[str] = None
        self.field: Optional[str] = None
        self.edit_type = EditType.STRING
        self.text = ""

    @property
    def is_open(self) -> bool:
        return self.document_id is not None

    def begin(self, document_id: str, field: str, current_value: Any) -> None:
        """
        Open the editor on a cell.

        Raises:
            EditError: For the `id` column, which is never editable
        """
        if field == "id":
            raise EditError("The id column cannot be edited")
        self.document_id = document_id
        self.field = field
        self.edit_type, self.text = infer_edit_type(current_value)

    def save(self) -> Tuple[str, str, Any]:
        """
        Parse the pending edit and close the editor.

        Returns:
            Tuple of (document id, field, typed value)

        Raises:
            EditError: If the editor is not open
            EditValueError: If the text is invalid; the editor stays open
        """
        if not self.is_open:
            raise EditError("No cell is being edited")
        value = parse_edit_value(self.text, self.edit_type)
        edit = (self.document_id, self.field, value)
        self.cancel()
        return edit

    def cancel(self) -> None:
        self.document_id = None
        self.field = None
        self.edit_type = EditType.STRING
        self.text = ""
