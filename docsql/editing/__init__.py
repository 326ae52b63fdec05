"""Inline editing: typed edit values and optimistic reconciliation."""

from docsql.editing.reconciler import Reconciler
from docsql.editing.values import (
    CellEditor,
    EditType,
    InsertField,
    build_insert_payload,
    infer_edit_type,
    insert_fields_for,
    parse_edit_value,
)

__all__ = [
    "Reconciler",
    "CellEditor",
    "EditType",
    "InsertField",
    "build_insert_payload",
    "infer_edit_type",
    "insert_fields_for",
    "parse_edit_value",
]
