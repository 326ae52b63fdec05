"""Core interfaces, models and errors for docsql."""

from docsql.core.interfaces import StoreAdapter
from docsql.core.models import (
    Command,
    CommandKind,
    Document,
    DocumentPage,
    Filter,
    FilterOperator,
    HistoryStatus,
    QueryHistoryItem,
    QueryResult,
    ResultType,
)
from docsql.core.exceptions import (
    DocSQLError,
    StatementSyntaxError,
    InvalidPayloadError,
    NotConnectedError,
    DocumentNotFoundError,
    ConfigError,
    EditError,
    EditValueError,
    OptimisticWriteError,
)

__all__ = [
    "StoreAdapter",
    "Command",
    "CommandKind",
    "Document",
    "DocumentPage",
    "Filter",
    "FilterOperator",
    "HistoryStatus",
    "QueryHistoryItem",
    "QueryResult",
    "ResultType",
    "DocSQLError",
    "StatementSyntaxError",
    "InvalidPayloadError",
    "NotConnectedError",
    "DocumentNotFoundError",
    "ConfigError",
    "EditError",
    "EditValueError",
    "OptimisticWriteError",
]
