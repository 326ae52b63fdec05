"""
Shared data models for the query pipeline.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


COLLECTION_PATTERN = r"^[A-Za-z0-9_/-]+$"
FIELD_PATTERN = r"^[A-Za-z0-9_.]+$"


class CommandKind(str, Enum):
    """Statement shapes understood by the parser."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class FilterOperator(str, Enum):
    """Comparison operators accepted in a WHERE clause."""

    EQ = "=="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    CONTAINS = "array-contains"


class Filter(BaseModel):
    """Single-condition filter for a SELECT."""

    field: str = Field(..., pattern=FIELD_PATTERN)
    operator: FilterOperator
    value: Any = None


class Command(BaseModel):
    """A parsed statement, consumed once by the executor."""

    kind: CommandKind
    collection: str = Field(..., pattern=COLLECTION_PATTERN)
    filter: Optional[Filter] = None  # select only
    payload: Optional[Dict[str, Any]] = None  # insert/update
    target_id: Optional[str] = None  # update/delete


class Document(BaseModel):
    """A stored document as returned by a store adapter."""

    id: str
    fields: Dict[str, Any] = Field(default_factory=dict)

    def to_row(self) -> Dict[str, Any]:
        """Flatten into a table row; the document id always wins over an `id` field."""
        row = dict(self.fields)
        row["id"] = self.id
        return row


class DocumentPage(BaseModel):
    """One page of a filtered listing."""

    documents: List[Document] = Field(default_factory=list)
    next_cursor: Optional[Any] = None


class ResultType(str, Enum):
    """Classification of a query result."""

    READ = "read"
    WRITE = "write"
    ERROR = "error"


class QueryResult(BaseModel):
    """Standardized tabular result handed to the presentation layer."""

    type: ResultType
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    message: str = ""
    collection_name: Optional[str] = None
    page_cursor: Optional[Any] = None
    permission_denied: bool = False

    @property
    def is_error(self) -> bool:
        return self.type == ResultType.ERROR


class HistoryStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class QueryHistoryItem(BaseModel):
    """One executed statement. Items are never mutated once recorded."""

    model_config = ConfigDict(frozen=True)

    query: str
    timestamp: float
    status: HistoryStatus
