"""
Exception hierarchy for docsql.
"""


class DocSQLError(Exception):
    """Base class for all docsql errors."""


class StatementSyntaxError(DocSQLError):
    """Raised when a statement matches none of the supported shapes."""


class InvalidPayloadError(StatementSyntaxError):
    """Raised when the JSON body of an INSERT or UPDATE cannot be used."""


class NotConnectedError(DocSQLError):
    """Raised when a store call is made without an active connection."""

    def __init__(self, message: str = "Database not connected"):
        super().__init__(message)


class DocumentNotFoundError(DocSQLError):
    """Raised when updating a document that does not exist."""


class ConfigError(DocSQLError):
    """Raised for an unusable connection configuration."""


class EditError(DocSQLError):
    """Raised when an edit or insert has no editable result to act on."""


class EditValueError(EditError):
    """Raised when typed edit input cannot be converted to a value."""


class OptimisticWriteError(DocSQLError):
    """
    Raised when the remote write behind an optimistic change fails.

    The local change has already been applied and is not rolled back.
    """

    def __init__(self, message: str, cause: Exception):
        super().__init__(message)
        self.cause = cause
