"""Command execution and result formatting."""

from docsql.execution.executor import CommandExecutor
from docsql.execution.result_formatter import ResultFormatter, is_permission_error

__all__ = ["CommandExecutor", "ResultFormatter", "is_permission_error"]
