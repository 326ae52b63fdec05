"""
docsql - SQL-like statements over schemaless document stores.

Main entry point for creating query orchestrators for different stores.
"""

from docsql.orchestrator import QueryOrchestrator

__all__ = ["QueryOrchestrator"]
