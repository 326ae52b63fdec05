"""Statement parsing and literal coercion."""

from docsql.query.coercion import coerce_literal, format_literal, strip_quotes
from docsql.query.parser import parse_statement

__all__ = ["coerce_literal", "format_literal", "strip_quotes", "parse_statement"]
