"""
MongoDB query translator.

Converts a single-condition Filter and a pagination cursor to a MongoDB
find() filter document.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId

from docsql.core.models import Filter, FilterOperator


def to_object_id(document_id: Any) -> Any:
    """Use an ObjectId for ids that look like one, the raw value otherwise."""
    if isinstance(document_id, str) and ObjectId.is_valid(document_id):
        return ObjectId(document_id)
    return document_id


class MongoQueryTranslator:
    """
    Translates filters to MongoDB query documents.

    Listing is ordered by `_id`, so a cursor is the `_id` of the last
    document of the previous page.
    """

    def translate(self, filter: Optional[Filter], cursor: Optional[Any] = None) -> Dict[str, Any]:
        """
        Build a find() filter.

        Args:
            filter: Condition from the statement, or None
            cursor: `_id` of the last document already seen, or None

        Returns:
            MongoDB filter document
        """
        clauses: List[Dict[str, Any]] = []

        if filter is not None:
            clauses.append(self._translate_condition(filter))

        if cursor is not None:
            clauses.append({"_id": {"$gt": to_object_id(cursor)}})

        if not clauses:
            return {}
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}

    def _translate_condition(self, condition: Filter) -> Dict[str, Any]:
        """Translate a single condition to a MongoDB query clause."""
        field = "_id" if condition.field == "id" else condition.field
        operator = condition.operator
        value = condition.value
        if field == "_id":
            value = to_object_id(value)

        if operator == FilterOperator.EQ:
            return {field: {"$eq": value}}
        elif operator == FilterOperator.NE:
            # Documents without the field never match, as with any comparison
            return {field: {"$exists": True, "$ne": value}}
        elif operator == FilterOperator.GT:
            return {field: {"$gt": value}}
        elif operator == FilterOperator.LT:
            return {field: {"$lt": value}}
        elif operator == FilterOperator.GE:
            return {field: {"$gte": value}}
        elif operator == FilterOperator.LE:
            return {field: {"$lte": value}}
        elif operator == FilterOperator.CONTAINS:
            return {field: {"$elemMatch": {"$eq": value}}}

        raise ValueError(f"Unsupported operator: {operator}")
