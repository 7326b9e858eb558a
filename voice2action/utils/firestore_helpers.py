"""
Firestore query helpers.

All where() clauses go through FieldFilter so no positional-argument
deprecation warnings are logged on each list/metrics request.
"""

from google.cloud.firestore_v1.base_query import FieldFilter


def where_filter(query, field_path: str, op_string: str, value):
    """
    Apply one where() clause to a collection or query.

    Usage:
        query = where_filter(collection, "tracking_id", "==", "A1B2C3D4")
        query = where_filter(query, "created_at", ">=", since)
    """
    return query.where(filter=FieldFilter(field_path, op_string, value))
