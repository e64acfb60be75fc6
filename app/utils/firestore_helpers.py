"""
Firestore query helpers shared by the services.

NOTE: For firebase_admin SDK, we use positional arguments which still work.
The deprecation warning is just a warning - the functionality is still supported.
"""

from typing import Any, Dict, Iterable, List

# Firestore rejects "in" filters with more than 30 values
IN_QUERY_LIMIT = 30


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore queries.

    Usage:
        query = where_filter(collection, "status", "==", "pending")
        query = where_filter(query, "emailid", "==", "a@x.com")
    """
    return query.where(field_path, op_string, value)


def snapshot_to_dict(doc) -> Dict[str, Any]:
    """Document snapshot -> plain dict with the document id under "id"."""
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


def chunked(values: Iterable[Any], size: int = IN_QUERY_LIMIT) -> List[List[Any]]:
    values = list(values)
    return [values[i:i + size] for i in range(0, len(values), size)]
