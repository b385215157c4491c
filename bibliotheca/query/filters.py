"""
Search filter builder.

Equality filters over the fields a client sent. What to do with an
empty filter is decided by each repository: book search answers with no
results, user search refuses the request.
"""

from typing import Any, Mapping

from bibliotheca.query.updates import tag_fields
from bibliotheca.query.values import FieldKind


def build_filter(
    present: Mapping[str, Any],
    table: Mapping[str, FieldKind],
) -> dict[str, Any]:
    """
    Build an equality filter document.

    Args:
        present: Field name -> raw value, for fields the client sent
        table: Search field table of the entity

    Returns:
        Filter document; empty when no field was sent
    """
    return {name: value.to_bson() for name, value in tag_fields(present, table).items()}
