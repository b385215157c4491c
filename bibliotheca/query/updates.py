"""
Partial-update builder.

Turns the fields a client actually sent into tagged values. Fields the
client left out never appear in the result, so a ``$set`` built from it
leaves the rest of the document untouched.
"""

from typing import Any, Mapping

from bibliotheca.exceptions import ValidationError
from bibliotheca.query.values import FieldKind, FieldValue


PartialUpdate = dict[str, FieldValue]


def tag_fields(
    present: Mapping[str, Any],
    table: Mapping[str, FieldKind],
) -> PartialUpdate:
    """
    Tag every present field with its declared kind.

    Args:
        present: Field name -> raw value, for fields the client sent
        table: Field table of the entity

    Returns:
        Field name -> FieldValue, in table order

    Raises:
        ValidationError: On an undeclared field or a value of the wrong kind
    """
    unknown = sorted(set(present) - set(table))
    if unknown:
        raise ValidationError(
            "Unknown fields",
            detail=", ".join(unknown),
        )

    return {
        name: FieldValue.of(kind, present[name], name)
        for name, kind in table.items()
        if name in present
    }


def build_update(
    present: Mapping[str, Any],
    table: Mapping[str, FieldKind],
) -> PartialUpdate:
    """Build a partial update; an empty result means nothing to write."""
    return tag_fields(present, table)


def is_noop(update: PartialUpdate) -> bool:
    """True when the update carries no field at all."""
    return not update


def to_set_document(update: PartialUpdate) -> dict:
    """Render a partial update as a ``$set`` update document."""
    return {"$set": {name: value.to_bson() for name, value in update.items()}}
