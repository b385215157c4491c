"""
Tagged field values and per-entity field tables.

Each updatable or searchable field is declared exactly once, with the
kind of value it holds. Builders look fields up here instead of trusting
whatever attribute names arrive on a request object.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from bibliotheca.exceptions import ValidationError
from bibliotheca.identifiers import normalize_genre_reference


BIRTH_DATE_FORMAT = "%Y-%m-%d"


class FieldKind(str, Enum):
    """Kind of value a document field holds."""
    INT = "int"
    BOOL = "bool"
    TEXT = "text"
    DATE = "date"            # text in YYYY-MM-DD form
    TEXT_LIST = "text_list"
    REFERENCE = "reference"  # id string of another document, or None


def parse_birth_date(value: str) -> str:
    """
    Check a YYYY-MM-DD date string.

    Returns:
        The string unchanged

    Raises:
        ValidationError: If the string is not a calendar date
    """
    try:
        datetime.strptime(value, BIRTH_DATE_FORMAT)
    except (TypeError, ValueError) as e:
        raise ValidationError("Invalid date format", detail=f"Expected YYYY-MM-DD, got '{value}'") from e
    return value


@dataclass(frozen=True)
class FieldValue:
    """A value tagged with the kind of field it is written to."""

    kind: FieldKind
    value: Any

    @classmethod
    def of(cls, kind: FieldKind, raw: Any, name: str = "value") -> "FieldValue":
        """
        Build a tagged value, rejecting raw values of the wrong kind.

        Args:
            kind: Declared field kind
            raw: Raw value from the request
            name: Field name, used in error details

        Raises:
            ValidationError: If ``raw`` does not fit ``kind``
        """
        if kind is FieldKind.INT:
            # bool is an int subclass; reject it explicitly
            if isinstance(raw, bool) or not isinstance(raw, int):
                raise _wrong_kind(name, kind, raw)
            return cls(kind, raw)

        if kind is FieldKind.BOOL:
            if not isinstance(raw, bool):
                raise _wrong_kind(name, kind, raw)
            return cls(kind, raw)

        if kind is FieldKind.TEXT:
            if not isinstance(raw, str):
                raise _wrong_kind(name, kind, raw)
            return cls(kind, raw)

        if kind is FieldKind.DATE:
            if not isinstance(raw, str):
                raise _wrong_kind(name, kind, raw)
            return cls(kind, parse_birth_date(raw))

        if kind is FieldKind.TEXT_LIST:
            if not isinstance(raw, (list, tuple)) or not all(isinstance(item, str) for item in raw):
                raise _wrong_kind(name, kind, raw)
            return cls(kind, tuple(raw))

        if kind is FieldKind.REFERENCE:
            if not isinstance(raw, str):
                raise _wrong_kind(name, kind, raw)
            return cls(kind, normalize_genre_reference(raw))

        raise ValueError(f"Unknown field kind: {kind}")

    def to_bson(self) -> Any:
        """Value as written into a store document."""
        if self.kind is FieldKind.TEXT_LIST:
            return list(self.value)
        return self.value


def _wrong_kind(name: str, kind: FieldKind, raw: Any) -> ValidationError:
    return ValidationError(
        f"Invalid value for field '{name}'",
        detail=f"Expected {kind.value}, got {type(raw).__name__}",
    )


def _table(fields: dict[str, FieldKind]) -> Mapping[str, FieldKind]:
    return MappingProxyType(fields)


# =============================================================================
# Field tables
# =============================================================================

BOOK_UPDATE_FIELDS = _table({
    "title": FieldKind.TEXT,
    "author": FieldKind.TEXT,
    "year": FieldKind.INT,
    "resume": FieldKind.TEXT,
    "availability": FieldKind.BOOL,
    "gender_id": FieldKind.REFERENCE,
})

BOOK_SEARCH_FIELDS = _table({
    "title": FieldKind.TEXT,
    "author": FieldKind.TEXT,
    "year": FieldKind.INT,
})

USER_UPDATE_FIELDS = _table({
    "first_name": FieldKind.TEXT,
    "last_name": FieldKind.TEXT,
    "email": FieldKind.TEXT,
    "birth_date": FieldKind.DATE,
    "borrowed_books": FieldKind.TEXT_LIST,
    "role": FieldKind.TEXT,
})

USER_SEARCH_FIELDS = _table({
    "first_name": FieldKind.TEXT,
    "last_name": FieldKind.TEXT,
    "email": FieldKind.TEXT,
})

