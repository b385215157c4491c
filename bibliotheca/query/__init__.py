"""
Query Module for Bibliotheca

Store-agnostic builders turning request data into query descriptors:
- Tagged field values and per-entity field tables
- Partial-update documents
- Equality search filters
- Rating and genre aggregation pipelines
"""

from bibliotheca.query.values import (
    FieldKind,
    FieldValue,
    BOOK_UPDATE_FIELDS,
    BOOK_SEARCH_FIELDS,
    USER_UPDATE_FIELDS,
    USER_SEARCH_FIELDS,
    parse_birth_date,
)
from bibliotheca.query.updates import (
    PartialUpdate,
    build_update,
    is_noop,
    to_set_document,
)
from bibliotheca.query.filters import build_filter
from bibliotheca.query.pipelines import (
    RatingOperator,
    build_rating_pipeline,
    build_genre_books_pipeline,
)

__all__ = [
    # Values
    "FieldKind",
    "FieldValue",
    "BOOK_UPDATE_FIELDS",
    "BOOK_SEARCH_FIELDS",
    "USER_UPDATE_FIELDS",
    "USER_SEARCH_FIELDS",
    "parse_birth_date",
    # Updates
    "PartialUpdate",
    "build_update",
    "is_noop",
    "to_set_document",
    # Filters
    "build_filter",
    # Pipelines
    "RatingOperator",
    "build_rating_pipeline",
    "build_genre_books_pipeline",
]
