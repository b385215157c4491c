"""
Identifier codec.

Store ids are ``bson.ObjectId`` values; the API and cross-collection
references (``comment.book_id``, ``user.borrowed_books``,
``book.gender_id``) carry their 24 character hex string form.
"""

from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

from bibliotheca.exceptions import InvalidIdentifierError


# Reserved id meaning "book has no genre" in documents written by the
# first catalog release. Only ever decoded, never written.
NO_GENRE_ID = "0" * 24


def parse_object_id(value: str) -> ObjectId:
    """
    Parse a string into an ObjectId.

    Args:
        value: 24 character hex string

    Returns:
        ObjectId

    Raises:
        InvalidIdentifierError: If the string is malformed
    """
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdentifierError(str(value))
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        raise InvalidIdentifierError(str(value)) from e


def format_object_id(value: ObjectId) -> str:
    """String form used in responses and references."""
    return str(value)


def normalize_genre_reference(value: Optional[str]) -> Optional[str]:
    """
    Validate a genre reference, mapping the legacy sentinel to None.

    Raises:
        InvalidIdentifierError: If the reference is not an id string
    """
    if value is None or value == NO_GENRE_ID:
        return None
    return format_object_id(parse_object_id(value))
