"""
Unit tests for stored entities and the identifier codec.
"""

import pytest
from bson import ObjectId

from bibliotheca.exceptions import InvalidIdentifierError
from bibliotheca.identifiers import (
    NO_GENRE_ID,
    format_object_id,
    normalize_genre_reference,
    parse_object_id,
)
from bibliotheca.storage import StoredBook, StoredComment, StoredGenre, StoredUser


class TestIdentifiers:
    """Tests for id parsing and formatting."""

    def test_parse_valid_id(self):
        oid = ObjectId()

        assert parse_object_id(str(oid)) == oid

    @pytest.mark.parametrize("value", ["", "abc", "z" * 24, "0" * 23, None, 42])
    def test_parse_invalid_id(self, value):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            parse_object_id(value)

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_format_is_hex_string(self):
        oid = ObjectId()

        assert format_object_id(oid) == str(oid)
        assert len(format_object_id(oid)) == 24

    def test_genre_reference(self):
        genre_id = str(ObjectId())

        assert normalize_genre_reference(None) is None
        assert normalize_genre_reference(NO_GENRE_ID) is None
        assert normalize_genre_reference(genre_id) == genre_id


class TestStoredBook:
    """Tests for StoredBook."""

    def test_from_document(self, book_document, book_id):
        book = StoredBook.from_document(book_document)

        assert book.id == book_id
        assert book.title == "The Left Hand of Darkness"
        assert book.year == 1969
        assert book.availability is True
        assert book.gender_id is None
        assert book.average_rating is None

    def test_legacy_no_genre_sentinel_decodes_to_none(self, book_document):
        book_document["gender_id"] = NO_GENRE_ID

        assert StoredBook.from_document(book_document).gender_id is None

    def test_missing_availability_defaults_to_available(self, book_document):
        del book_document["availability"]

        assert StoredBook.from_document(book_document).availability is True

    def test_to_document_excludes_id(self, book_document):
        document = StoredBook.from_document(book_document).to_document()

        assert "_id" not in document
        assert "id" not in document
        assert document["gender_id"] is None

    def test_to_dict_includes_rating_only_when_set(self, book_document):
        assert "average_rating" not in StoredBook.from_document(book_document).to_dict()

        book_document["average_rating"] = 4.5
        data = StoredBook.from_document(book_document).to_dict()

        assert data["average_rating"] == 4.5


class TestStoredUser:
    """Tests for StoredUser."""

    def test_defaults(self):
        user = StoredUser(
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            birth_date="1815-12-10",
        )

        assert user.borrowed_books == []
        assert user.role == "user"
        assert user.id is None

    def test_from_document(self, user_document, user_id):
        user_document["borrowed_books"] = ["b1"]

        user = StoredUser.from_document(user_document)

        assert user.id == user_id
        assert user.borrowed_books == ["b1"]
        assert user.to_dict()["id"] == user_id


class TestStoredGenreAndComment:
    """Tests for StoredGenre and StoredComment."""

    def test_genre_round_trip(self):
        oid = ObjectId()
        genre = StoredGenre.from_document({"_id": oid, "name": "Fiction"})

        assert genre.to_dict() == {"id": str(oid), "name": "Fiction"}

    def test_comment_keeps_references_as_given(self):
        comment = StoredComment.from_document({
            "_id": ObjectId(),
            "user_id": "u-1",
            "book_id": "b-1",
            "comment": "Great",
            "rating": 11,
        })

        assert comment.to_document() == {
            "user_id": "u-1",
            "book_id": "b-1",
            "comment": "Great",
            "rating": 11,
        }
