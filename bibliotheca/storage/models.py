"""
Stored entities for Bibliotheca.

Data classes decoded from, and encoded to, store documents. The store id
lives under ``_id`` in documents and as its string form in ``id`` here.
"""

from dataclasses import dataclass, field
from typing import Optional

from bibliotheca.identifiers import NO_GENRE_ID


def _document_id(document: dict) -> Optional[str]:
    value = document.get("_id")
    return str(value) if value is not None else None


@dataclass
class StoredBook:
    """Data class for book data transfer."""

    title: str
    author: str
    year: int
    resume: str
    availability: bool = True
    # None means no genre assigned
    gender_id: Optional[str] = None

    id: Optional[str] = None

    # Only set on records produced by the rating search
    average_rating: Optional[float] = None

    @classmethod
    def from_document(cls, document: dict) -> "StoredBook":
        """Create from a store document."""
        gender_id = document.get("gender_id")
        if gender_id == NO_GENRE_ID:
            gender_id = None

        return cls(
            id=_document_id(document),
            title=document["title"],
            author=document["author"],
            year=document["year"],
            resume=document["resume"],
            availability=document.get("availability", True),
            gender_id=gender_id,
            average_rating=document.get("average_rating"),
        )

    def to_document(self) -> dict:
        """Fields written to the store (never the id or derived fields)."""
        return {
            "title": self.title,
            "author": self.author,
            "year": self.year,
            "resume": self.resume,
            "availability": self.availability,
            "gender_id": self.gender_id,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {"id": self.id, **self.to_document()}
        if self.average_rating is not None:
            data["average_rating"] = self.average_rating
        return data


@dataclass
class StoredUser:
    """Data class for user data transfer."""

    first_name: str
    last_name: str
    email: str
    birth_date: str
    # Book ids in borrow order
    borrowed_books: list[str] = field(default_factory=list)
    role: str = "user"

    id: Optional[str] = None

    @classmethod
    def from_document(cls, document: dict) -> "StoredUser":
        """Create from a store document."""
        return cls(
            id=_document_id(document),
            first_name=document["first_name"],
            last_name=document["last_name"],
            email=document["email"],
            birth_date=document["birth_date"],
            borrowed_books=list(document.get("borrowed_books") or []),
            role=document.get("role", "user"),
        )

    def to_document(self) -> dict:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "birth_date": self.birth_date,
            "borrowed_books": list(self.borrowed_books),
            "role": self.role,
        }

    def to_dict(self) -> dict:
        return {"id": self.id, **self.to_document()}


@dataclass
class StoredGenre:
    """Data class for genre data transfer."""

    name: str
    id: Optional[str] = None

    @classmethod
    def from_document(cls, document: dict) -> "StoredGenre":
        return cls(id=_document_id(document), name=document["name"])

    def to_document(self) -> dict:
        return {"name": self.name}

    def to_dict(self) -> dict:
        return {"id": self.id, **self.to_document()}


@dataclass
class StoredComment:
    """Data class for comment (review) data transfer."""

    user_id: str
    book_id: str
    comment: str
    # No range is enforced
    rating: int

    id: Optional[str] = None

    @classmethod
    def from_document(cls, document: dict) -> "StoredComment":
        return cls(
            id=_document_id(document),
            user_id=document["user_id"],
            book_id=document["book_id"],
            comment=document["comment"],
            rating=document["rating"],
        )

    def to_document(self) -> dict:
        return {
            "user_id": self.user_id,
            "book_id": self.book_id,
            "comment": self.comment,
            "rating": self.rating,
        }

    def to_dict(self) -> dict:
        return {"id": self.id, **self.to_document()}
