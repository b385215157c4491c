"""
API Schemas for Bibliotheca

Pydantic models for request validation and response serialization:
- Book models
- User models
- Genre models
- Comment and rating models

Design Decisions:
1. Partial requests: update and search bodies accept any subset of their
   fields; a field that is sent must not be null, so "sent" and "absent"
   never blur
2. Separate Request/Response: Clear distinction between inputs and outputs
3. Store ids are exposed as ``id`` strings
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict, ValidationInfo, field_validator

from bibliotheca.query import RatingOperator


class PartialRequest(BaseModel):
    """Base for bodies whose fields are all optional."""

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        # Validators do not run on defaults, so only sent nulls land here
        if value is None:
            raise ValueError(f"'{info.field_name}' may be omitted but not null")
        return value

    def present_fields(self) -> dict[str, Any]:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Book Schemas
# =============================================================================

class BookCreate(BaseModel):
    """Book creation request."""

    title: str
    author: str
    year: int
    resume: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Dune",
                "author": "Frank Herbert",
                "year": 1965,
                "resume": "A noble family is handed the desert planet Arrakis.",
            }
        }
    )


class BookUpdate(PartialRequest):
    """Book update request (partial)."""

    title: Optional[str] = None
    author: Optional[str] = None
    year: Optional[int] = None
    resume: Optional[str] = None
    availability: Optional[bool] = None
    gender_id: Optional[str] = None


class BookSearchRequest(PartialRequest):
    """Exact-match book search; no field means no results."""

    title: Optional[str] = None
    author: Optional[str] = None
    year: Optional[int] = None


class BookResponse(BaseModel):
    """Book response model."""

    id: Optional[str] = None
    title: str
    author: str
    year: int
    resume: str
    availability: bool
    # Genre id, or the genre name on genre listings; null when unassigned
    gender_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RatedBookResponse(BookResponse):
    """Book found by the rating search."""

    average_rating: float


# =============================================================================
# User Schemas
# =============================================================================

class UserCreate(BaseModel):
    """User creation request."""

    first_name: str
    last_name: str
    email: str
    birth_date: str = Field(..., description="YYYY-MM-DD")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com",
                "birth_date": "1815-12-10",
            }
        }
    )


class UserUpdate(PartialRequest):
    """User update request (partial)."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    birth_date: Optional[str] = None
    borrowed_books: Optional[list[str]] = None
    role: Optional[str] = None


class UserSearchRequest(PartialRequest):
    """Exact-match user search; at least one field is required."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    """User response model."""

    id: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    birth_date: str
    borrowed_books: list[str] = Field(default_factory=list)
    role: str = "user"

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Genre Schemas
# =============================================================================

class GenreCreate(BaseModel):
    """Genre creation request."""

    name: str = Field(..., min_length=1)


class GenreResponse(BaseModel):
    """Genre response model."""

    id: Optional[str] = None
    name: str

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Comment Schemas
# =============================================================================

class CommentCreate(BaseModel):
    """Comment creation request."""

    user_id: str
    book_id: str
    comment: str
    # Any integer is accepted
    rating: int


class CommentResponse(BaseModel):
    """Comment response model."""

    id: Optional[str] = None
    user_id: str
    book_id: str
    comment: str
    rating: int

    model_config = ConfigDict(from_attributes=True)


class RatingSearchRequest(BaseModel):
    """Books by average rating."""

    operator: RatingOperator
    rating: float

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"operator": ">=", "rating": 4}
        }
    )


# =============================================================================
# System Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Book not available",
                "detail": "Book '65a1f0c2e4b0a1b2c3d4e5f6'",
                "code": "DOMAIN_RULE",
                "timestamp": "2025-01-20T12:00:00Z",
            }
        }
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
