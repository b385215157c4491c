"""
Aggregation pipelines.

Two server-side joins:

1. Rating search: books joined with their comments, averaged, and kept
   when the average satisfies a comparison.
2. Genre listing: a genre joined with the books tagged with it, the
   book's ``gender_id`` replaced by the genre's display name.

Both builders are pure; repositories run the pipelines.
"""

from enum import Enum


# Fields of a book record, in response order
BOOK_FIELDS = ("title", "author", "year", "resume", "availability", "gender_id")


class RatingOperator(str, Enum):
    """Comparison applied to a book's average rating."""
    EQUAL = "="
    NOT_EQUAL = "!="
    GREATER = ">"
    GREATER_OR_EQUAL = ">="
    LESS = "<"
    LESS_OR_EQUAL = "<="

    @property
    def mongo(self) -> str:
        """Query operator implementing this comparison."""
        return _MONGO_OPERATORS[self]


_MONGO_OPERATORS = {
    RatingOperator.EQUAL: "$eq",
    RatingOperator.NOT_EQUAL: "$ne",
    RatingOperator.GREATER: "$gt",
    RatingOperator.GREATER_OR_EQUAL: "$gte",
    RatingOperator.LESS: "$lt",
    RatingOperator.LESS_OR_EQUAL: "$lte",
}


def build_rating_pipeline(
    operator: RatingOperator,
    threshold: float,
    comments_collection: str = "comments",
) -> list[dict]:
    """
    Pipeline over ``books`` selecting books by average comment rating.

    Books without any comment have no average and are dropped before the
    comparison, whatever the operator.

    Args:
        operator: Comparison to apply
        threshold: Right-hand side of the comparison
        comments_collection: Name of the comments collection

    Returns:
        Aggregation stages
    """
    projection = {"_id": 1, **{name: 1 for name in BOOK_FIELDS}, "average_rating": 1}

    return [
        # comments reference books by the string form of their id
        {"$addFields": {"book_id_str": {"$toString": "$_id"}}},
        {
            "$lookup": {
                "from": comments_collection,
                "localField": "book_id_str",
                "foreignField": "book_id",
                "as": "comments",
            }
        },
        {"$match": {"comments.0": {"$exists": True}}},
        {"$addFields": {"average_rating": {"$avg": "$comments.rating"}}},
        {"$match": {"average_rating": {operator.mongo: float(threshold)}}},
        {"$project": projection},
    ]


def build_genre_books_pipeline(
    genre_name: str,
    books_collection: str = "books",
) -> list[dict]:
    """
    Pipeline over ``genres`` listing the books of one genre.

    The match on the genre name is exact and case-sensitive. An unknown
    name yields no documents.

    Args:
        genre_name: Display name of the genre
        books_collection: Name of the books collection

    Returns:
        Aggregation stages
    """
    book_projection = {"_id": "$books._id", **{name: f"$books.{name}" for name in BOOK_FIELDS}}
    book_projection["gender_id"] = "$name"

    return [
        {"$match": {"name": genre_name}},
        # books reference genres by the string form of their id
        {"$addFields": {"genre_id_str": {"$toString": "$_id"}}},
        {
            "$lookup": {
                "from": books_collection,
                "localField": "genre_id_str",
                "foreignField": "gender_id",
                "as": "books",
            }
        },
        {"$unwind": "$books"},
        {"$project": book_projection},
    ]
