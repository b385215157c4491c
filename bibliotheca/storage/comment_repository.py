"""
Comment Repository for Bibliotheca

Reviews on the ``comments`` collection and the ratings computed from
them. ``user_id`` and ``book_id`` are stored as given; nothing checks
that they resolve.
"""

from typing import Optional

from loguru import logger

from bibliotheca.query import RatingOperator, build_rating_pipeline
from bibliotheca.storage.models import StoredBook, StoredComment
from bibliotheca.storage.mongo import COMMENTS, MongoDatabase, fetch_all


class CommentRepository:
    """Repository for comments and ratings."""

    def __init__(self, database: MongoDatabase):
        self.database = database

    @property
    def comments(self):
        return self.database.comments

    async def create(
        self,
        user_id: str,
        book_id: str,
        comment: str,
        rating: int,
    ) -> StoredComment:
        """Create a comment."""
        stored = StoredComment(user_id=user_id, book_id=book_id, comment=comment, rating=rating)
        result = await self.comments.insert_one(stored.to_document())
        stored.id = str(result.inserted_id)

        logger.info(f"Created comment {stored.id} on book {book_id}")
        return stored

    async def _find(self, query: dict) -> list[StoredComment]:
        documents = await fetch_all(self.comments.find(query))
        return [StoredComment.from_document(d) for d in documents]

    async def list_all(self) -> list[StoredComment]:
        return await self._find({})

    async def list_by_book(self, book_id: str) -> list[StoredComment]:
        return await self._find({"book_id": book_id})

    async def list_by_user(self, user_id: str) -> list[StoredComment]:
        return await self._find({"user_id": user_id})

    async def average_rating(self, book_id: str) -> Optional[float]:
        """
        Average rating of one book.

        Returns:
            Sum of ratings divided by comment count, or None when the
            book has no comment
        """
        comments = await self.list_by_book(book_id)
        if not comments:
            return None
        return sum(c.rating for c in comments) / len(comments)

    async def search_books_by_rating(
        self,
        operator: RatingOperator,
        threshold: float,
    ) -> list[StoredBook]:
        """
        Books whose average rating satisfies ``operator`` against ``threshold``.

        Books without comments are never returned.
        """
        logger.info(f"Searching books with average rating {operator.value} {threshold}")

        pipeline = build_rating_pipeline(operator, threshold, comments_collection=COMMENTS)
        cursor = await self.database.books.aggregate(pipeline)
        documents = await fetch_all(cursor)
        return [StoredBook.from_document(d) for d in documents]
