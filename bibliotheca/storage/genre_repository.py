"""
Genre Repository for Bibliotheca

Genres on the ``genres`` collection, and the listing of a genre's books
with the genre name in place of the genre id.
"""

from loguru import logger
from pymongo.errors import DuplicateKeyError

from bibliotheca.exceptions import ConflictError
from bibliotheca.query import build_genre_books_pipeline
from bibliotheca.storage.models import StoredBook, StoredGenre
from bibliotheca.storage.mongo import BOOKS, MongoDatabase, fetch_all


class GenreRepository:
    """Repository for genres."""

    def __init__(self, database: MongoDatabase):
        self.database = database

    @property
    def genres(self):
        return self.database.genres

    async def create(self, name: str) -> StoredGenre:
        """
        Create a genre.

        Raises:
            ConflictError: If a genre with this name exists
        """
        genre = StoredGenre(name=name)

        if await self.genres.find_one({"name": name}) is not None:
            raise ConflictError("Genre already exist", detail=f"Genre '{name}' exists")

        try:
            result = await self.genres.insert_one(genre.to_document())
        except DuplicateKeyError as e:
            raise ConflictError("Genre already exist", detail=f"Genre '{name}' exists") from e

        genre.id = str(result.inserted_id)
        logger.info(f"Created genre {genre.id}: {name}")
        return genre

    async def list_all(self) -> list[StoredGenre]:
        documents = await fetch_all(self.genres.find({}))
        return [StoredGenre.from_document(d) for d in documents]

    async def list_books(self, name: str) -> list[StoredBook]:
        """
        List the books of a genre.

        Args:
            name: Exact genre name

        Returns:
            Books whose ``gender_id`` is the genre's id, carrying the
            genre name as ``gender_id``; empty for an unknown name
        """
        pipeline = build_genre_books_pipeline(name, books_collection=BOOKS)
        cursor = await self.genres.aggregate(pipeline)
        documents = await fetch_all(cursor)
        return [StoredBook.from_document(d) for d in documents]
