"""
Document store access for Bibliotheca.

Owns the asyncio MongoDB client and hands out the four named
collections. Repositories never build clients themselves.
"""

from typing import Optional

from loguru import logger
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError


BOOKS = "books"
USERS = "users"
GENRES = "genres"
COMMENTS = "comments"


class MongoDatabase:
    """
    Handle on the catalog database.

    Usage:
        database = MongoDatabase("mongodb://localhost:27017", db_name="bibliotheca")
        await database.ensure_indexes()

        book = await database.books.find_one({"title": "Dune"})
    """

    def __init__(
        self,
        url: Optional[str] = None,
        db_name: str = "bibliotheca",
        timeout_ms: int = 5000,
        client=None,
    ):
        """
        Initialize database handle.

        Args:
            url: MongoDB connection URL
            db_name: Database name
            timeout_ms: Server selection timeout
            client: Prebuilt client (tests pass a mock)
        """
        self.url = url or "mongodb://localhost:27017"
        self.db_name = db_name

        if client is None:
            # Connects lazily on the first operation
            client = AsyncMongoClient(self.url, serverSelectionTimeoutMS=timeout_ms)
        self.client = client
        self.db = self.client[db_name]

        logger.info(f"MongoDatabase initialized: {db_name}")

    def collection(self, name: str):
        """Get a collection by name."""
        return self.db[name]

    @property
    def books(self):
        return self.collection(BOOKS)

    @property
    def users(self):
        return self.collection(USERS)

    @property
    def genres(self):
        return self.collection(GENRES)

    @property
    def comments(self):
        return self.collection(COMMENTS)

    async def ping(self) -> bool:
        """Check the server answers."""
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def ensure_indexes(self) -> None:
        """Create the unique and lookup indexes the repositories rely on."""
        await self.users.create_index([("email", ASCENDING)], unique=True)
        await self.genres.create_index([("name", ASCENDING)], unique=True)
        await self.books.create_index([("gender_id", ASCENDING)])
        await self.comments.create_index([("book_id", ASCENDING)])
        await self.comments.create_index([("user_id", ASCENDING)])
        logger.info("Database indexes ensured")

    async def close(self) -> None:
        """Close the client."""
        await self.client.close()
        logger.info("Database connection closed")


async def fetch_all(cursor) -> list[dict]:
    """Drain a cursor into a list of documents."""
    return await cursor.to_list(length=None)
