"""
Pytest configuration and fixtures for Bibliotheca tests.
"""

import sys
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import mongomock
import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bibliotheca.api.main import create_app
from bibliotheca.api.dependencies import (
    Settings,
    get_settings,
    get_database,
    get_book_repository,
    get_user_repository,
    get_genre_repository,
    get_comment_repository,
)
from bibliotheca.storage import (
    MongoDatabase,
    BookRepository,
    UserRepository,
    GenreRepository,
    CommentRepository,
)


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings() -> Settings:
    """Return settings configured for testing."""
    return Settings(
        mongo_url="mongodb://localhost:27017",
        db_name="bibliotheca_test",
        environment="test",
        debug=True,
    )


# =============================================================================
# Store Doubles
# =============================================================================

def make_cursor(documents: list[dict]) -> MagicMock:
    """Cursor whose ``to_list`` yields ``documents``."""
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=list(documents))
    return cursor


def make_collection() -> MagicMock:
    """Collection double: every read finds nothing until told otherwise."""
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.find = MagicMock(return_value=make_cursor([]))
    collection.aggregate = AsyncMock(return_value=make_cursor([]))
    return collection


@pytest.fixture
def database() -> MagicMock:
    """Database double with one independent collection per name."""
    db = MagicMock(spec=MongoDatabase)
    db.books = make_collection()
    db.users = make_collection()
    db.genres = make_collection()
    db.comments = make_collection()
    db.ping = AsyncMock(return_value=True)
    return db


# =============================================================================
# In-Memory Store
# =============================================================================

class InMemoryCursor:
    """Asyncio cursor API over a mongomock cursor."""

    def __init__(self, cursor):
        self._cursor = cursor

    async def to_list(self, length=None):
        documents = list(self._cursor)
        return documents if length is None else documents[:length]


class InMemoryCollection:
    """
    Asyncio collection API over a mongomock collection.

    ``find`` stays synchronous and ``aggregate`` is awaited, as with
    ``AsyncMongoClient``; every other method becomes a coroutine.
    """

    def __init__(self, collection):
        self._collection = collection

    def find(self, *args, **kwargs):
        return InMemoryCursor(self._collection.find(*args, **kwargs))

    async def aggregate(self, pipeline):
        return InMemoryCursor(self._collection.aggregate(pipeline))

    def __getattr__(self, name):
        method = getattr(self._collection, name)

        async def call(*args, **kwargs):
            return method(*args, **kwargs)

        return call


class InMemoryClient:
    """Stands in for ``AsyncMongoClient`` on top of ``mongomock.MongoClient``."""

    def __init__(self):
        self._client = mongomock.MongoClient()
        self.admin = MagicMock()
        self.admin.command = AsyncMock(return_value={"ok": 1.0})

    def __getitem__(self, db_name):
        return InMemoryDatabase(self._client[db_name])

    async def close(self):
        self._client.close()


class InMemoryDatabase:
    def __init__(self, db):
        self._db = db

    def __getitem__(self, name):
        return InMemoryCollection(self._db[name])


@pytest_asyncio.fixture
async def store() -> AsyncGenerator[MongoDatabase, None]:
    """MongoDatabase on an empty in-memory store, indexes ensured."""
    database = MongoDatabase(db_name="bibliotheca_test", client=InMemoryClient())
    await database.ensure_indexes()
    yield database
    await database.close()


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def book_id() -> str:
    return str(ObjectId())


@pytest.fixture
def user_id() -> str:
    return str(ObjectId())


@pytest.fixture
def genre_id() -> str:
    return str(ObjectId())


@pytest.fixture
def sample_book_data() -> dict:
    """Sample book creation body."""
    return {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "year": 1969,
        "resume": "An envoy on the ice planet Gethen.",
    }


@pytest.fixture
def sample_user_data() -> dict:
    """Sample user creation body."""
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "birth_date": "1815-12-10",
    }


@pytest.fixture
def book_document(book_id, sample_book_data) -> dict:
    """Stored, available book without genre."""
    return {
        "_id": ObjectId(book_id),
        **sample_book_data,
        "availability": True,
        "gender_id": None,
    }


@pytest.fixture
def user_document(user_id, sample_user_data) -> dict:
    """Stored user with nothing borrowed."""
    return {
        "_id": ObjectId(user_id),
        **sample_user_data,
        "borrowed_books": [],
        "role": "user",
    }


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def book_repo() -> MagicMock:
    return MagicMock(spec=BookRepository)


@pytest.fixture
def user_repo() -> MagicMock:
    return MagicMock(spec=UserRepository)


@pytest.fixture
def genre_repo() -> MagicMock:
    return MagicMock(spec=GenreRepository)


@pytest.fixture
def comment_repo() -> MagicMock:
    return MagicMock(spec=CommentRepository)


@pytest_asyncio.fixture(scope="function")
async def app(database, book_repo, user_repo, genre_repo, comment_repo):
    """Create FastAPI application with repository doubles."""
    application = create_app(settings=get_test_settings())

    application.dependency_overrides[get_settings] = get_test_settings
    application.dependency_overrides[get_database] = lambda: database
    application.dependency_overrides[get_book_repository] = lambda: book_repo
    application.dependency_overrides[get_user_repository] = lambda: user_repo
    application.dependency_overrides[get_genre_repository] = lambda: genre_repo
    application.dependency_overrides[get_comment_repository] = lambda: comment_repo

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
