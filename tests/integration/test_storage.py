"""
Integration tests for the repositories on an in-memory document store.

Queries, updates and aggregation pipelines are evaluated by mongomock,
so these tests check what the store ends up holding and returning.
"""

import pytest
import pytest_asyncio
from bson import ObjectId

from bibliotheca.exceptions import ConflictError, DomainRuleError, NotFoundError
from bibliotheca.query import RatingOperator
from bibliotheca.storage import (
    BookRepository,
    CommentRepository,
    GenreRepository,
    UserRepository,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture
def books(store):
    return BookRepository(store)


@pytest.fixture
def users(store):
    return UserRepository(store)


@pytest.fixture
def genres(store):
    return GenreRepository(store)


@pytest.fixture
def comments(store):
    return CommentRepository(store)


async def add_book(books, title="Dune", year=1965):
    return await books.create(title=title, author="Frank Herbert", year=year, resume="Spice.")


async def add_user(users, email="ada@example.com"):
    return await users.create(
        first_name="Ada", last_name="Lovelace", email=email, birth_date="1815-12-10",
    )


async def stored_user(store, user_id):
    return await store.users.find_one({"_id": ObjectId(user_id)})


async def stored_book(store, book_id):
    return await store.books.find_one({"_id": ObjectId(book_id)})


class TestBookStorage:
    """Tests for book CRUD on the store."""

    async def test_create_then_get(self, books):
        created = await add_book(books)

        fetched = await books.get(created.id)

        assert fetched.title == "Dune"
        assert fetched.availability is True
        assert fetched.gender_id is None

    async def test_partial_update_keeps_other_fields(self, books):
        created = await add_book(books)

        updated = await books.update(created.id, {"year": 1966})

        assert updated.year == 1966
        assert updated.title == "Dune"
        assert updated.resume == "Spice."

    async def test_search_matches_integer_year(self, books):
        await add_book(books, title="Dune", year=1965)
        await add_book(books, title="Solaris", year=1961)

        found = await books.search({"year": 1961})

        assert [b.title for b in found] == ["Solaris"]

    async def test_delete(self, books):
        created = await add_book(books)

        deleted = await books.delete(created.id)

        assert deleted.id == created.id
        with pytest.raises(NotFoundError):
            await books.get(created.id)


class TestUserStorage:
    """Tests for users on the store."""

    async def test_duplicate_email(self, users):
        await add_user(users)

        with pytest.raises(ConflictError, match="User already exist"):
            await add_user(users)

    async def test_search(self, users):
        await add_user(users, email="ada@example.com")
        await add_user(users, email="other@example.com")

        found = await users.search({"email": "other@example.com"})

        assert [u.email for u in found] == ["other@example.com"]


class TestLendingOnStore:
    """Tests for borrow and return against stored documents."""

    async def test_borrow_borrow_return(self, store, books, users):
        book = await add_book(books)
        user = await add_user(users)

        borrower, lent = await books.borrow(book.id, user.id)
        assert borrower.borrowed_books == [book.id]
        assert lent.availability is False

        with pytest.raises(DomainRuleError, match="Book not available"):
            await books.borrow(book.id, user.id)
        assert (await stored_user(store, user.id))["borrowed_books"] == [book.id]

        returner, returned = await books.return_book(book.id, user.id)
        assert returner.borrowed_books == []
        assert returned.availability is True
        assert (await stored_book(store, book.id))["availability"] is True

    async def test_borrow_adds_id_once(self, store, books, users):
        book = await add_book(books)
        user = await add_user(users)
        await users.update(user.id, {"borrowed_books": [book.id]})

        borrower, _ = await books.borrow(book.id, user.id)

        assert borrower.borrowed_books == [book.id]
        assert (await stored_user(store, user.id))["borrowed_books"] == [book.id]

    async def test_return_removes_every_occurrence(self, store, books, users):
        book = await add_book(books)
        user = await add_user(users)
        await books.update(book.id, {"availability": False})
        await users.update(user.id, {"borrowed_books": [book.id, "other", book.id]})

        returner, _ = await books.return_book(book.id, user.id)

        assert returner.borrowed_books == ["other"]
        assert (await stored_user(store, user.id))["borrowed_books"] == ["other"]

    async def test_return_by_other_user_leaves_book_lent(self, store, books, users):
        book = await add_book(books)
        holder = await add_user(users, email="holder@example.com")
        other = await add_user(users, email="other@example.com")
        await books.borrow(book.id, holder.id)

        with pytest.raises(DomainRuleError, match="Book not borrowed"):
            await books.return_book(book.id, other.id)

        assert (await stored_book(store, book.id))["availability"] is False
        assert (await stored_user(store, holder.id))["borrowed_books"] == [book.id]

    async def test_borrow_for_unknown_user_leaves_book_available(self, store, books):
        book = await add_book(books)

        with pytest.raises(NotFoundError):
            await books.borrow(book.id, str(ObjectId()))

        assert (await stored_book(store, book.id))["availability"] is True


class TestRatingsOnStore:
    """Tests for ratings computed by the store."""

    @pytest_asyncio.fixture
    async def rated(self, books, comments):
        rated = await add_book(books, title="Rated")
        unrated = await add_book(books, title="Unrated")
        for rating in (2, 4, 6):
            await comments.create(user_id="u-1", book_id=rated.id, comment="ok", rating=rating)
        return rated, unrated

    async def test_average_rating(self, comments, rated):
        rated_book, unrated_book = rated

        assert await comments.average_rating(rated_book.id) == 4.0
        assert await comments.average_rating(unrated_book.id) is None

    @pytest.mark.parametrize("operator, threshold, expected", [
        (RatingOperator.GREATER_OR_EQUAL, 4, ["Rated"]),
        (RatingOperator.GREATER_OR_EQUAL, 5, []),
        (RatingOperator.EQUAL, 4, ["Rated"]),
        (RatingOperator.LESS, 4, []),
        (RatingOperator.NOT_EQUAL, 1, ["Rated"]),
    ])
    async def test_search_by_rating(self, comments, rated, operator, threshold, expected):
        found = await comments.search_books_by_rating(operator, threshold)

        assert [b.title for b in found] == expected
        assert all(b.average_rating == 4.0 for b in found)

    async def test_unrated_book_never_matches(self, comments, rated):
        _, unrated_book = rated

        found = await comments.search_books_by_rating(RatingOperator.NOT_EQUAL, 4)

        assert unrated_book.id not in [b.id for b in found]


class TestGenresOnStore:
    """Tests for listing a genre's books through the store."""

    async def test_books_of_genre_carry_genre_name(self, books, genres):
        fiction = await genres.create("Fiction")
        poetry = await genres.create("Poetry")
        novel = await add_book(books, title="Dune")
        poems = await add_book(books, title="Odes")
        await add_book(books, title="Untagged")
        await books.update(novel.id, {"gender_id": fiction.id})
        await books.update(poems.id, {"gender_id": poetry.id})

        found = await genres.list_books("Fiction")

        assert [(b.id, b.title, b.gender_id) for b in found] == [(novel.id, "Dune", "Fiction")]
        assert found[0].year == 1965

    async def test_name_match_is_exact(self, books, genres):
        fiction = await genres.create("Fiction")
        novel = await add_book(books)
        await books.update(novel.id, {"gender_id": fiction.id})

        assert await genres.list_books("fiction") == []
        assert await genres.list_books("Nope") == []

    async def test_duplicate_genre(self, genres):
        await genres.create("Fiction")

        with pytest.raises(ConflictError, match="Genre already exist"):
            await genres.create("Fiction")
