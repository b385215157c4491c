"""
Book Repository for Bibliotheca

Book storage on the ``books`` collection, plus the borrow/return
transition that links a book to a user:
- CRUD with partial updates
- Equality search on title, author and year
- Borrow/return guarded by conditional updates

Design Decisions:
1. Compare-and-swap on availability: the book flips state in a single
   ``find_one_and_update`` that only matches the expected state, so two
   concurrent borrows cannot both succeed.
2. The user is loaded before any write, so an unknown user never leaves
   a book marked as borrowed.
3. ``$addToSet``/``$pull`` on ``borrowed_books``: no duplicate ids on
   borrow, every occurrence removed on return.
4. Only the user listing the book can return it.
"""

from typing import Any, Mapping

from loguru import logger
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from bibliotheca.exceptions import DomainRuleError, NotFoundError
from bibliotheca.identifiers import parse_object_id
from bibliotheca.query import (
    BOOK_SEARCH_FIELDS,
    BOOK_UPDATE_FIELDS,
    build_filter,
    build_update,
    is_noop,
    to_set_document,
)
from bibliotheca.storage.models import StoredBook, StoredUser
from bibliotheca.storage.mongo import MongoDatabase, fetch_all


class BookRepository:
    """
    Repository for book CRUD operations and lending.

    Usage:
        repo = BookRepository(database)

        book = await repo.create(
            title="Dune",
            author="Frank Herbert",
            year=1965,
            resume="Desert planet politics.",
        )

        user, book = await repo.borrow(book.id, user_id)
    """

    def __init__(self, database: MongoDatabase):
        self.database = database

    @property
    def books(self):
        return self.database.books

    @property
    def users(self):
        return self.database.users

    async def create(
        self,
        title: str,
        author: str,
        year: int,
        resume: str,
    ) -> StoredBook:
        """
        Create a new book.

        New books are available and have no genre.

        Returns:
            Created StoredBook
        """
        book = StoredBook(title=title, author=author, year=year, resume=resume)
        result = await self.books.insert_one(book.to_document())
        book.id = str(result.inserted_id)

        logger.info(f"Created book {book.id}: {title}")
        return book

    async def get(self, book_id: str) -> StoredBook:
        """
        Get book by ID.

        Raises:
            InvalidIdentifierError: If the id is malformed
            NotFoundError: If no book has this id
        """
        document = await self.books.find_one({"_id": parse_object_id(book_id)})
        if document is None:
            raise NotFoundError("Book", book_id)
        return StoredBook.from_document(document)

    async def list_all(self) -> list[StoredBook]:
        """List every book."""
        documents = await fetch_all(self.books.find({}))
        return [StoredBook.from_document(d) for d in documents]

    async def update(self, book_id: str, present: Mapping[str, Any]) -> StoredBook:
        """
        Update the fields the client sent.

        With no field present nothing is written and the current book is
        returned.

        Args:
            book_id: Book ID
            present: Field name -> value, only for sent fields

        Returns:
            Updated StoredBook
        """
        oid = parse_object_id(book_id)
        update = build_update(present, BOOK_UPDATE_FIELDS)

        if is_noop(update):
            logger.debug(f"Empty update for book {book_id}, nothing to write")
            return await self.get(book_id)

        document = await self.books.find_one_and_update(
            {"_id": oid},
            to_set_document(update),
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise NotFoundError("Book", book_id)

        logger.info(f"Updated book {book_id}: {', '.join(update)}")
        return StoredBook.from_document(document)

    async def delete(self, book_id: str) -> StoredBook:
        """
        Delete a book.

        Returns:
            The book as it was before deletion
        """
        document = await self.books.find_one_and_delete({"_id": parse_object_id(book_id)})
        if document is None:
            raise NotFoundError("Book", book_id)

        logger.info(f"Deleted book {book_id}")
        return StoredBook.from_document(document)

    async def search(self, present: Mapping[str, Any]) -> list[StoredBook]:
        """
        Search books by exact title, author and/or year.

        Returns:
            Matching books; empty without querying when no field was sent
        """
        query = build_filter(present, BOOK_SEARCH_FIELDS)
        if not query:
            return []

        documents = await fetch_all(self.books.find(query))
        return [StoredBook.from_document(d) for d in documents]

    # =========================================================================
    # Lending
    # =========================================================================

    async def _load_user(self, user_id: str) -> StoredUser:
        document = await self.users.find_one({"_id": parse_object_id(user_id)})
        if document is None:
            raise NotFoundError("User", user_id)
        return StoredUser.from_document(document)

    async def _transition(self, book_id: str, available: bool, refusal: str) -> StoredBook:
        """
        Flip a book's availability from ``available`` to its opposite.

        Raises:
            NotFoundError: If the book does not exist
            DomainRuleError: If the book is not in the expected state
        """
        oid = parse_object_id(book_id)
        document = await self.books.find_one_and_update(
            {"_id": oid, "availability": available},
            {"$set": {"availability": not available}},
            return_document=ReturnDocument.AFTER,
        )
        if document is not None:
            return StoredBook.from_document(document)

        if await self.books.find_one({"_id": oid}) is None:
            raise NotFoundError("Book", book_id)

        logger.warning(f"Refused transition for book {book_id}: {refusal}")
        raise DomainRuleError(refusal, detail=f"Book '{book_id}'")

    async def _revert(self, book_id: str, available: bool) -> None:
        """Undo a transition whose user update could not be applied."""
        logger.error(f"Reverting book {book_id} to availability={available}")
        await self.books.update_one(
            {"_id": parse_object_id(book_id), "availability": not available},
            {"$set": {"availability": available}},
        )

    async def _change_user(self, book_id: str, user_id: str, change: dict, available: bool) -> StoredUser:
        """
        Apply ``change`` to the user's borrowed list after a book transition.

        The transition is undone when the user update fails or finds no user.
        """
        try:
            document = await self.users.find_one_and_update(
                {"_id": parse_object_id(user_id)},
                change,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError:
            await self._revert(book_id, available)
            raise

        if document is None:
            await self._revert(book_id, available)
            raise NotFoundError("User", user_id)
        return StoredUser.from_document(document)

    async def borrow(self, book_id: str, user_id: str) -> tuple[StoredUser, StoredBook]:
        """
        Lend a book to a user.

        Args:
            book_id: Book ID
            user_id: User ID

        Returns:
            (updated user, updated book)

        Raises:
            NotFoundError: If either id does not resolve
            DomainRuleError: "Book not available" if already lent
        """
        parse_object_id(book_id)
        parse_object_id(user_id)
        await self._load_user(user_id)

        book = await self._transition(book_id, available=True, refusal="Book not available")
        user = await self._change_user(
            book_id, user_id, {"$addToSet": {"borrowed_books": book_id}}, available=True,
        )

        logger.info(f"Book {book_id} borrowed by user {user_id}")
        return user, book

    async def return_book(self, book_id: str, user_id: str) -> tuple[StoredUser, StoredBook]:
        """
        Take a lent book back from the user holding it.

        Returns:
            (updated user, updated book)

        Raises:
            NotFoundError: If either id does not resolve
            DomainRuleError: "Book not borrowed" if the book is available
                or the user does not hold it
        """
        parse_object_id(book_id)
        parse_object_id(user_id)
        holder = await self._load_user(user_id)

        if book_id not in holder.borrowed_books:
            # unknown books still answer NotFound
            await self.get(book_id)
            logger.warning(f"Refused return of book {book_id}: not held by user {user_id}")
            raise DomainRuleError("Book not borrowed", detail=f"User '{user_id}' does not hold book '{book_id}'")

        book = await self._transition(book_id, available=False, refusal="Book not borrowed")
        user = await self._change_user(
            book_id, user_id, {"$pull": {"borrowed_books": book_id}}, available=False,
        )

        logger.info(f"Book {book_id} returned by user {user_id}")
        return user, book
