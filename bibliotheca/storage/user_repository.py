"""
User Repository for Bibliotheca

User storage on the ``users`` collection. Emails are unique; birth
dates are checked on creation and on update.
"""

from typing import Any, Mapping

from loguru import logger
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from bibliotheca.exceptions import ConflictError, NoCriteriaError, NotFoundError
from bibliotheca.identifiers import parse_object_id
from bibliotheca.query import (
    USER_SEARCH_FIELDS,
    USER_UPDATE_FIELDS,
    build_filter,
    build_update,
    is_noop,
    parse_birth_date,
    to_set_document,
)
from bibliotheca.storage.models import StoredUser
from bibliotheca.storage.mongo import MongoDatabase, fetch_all


class UserRepository:
    """Repository for user CRUD operations."""

    def __init__(self, database: MongoDatabase):
        self.database = database

    @property
    def users(self):
        return self.database.users

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        birth_date: str,
    ) -> StoredUser:
        """
        Create a new user with role "user" and nothing borrowed.

        Raises:
            ValidationError: If birth_date is not YYYY-MM-DD
            ConflictError: If the email is already registered
        """
        user = StoredUser(
            first_name=first_name,
            last_name=last_name,
            email=email,
            birth_date=parse_birth_date(birth_date),
        )

        if await self.users.find_one({"email": email}) is not None:
            raise ConflictError("User already exist", detail=f"Email '{email}' is registered")

        try:
            result = await self.users.insert_one(user.to_document())
        except DuplicateKeyError as e:
            # lost a race against another insert with the same email
            raise ConflictError("User already exist", detail=f"Email '{email}' is registered") from e

        user.id = str(result.inserted_id)
        logger.info(f"Created user {user.id}")
        return user

    async def get(self, user_id: str) -> StoredUser:
        """
        Get user by ID.

        Raises:
            NotFoundError: If no user has this id
        """
        document = await self.users.find_one({"_id": parse_object_id(user_id)})
        if document is None:
            raise NotFoundError("User", user_id)
        return StoredUser.from_document(document)

    async def list_all(self) -> list[StoredUser]:
        documents = await fetch_all(self.users.find({}))
        return [StoredUser.from_document(d) for d in documents]

    async def update(self, user_id: str, present: Mapping[str, Any]) -> StoredUser:
        """
        Update the fields the client sent.

        ``borrowed_books``, when sent, replaces the whole list. With no
        field present nothing is written and the current user is returned.
        """
        oid = parse_object_id(user_id)
        update = build_update(present, USER_UPDATE_FIELDS)

        if is_noop(update):
            logger.debug(f"Empty update for user {user_id}, nothing to write")
            return await self.get(user_id)

        try:
            document = await self.users.find_one_and_update(
                {"_id": oid},
                to_set_document(update),
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise ConflictError("User already exist", detail=f"Email '{present.get('email')}' is registered") from e

        if document is None:
            raise NotFoundError("User", user_id)

        logger.info(f"Updated user {user_id}: {', '.join(update)}")
        return StoredUser.from_document(document)

    async def delete(self, user_id: str) -> StoredUser:
        """
        Delete a user.

        Returns:
            The user as it was before deletion
        """
        document = await self.users.find_one_and_delete({"_id": parse_object_id(user_id)})
        if document is None:
            raise NotFoundError("User", user_id)

        logger.info(f"Deleted user {user_id}")
        return StoredUser.from_document(document)

    async def search(self, present: Mapping[str, Any]) -> list[StoredUser]:
        """
        Search users by exact first name, last name and/or email.

        Raises:
            NoCriteriaError: If no field was sent
        """
        query = build_filter(present, USER_SEARCH_FIELDS)
        if not query:
            raise NoCriteriaError()

        documents = await fetch_all(self.users.find(query))
        return [StoredUser.from_document(d) for d in documents]
