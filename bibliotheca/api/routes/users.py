"""
User API Routes

Registration, listing, exact-match search, partial update and deletion.
"""

from fastapi import APIRouter, Depends
from loguru import logger

from bibliotheca.api.dependencies import get_user_repository
from bibliotheca.api.schemas import (
    ErrorResponse,
    UserCreate,
    UserResponse,
    UserSearchRequest,
    UserUpdate,
)
from bibliotheca.storage import UserRepository


router = APIRouter(prefix="/user", tags=["users"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


@router.post(
    "",
    response_model=UserResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid birth date"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def create_user(
    user: UserCreate,
    repo: UserRepository = Depends(get_user_repository),
):
    """Register a user."""
    logger.info(f"Creating user: {user.first_name} {user.last_name}")
    return await repo.create(
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        birth_date=user.birth_date,
    )


@router.get("", response_model=list[UserResponse])
async def list_users(repo: UserRepository = Depends(get_user_repository)):
    """List every user."""
    return await repo.list_all()


@router.post(
    "/search",
    response_model=list[UserResponse],
    responses={400: {"model": ErrorResponse, "description": "No search criteria provided"}},
)
async def search_users(
    request: UserSearchRequest,
    repo: UserRepository = Depends(get_user_repository),
):
    """Search by exact first name, last name and/or email."""
    present = request.present_fields()
    logger.info(f"Searching users on: {', '.join(present) or 'nothing'}")
    return await repo.search(present)


@router.put("/{user_id}", response_model=UserResponse, responses=NOT_FOUND)
async def update_user(
    user_id: str,
    user: UserUpdate,
    repo: UserRepository = Depends(get_user_repository),
):
    """
    Update a user.

    Supports partial updates - only provided fields are modified.
    """
    logger.info(f"Updating user: {user_id}")
    return await repo.update(user_id, user.present_fields())


@router.delete("/{user_id}", response_model=UserResponse, responses=NOT_FOUND)
async def delete_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository),
):
    """Delete a user and return it as it was."""
    logger.info(f"Deleting user: {user_id}")
    return await repo.delete(user_id)
