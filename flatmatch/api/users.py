"""
Flatmatch — Users API

Endpoints for creating and reading user records.  Identity verification and
photo upload live with the external auth/storage provider; only the
resulting identifiers and URLs are stored here.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flatmatch.database import get_db
from flatmatch.models.user import User
from flatmatch.schemas.user import UserCreate, UserResponse

logger = structlog.get_logger("flatmatch.api.users")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# POST / — Create a new user
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Register a new user account.

    Validates that the email is not already in use, creates the user record,
    and returns the full user response.
    """
    email = payload.email.strip().lower()
    log = logger.bind(email=email)
    log.info("create_user_start")

    stmt = select(User).where(User.email == email)
    result = await db.execute(stmt)
    if result.scalar_one_or_none() is not None:
        log.warning("create_user_duplicate_email")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email already exists.",
        )

    new_user = User(
        email=email,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        phone=payload.phone,
        profile_photo_url=payload.profile_photo_url,
        interests=[],
        quiz_completed=False,
        is_verified=False,
    )
    db.add(new_user)
    await db.flush()
    await db.refresh(new_user)

    log.info("create_user_complete", user_id=str(new_user.id))
    return new_user


# ──────────────────────────────────────────────────────────────────────────────
# GET /{user_id} — Get user by ID
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID",
)
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Retrieve a single user by their UUID."""
    log = logger.bind(user_id=str(user_id))
    log.info("get_user")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        log.warning("get_user_not_found")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found.",
        )

    return user
