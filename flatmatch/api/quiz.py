"""
Flatmatch — Quiz API

Endpoints for submitting the personality quiz and reading back the stored
result.  A submission is validated, classified into traits and preferences,
and persisted in one request.
"""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flatmatch.database import get_db
from flatmatch.models.user import User
from flatmatch.schemas.user import QuizResultResponse, QuizSubmitResponse
from flatmatch.services.profile_service import ProfileService
from flatmatch.services.validation_service import QuizValidationError

logger = structlog.get_logger("flatmatch.api.quiz")

router = APIRouter()

# ── Service singletons (lazy, constructed on first use) ───────────────────────

_profile_service: ProfileService | None = None


def _get_profile_service() -> ProfileService:
    global _profile_service
    if _profile_service is None:
        _profile_service = ProfileService()
    return _profile_service


# ──────────────────────────────────────────────────────────────────────────────
# POST /{user_id} — Submit quiz answers
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/{user_id}",
    response_model=QuizSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit personality quiz answers",
)
async def submit_quiz(
    user_id: uuid.UUID,
    answers: dict[str, Any] = Body(..., description="Raw quiz answers keyed by question id"),
    db: AsyncSession = Depends(get_db),
) -> QuizSubmitResponse:
    """Validate a quiz submission and store the derived profile.

    Returns 422 with ``{"field", "message"}`` when an answer is rejected.
    Resubmitting replaces the stored result and bumps its version.
    """
    log = logger.bind(user_id=str(user_id))
    log.info("submit_quiz_start", answer_count=len(answers))

    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found.",
        )

    service = _get_profile_service()
    try:
        profile = service.build_profile(
            user_id=str(user_id),
            raw_answers=answers,
            display_name=user.display_name,
            profile_photo_url=user.profile_photo_url,
        )
    except QuizValidationError as exc:
        log.info("submit_quiz_rejected", field=exc.field, reason=exc.message)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.to_dict(),
        ) from exc

    version = await service.save_quiz_result(profile, db)

    log.info("submit_quiz_complete", version=version)
    return QuizSubmitResponse(
        user_id=user_id,
        version=version,
        personality_traits=profile.personality_traits,
        match_preferences=profile.match_preferences,
        property_preferences=profile.property_preferences,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /{user_id} — Stored quiz result
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{user_id}",
    response_model=QuizResultResponse,
    summary="Get a user's stored quiz result",
)
async def get_quiz_result(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> QuizResultResponse:
    """Return the validated answers and derived records for a user."""
    service = _get_profile_service()
    profile = await service.get_profile(str(user_id), db)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No quiz result for user {user_id}.",
        )

    version = await service.get_version(str(user_id), db)
    return QuizResultResponse(
        user_id=user_id,
        version=version or 1,
        answers=profile.answers.model_dump(exclude_none=True),
        personality_traits=profile.personality_traits,
        match_preferences=profile.match_preferences,
        property_preferences=profile.property_preferences,
    )
