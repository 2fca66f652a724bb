"""
Flatmatch — Matching API

Endpoints for scoring a pair of users and for ranking the stored candidate
pool against a user.  Scores are computed on every request from the stored
quiz results; they are never persisted.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from flatmatch.config import get_settings
from flatmatch.database import get_db
from flatmatch.schemas.match import CompatibilityScore, MatchScoreRequest
from flatmatch.schemas.user import BestMatchesResponse
from flatmatch.services.compatibility_service import CompatibilityService
from flatmatch.services.profile_service import ProfileService

logger = structlog.get_logger("flatmatch.api.matching")

router = APIRouter()

# ── Service singletons ────────────────────────────────────────────────────────

_compatibility_service: CompatibilityService | None = None
_profile_service: ProfileService | None = None


def _get_compatibility_service() -> CompatibilityService:
    global _compatibility_service
    if _compatibility_service is None:
        _compatibility_service = CompatibilityService()
    return _compatibility_service


def _get_profile_service() -> ProfileService:
    global _profile_service
    if _profile_service is None:
        _profile_service = ProfileService()
    return _profile_service


# ──────────────────────────────────────────────────────────────────────────────
# POST /score — Score one pair of users
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/score",
    response_model=CompatibilityScore,
    summary="Score compatibility between two users",
)
async def score_pair(
    payload: MatchScoreRequest,
    db: AsyncSession = Depends(get_db),
) -> CompatibilityScore:
    """Compute the compatibility of user B with user A.

    With ``property_context.is_property_owner`` set, user A is treated as
    the property owner and user B as the prospective tenant.
    """
    log = logger.bind(
        user_a_id=str(payload.user_a_id),
        user_b_id=str(payload.user_b_id),
    )
    log.info("score_pair_start")

    profiles = _get_profile_service()
    missing: list[str] = []
    profile_a = await profiles.get_profile(str(payload.user_a_id), db)
    if profile_a is None:
        missing.append(str(payload.user_a_id))
    profile_b = await profiles.get_profile(str(payload.user_b_id), db)
    if profile_b is None:
        missing.append(str(payload.user_b_id))

    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "message": "Quiz results required for both users.",
                "missing_profiles": missing,
            },
        )

    result = _get_compatibility_service().score(
        profile_a, profile_b, payload.property_context
    )
    log.info("score_pair_complete", overall=result.overall, fallback=result.is_fallback)
    return result


# ──────────────────────────────────────────────────────────────────────────────
# GET /{user_id}/best — Ranked matches from the candidate pool
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{user_id}/best",
    response_model=BestMatchesResponse,
    summary="Best flatmate matches for a user",
)
async def best_matches(
    user_id: uuid.UUID,
    minimum_score: int | None = Query(None, ge=0, le=100),
    max_results: int | None = Query(None, ge=1, le=100),
    as_property_owner: bool = Query(False, description="Rank candidates as tenants"),
    db: AsyncSession = Depends(get_db),
) -> BestMatchesResponse:
    """Rank every stored candidate against the user."""
    log = logger.bind(user_id=str(user_id))
    log.info("best_matches_start", as_property_owner=as_property_owner)

    profiles = _get_profile_service()
    profile = await profiles.get_profile(str(user_id), db)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No quiz result for user {user_id}.",
        )

    candidates = await profiles.list_candidate_profiles(
        db,
        exclude_user_id=str(user_id),
        limit=get_settings().CANDIDATE_POOL_LIMIT,
    )

    matches = _get_compatibility_service().find_best_matches(
        profile,
        candidates,
        is_user_property_owner=as_property_owner,
        minimum_score=minimum_score,
        max_results=max_results,
    )

    return BestMatchesResponse(
        user_id=user_id,
        candidates_considered=len(candidates),
        matches=matches,
    )
