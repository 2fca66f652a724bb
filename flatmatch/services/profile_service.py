"""
Flatmatch — Quiz submission pipeline and profile persistence.

Runs a raw quiz submission through the three derivation steps:
  1. Validate answers into a canonical ``QuizAnswers`` record
  2. Classify the 12 personality traits
  3. Extract match and room preferences

Persistence writes one ``quiz_results`` row per user (``version`` is bumped
on every resubmission) and mirrors summary fields onto the ``users`` row.
Stored records are re-validated on read so that scoring only ever sees
typed data.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import pydantic
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flatmatch.models.quiz_result import QuizResult
from flatmatch.models.user import User
from flatmatch.schemas.profile import (
    MatchPreferences,
    PersonalityTraits,
    PropertyPreferences,
    UserProfile,
)
from flatmatch.services.preference_service import PreferenceService
from flatmatch.services.trait_service import TraitService
from flatmatch.services.validation_service import QuizValidationError, validate_quiz_answers

logger = structlog.get_logger("flatmatch.profile_service")


class ProfileService:
    """Build ``UserProfile`` records and move them in and out of storage.

    Dependencies are injected at construction so that the service can be
    tested with stubs and shared through FastAPI's dependency graph.
    """

    def __init__(
        self,
        trait_service: TraitService | None = None,
        preference_service: PreferenceService | None = None,
    ) -> None:
        self.trait_service = trait_service or TraitService()
        self.preference_service = preference_service or PreferenceService()

    # ══════════════════════════════════════════════════════════════════════
    # Derivation
    # ══════════════════════════════════════════════════════════════════════

    def build_profile(
        self,
        user_id: str,
        raw_answers: Mapping[str, Any],
        display_name: str = "Unknown",
        profile_photo_url: str | None = None,
    ) -> UserProfile:
        """Validate a submission and derive everything scoring needs.

        Raises
        ------
        QuizValidationError
            If any recognised answer is invalid.
        """
        log = logger.bind(user_id=user_id)

        answers = validate_quiz_answers(raw_answers)
        traits = self.trait_service.analyze(answers)
        match_preferences = self.preference_service.extract_match_preferences(answers)
        property_preferences = self.preference_service.extract_property_preferences(answers)

        log.info(
            "profile_built",
            lifestyle=traits.lifestyle,
            cleanliness=traits.cleanliness,
            schedule=traits.schedule,
            deal_breakers=match_preferences.deal_breakers,
        )

        return UserProfile(
            user_id=user_id,
            display_name=display_name,
            profile_photo_url=profile_photo_url,
            answers=answers,
            personality_traits=traits,
            match_preferences=match_preferences,
            property_preferences=property_preferences,
        )

    # ══════════════════════════════════════════════════════════════════════
    # Persistence
    # ══════════════════════════════════════════════════════════════════════

    async def save_quiz_result(self, profile: UserProfile, db_session: AsyncSession) -> int:
        """Upsert the user's quiz result and return the stored version."""
        user_id = uuid.UUID(profile.user_id)
        log = logger.bind(user_id=profile.user_id)

        payload = {
            "answers": profile.answers.model_dump(exclude_none=True),
            "personality_traits": profile.personality_traits.model_dump(),
            "match_preferences": profile.match_preferences.model_dump(mode="json"),
            "property_preferences": profile.property_preferences.model_dump(),
        }

        result = await db_session.execute(
            select(QuizResult).where(QuizResult.user_id == user_id)
        )
        existing = result.scalar_one_or_none()

        if existing is None:
            version = 1
            db_session.add(QuizResult(user_id=user_id, version=version, **payload))
        else:
            version = existing.version + 1
            existing.version = version
            for key, value in payload.items():
                setattr(existing, key, value)

        user_result = await db_session.execute(select(User).where(User.id == user_id))
        user = user_result.scalar_one_or_none()
        if user is not None:
            answers = profile.answers
            user.age = answers.age
            user.location = answers.preferred_locations
            user.occupation = answers.occupation
            user.bio = answers.bio
            user.interests = list(answers.interests or [])
            user.quiz_completed = True
            user.quiz_completed_at = datetime.now(timezone.utc)
        else:
            log.warning("quiz_result_user_missing")

        await db_session.flush()
        log.info("quiz_result_saved", version=version)
        return version

    async def get_profile(self, user_id: str, db_session: AsyncSession) -> UserProfile | None:
        result = await db_session.execute(
            select(QuizResult).where(QuizResult.user_id == uuid.UUID(str(user_id)))
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return self._row_to_profile(row)

    async def get_version(self, user_id: str, db_session: AsyncSession) -> int | None:
        result = await db_session.execute(
            select(QuizResult.version).where(QuizResult.user_id == uuid.UUID(str(user_id)))
        )
        return result.scalar_one_or_none()

    async def list_candidate_profiles(
        self,
        db_session: AsyncSession,
        exclude_user_id: str | None = None,
        limit: int = 500,
    ) -> list[UserProfile]:
        """Load stored profiles of active users, newest first."""
        stmt = (
            select(QuizResult)
            .join(User, User.id == QuizResult.user_id)
            .where(User.is_active.is_(True))
            .order_by(QuizResult.created_at.desc())
            .limit(limit)
        )
        if exclude_user_id is not None:
            stmt = stmt.where(QuizResult.user_id != uuid.UUID(str(exclude_user_id)))

        result = await db_session.execute(stmt)
        profiles = [self._row_to_profile(row) for row in result.scalars().all()]
        return [p for p in profiles if p is not None]

    # ══════════════════════════════════════════════════════════════════════
    # Helpers
    # ══════════════════════════════════════════════════════════════════════

    def _row_to_profile(self, row: QuizResult) -> UserProfile | None:
        """Rebuild a profile from a stored row.

        Answers must still validate; derived records that no longer match
        the current schema are recomputed from the answers.
        """
        log = logger.bind(user_id=str(row.user_id))
        try:
            answers = validate_quiz_answers(row.answers or {})
        except QuizValidationError as exc:
            log.warning("stored_answers_invalid", field=exc.field, reason=exc.message)
            return None

        try:
            traits = PersonalityTraits.model_validate(row.personality_traits)
            match_preferences = MatchPreferences.model_validate(row.match_preferences)
            property_preferences = PropertyPreferences.model_validate(row.property_preferences)
        except pydantic.ValidationError:
            log.info("stored_profile_rederived")
            traits = self.trait_service.analyze(answers)
            match_preferences = self.preference_service.extract_match_preferences(answers)
            property_preferences = self.preference_service.extract_property_preferences(answers)

        user = row.user
        return UserProfile(
            user_id=str(row.user_id),
            display_name=user.display_name if user is not None else "Unknown",
            profile_photo_url=user.profile_photo_url if user is not None else None,
            answers=answers,
            personality_traits=traits,
            match_preferences=match_preferences,
            property_preferences=property_preferences,
        )
