"""
Flatmatch — Pairwise compatibility scoring and match ranking.

Combines four sub-scores (each 0-100) into an overall score:

  peer match:      overall = 0.4·personality + 0.3·lifestyle + 0.2·preferences + 0.1·deal_breakers
  property owner:  overall = 0.35·personality + 0.25·lifestyle + 0.25·tenant + 0.15·deal_breakers

where *tenant* is a reliability heuristic for the prospective tenant (user B)
that starts from 75.  Weights come from configuration.

Scoring always returns a usable record.  The internal computation reports
success or failure through :class:`ScoreResult`; a failure (for example a
trait vector that does not validate) is turned into a reduced heuristic
score built from age proximity, state and occupation.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pydantic
import structlog

from flatmatch.config import OWNER_WEIGHT_KEYS, PEER_WEIGHT_KEYS, check_weights, get_settings
from flatmatch.schemas.match import (
    CompatibilityMatch,
    CompatibilityScore,
    PropertyContext,
    ScoreBreakdown,
)
from flatmatch.schemas.profile import (
    MatchPreferences,
    PersonalityTraits,
    PropertyPreferences,
    UserProfile,
)
from flatmatch.schemas.quiz import QuizAnswers, coerce_int
from flatmatch.services.validation_service import QuizValidationError, validate_quiz_answers

logger = structlog.get_logger("flatmatch.compatibility_service")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, value)))


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of the primary scoring computation."""

    score: CompatibilityScore | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.score is not None

    @classmethod
    def success(cls, score: CompatibilityScore) -> "ScoreResult":
        return cls(score=score)

    @classmethod
    def failure(cls, reason: str) -> "ScoreResult":
        return cls(error=reason)


@dataclass(frozen=True)
class _ScoringInputs:
    """One side of a comparison after every record has been re-validated."""

    answers: QuizAnswers
    traits: PersonalityTraits
    match_preferences: MatchPreferences
    property_preferences: PropertyPreferences | None


class CompatibilityService:
    """Rule-based flatmate compatibility engine.

    All matrices, weights and point tables are class-level constants so that
    each cell can be reviewed and changed on its own.
    """

    # ── Personality ─────────────────────────────────────────────────

    # Sum to 100.
    TRAIT_WEIGHTS: dict[str, int] = {
        "cleanliness": 25,
        "noise_tolerance": 20,
        "schedule": 15,
        "social_energy": 15,
        "guest_policy": 10,
        "shared_spaces": 5,
        "lifestyle": 5,
        "personal_space": 3,
        "communication_style": 2,
    }

    # (category_a, category_b) -> score for differing categories.
    # Identical categories always score 100; pairs absent from a table
    # score DEFAULT_TRAIT_SCORE.
    COMPATIBILITY_MATRIX: dict[str, dict[tuple[str, str], int]] = {
        "cleanliness": {
            ("very_clean", "moderate"): 70,
            ("very_clean", "relaxed"): 20,
            ("moderate", "very_clean"): 70,
            ("moderate", "relaxed"): 80,
            ("relaxed", "very_clean"): 20,
            ("relaxed", "moderate"): 80,
        },
        "noise_tolerance": {
            ("high", "moderate"): 80,
            ("high", "low"): 30,
            ("moderate", "high"): 80,
            ("moderate", "low"): 80,
            ("low", "high"): 30,
            ("low", "moderate"): 80,
        },
        "schedule": {
            ("early_bird", "flexible"): 75,
            ("early_bird", "night_owl"): 25,
            ("flexible", "early_bird"): 75,
            ("flexible", "night_owl"): 75,
            ("night_owl", "early_bird"): 25,
            ("night_owl", "flexible"): 75,
        },
        "social_energy": {
            ("extrovert", "balanced"): 75,
            ("extrovert", "introvert"): 40,
            ("balanced", "extrovert"): 75,
            ("balanced", "introvert"): 75,
            ("introvert", "extrovert"): 40,
            ("introvert", "balanced"): 75,
        },
        "guest_policy": {
            ("frequent", "occasional"): 70,
            ("frequent", "minimal"): 30,
            ("occasional", "frequent"): 70,
            ("occasional", "minimal"): 80,
            ("minimal", "frequent"): 30,
            ("minimal", "occasional"): 80,
        },
        "lifestyle": {
            ("social", "balanced"): 80,
            ("social", "quiet"): 40,
            ("balanced", "social"): 80,
            ("balanced", "quiet"): 80,
            ("quiet", "social"): 40,
            ("quiet", "balanced"): 80,
        },
    }
    DEFAULT_TRAIT_SCORE: int = 60

    CLEANLINESS_ORDER: tuple[str, ...] = ("relaxed", "moderate", "very_clean")

    # ── Lifestyle ───────────────────────────────────────────────────

    SLIDER_MIDPOINT: int = 5
    COOKING_PENALTY_PER_STEP: int = 10
    COMMON_AREAS_PENALTY_PER_STEP: int = 12
    NO_INTERESTS_SCORE: int = 50

    # ── Preferences & deal-breakers ─────────────────────────────────

    NO_LOCATIONS_SCORE: int = 50
    DEAL_BREAKER_PENALTY: int = 25

    # ── Room preferences: (same, either flexible, otherwise) ────────

    PROPERTY_FIELD_SCORES: dict[str, tuple[int, int, int]] = {
        "furnished_room": (100, 80, 40),
        "bathroom": (100, 85, 50),
        "max_flatmates": (100, 80, 60),
        "parking": (100, 85, 70),
    }
    MISSING_PROPERTY_PREFERENCES_SCORE: int = 70

    # ── Tenant reliability (property-owner mode) ────────────────────

    TENANT_BASE_SCORE: int = 75
    TENANT_CLEANLINESS_POINTS: dict[str, int] = {
        "very_clean": 15,
        "moderate": 5,
        "relaxed": -10,
    }
    TENANT_DISH_POINTS: dict[str, int] = {
        "Immediately after eating": 10,
        "Same day": 5,
        "Within 2-3 days": -5,
        "When I run out of clean ones": -15,
    }
    TENANT_GUEST_POINTS: dict[str, int] = {
        "minimal": 10,
        "frequent": -8,
    }
    TENANT_QUIET_BONUS: int = 8
    TENANT_OCCUPATION_POINTS: dict[str, int] = {
        "Full-time worker": 12,
        "Student": 5,
        "Part-time worker": 3,
        "Job seeker": -5,
    }
    TENANT_COMMUNICATION_POINTS: dict[str, int] = {
        "direct": 5,
        "diplomatic": 8,
    }
    DEFAULT_AGE: int = 25

    # ── Fallback ────────────────────────────────────────────────────

    FALLBACK_BASE_SCORE: int = 60

    def __init__(
        self,
        peer_weights: dict[str, float] | None = None,
        owner_weights: dict[str, float] | None = None,
    ) -> None:
        settings = get_settings()
        self.peer_weights: dict[str, float] = check_weights(
            dict(peer_weights or settings.PEER_WEIGHTS), PEER_WEIGHT_KEYS
        )
        self.owner_weights: dict[str, float] = check_weights(
            dict(owner_weights or settings.OWNER_WEIGHTS), OWNER_WEIGHT_KEYS
        )
        self.minimum_score: int = settings.MIN_MATCH_SCORE
        self.max_results: int = settings.MAX_MATCH_RESULTS

        logger.info(
            "compatibility_service_initialised",
            peer_weights=self.peer_weights,
            owner_weights=self.owner_weights,
            minimum_score=self.minimum_score,
            max_results=self.max_results,
        )

    # ── Public API ──────────────────────────────────────────────────

    def score(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        property_context: PropertyContext | None = None,
    ) -> CompatibilityScore:
        """Score user B against user A.

        When ``property_context.is_property_owner`` is set, user A is the
        owner and user B the prospective tenant.  Never raises.
        """
        result = self.compute(user_a, user_b, property_context)
        if result.ok:
            return result.score

        logger.warning(
            "compatibility_fallback",
            user_a=getattr(user_a, "user_id", None),
            user_b=getattr(user_b, "user_id", None),
            reason=result.error,
        )
        return self.fallback_score(user_a, user_b)

    def compute(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        property_context: PropertyContext | None = None,
    ) -> ScoreResult:
        """Run the primary computation and report its outcome."""
        side_a = self._read_inputs(user_a, "user_a")
        if isinstance(side_a, ScoreResult):
            return side_a
        side_b = self._read_inputs(user_b, "user_b")
        if isinstance(side_b, ScoreResult):
            return side_b

        try:
            return ScoreResult.success(self._score_inputs(side_a, side_b, property_context))
        except (ArithmeticError, KeyError, TypeError, ValueError) as exc:
            return ScoreResult.failure(f"{type(exc).__name__}: {exc}")

    def find_best_matches(
        self,
        user: UserProfile,
        candidates: list[UserProfile],
        *,
        is_user_property_owner: bool = False,
        minimum_score: int | None = None,
        max_results: int | None = None,
    ) -> list[CompatibilityMatch]:
        """Rank every candidate against ``user``.

        Candidates scoring below ``minimum_score`` are dropped, the rest are
        sorted best first (ties keep candidate order) and truncated to
        ``max_results``.
        """
        minimum = self.minimum_score if minimum_score is None else minimum_score
        limit = self.max_results if max_results is None else max_results
        own_id = getattr(user, "user_id", None)

        context = None
        if is_user_property_owner:
            requirements = _as_mapping(getattr(user, "property_preferences", None))
            try:
                context = PropertyContext(is_property_owner=True, property_requirements=requirements)
            except pydantic.ValidationError:
                logger.warning("owner_requirements_invalid", user_id=own_id)
                context = PropertyContext(is_property_owner=True)

        log = logger.bind(user_id=own_id, candidates=len(candidates))
        log.info("find_best_matches_start", minimum_score=minimum, max_results=limit)

        user_answers = self._presentable_answers(user)
        matches: list[CompatibilityMatch] = []
        skipped = 0
        for candidate in candidates:
            if own_id is not None and getattr(candidate, "user_id", None) == own_id:
                continue
            compatibility = self.score(user, candidate, context)
            if compatibility.overall < minimum:
                continue
            match = self._to_match(user_answers, candidate, compatibility)
            if match is None:
                skipped += 1
                continue
            matches.append(match)

        matches.sort(key=lambda m: m.compatibility_score, reverse=True)
        matches = matches[:limit]

        log.info(
            "find_best_matches_complete",
            returned=len(matches),
            skipped=skipped,
            top_score=matches[0].compatibility_score if matches else None,
        )
        return matches

    # ── Primary computation ─────────────────────────────────────────

    def _read_inputs(self, user: Any, label: str) -> _ScoringInputs | ScoreResult:
        """Re-validate one side's records, reporting the first problem."""
        if user is None:
            return ScoreResult.failure(f"{label} missing")

        answers = getattr(user, "answers", None)
        try:
            answers = validate_quiz_answers(answers if answers is not None else {})
        except QuizValidationError as exc:
            return ScoreResult.failure(f"{label}.answers invalid: {exc.field}: {exc.message}")

        records: dict[str, Any] = {}
        for name, model in (
            ("personality_traits", PersonalityTraits),
            ("match_preferences", MatchPreferences),
            ("property_preferences", PropertyPreferences),
        ):
            value = _as_mapping(getattr(user, name, None))
            if value is None:
                if name == "property_preferences":
                    records[name] = None
                    continue
                return ScoreResult.failure(f"{label}.{name} missing")
            try:
                records[name] = model.model_validate(value)
            except pydantic.ValidationError as exc:
                return ScoreResult.failure(
                    f"{label}.{name} invalid: {exc.error_count()} error(s)"
                )

        return _ScoringInputs(
            answers=answers,
            traits=records["personality_traits"],
            match_preferences=records["match_preferences"],
            property_preferences=records["property_preferences"],
        )

    def _score_inputs(
        self,
        a: _ScoringInputs,
        b: _ScoringInputs,
        property_context: PropertyContext | None,
    ) -> CompatibilityScore:
        personality = self.personality_score(a.traits, b.traits)
        lifestyle = self.lifestyle_score(a.answers, b.answers)
        preferences = self.preferences_score(a.match_preferences, b.match_preferences)
        deal_breakers = self.deal_breaker_score(a.match_preferences, b.match_preferences)

        is_owner = property_context is not None and property_context.is_property_owner
        if is_owner:
            property_fit = self.tenant_reliability_score(b.answers, b.traits)
            w = self.owner_weights
            overall = round_half_up(
                personality * w["personality"]
                + lifestyle * w["lifestyle"]
                + property_fit * w["property"]
                + deal_breakers * w["deal_breakers"]
            )
        else:
            property_fit = self.property_preferences_score(
                a.property_preferences, b.property_preferences
            )
            w = self.peer_weights
            overall = round_half_up(
                personality * w["personality"]
                + lifestyle * w["lifestyle"]
                + preferences * w["preferences"]
                + deal_breakers * w["deal_breakers"]
            )

        reasons, concerns = self.generate_insights(a, b, is_owner)

        return CompatibilityScore(
            overall=_clamp(overall),
            breakdown=ScoreBreakdown(
                personality=personality,
                lifestyle=lifestyle,
                preferences=preferences,
                deal_breakers=deal_breakers,
            ),
            property_fit=property_fit,
            match_reasons=reasons,
            concerns=concerns,
        )

    # ── Sub-scores ──────────────────────────────────────────────────

    def trait_compatibility(self, trait: str, value_a: str, value_b: str) -> int:
        if value_a == value_b:
            return 100
        return self.COMPATIBILITY_MATRIX.get(trait, {}).get(
            (value_a, value_b), self.DEFAULT_TRAIT_SCORE
        )

    def personality_score(self, traits_a: PersonalityTraits, traits_b: PersonalityTraits) -> int:
        total = sum(
            self.trait_compatibility(trait, getattr(traits_a, trait), getattr(traits_b, trait))
            * weight
            for trait, weight in self.TRAIT_WEIGHTS.items()
        )
        return round_half_up(total / sum(self.TRAIT_WEIGHTS.values()))

    def lifestyle_score(self, answers_a: QuizAnswers, answers_b: QuizAnswers) -> int:
        def slider(answers: QuizAnswers, name: str) -> int:
            value = getattr(answers, name)
            return self.SLIDER_MIDPOINT if value is None else value

        cooking_diff = abs(slider(answers_a, "cooking") - slider(answers_b, "cooking"))
        cooking = max(0, 100 - cooking_diff * self.COOKING_PENALTY_PER_STEP)

        areas_diff = abs(slider(answers_a, "common_areas") - slider(answers_b, "common_areas"))
        common_areas = max(0, 100 - areas_diff * self.COMMON_AREAS_PENALTY_PER_STEP)

        interests_a = set(answers_a.interests or [])
        interests_b = set(answers_b.interests or [])
        union = interests_a | interests_b
        if union:
            interests = len(interests_a & interests_b) / len(union) * 100
        else:
            interests = self.NO_INTERESTS_SCORE

        return round_half_up((cooking + common_areas + interests) / 3)

    def preferences_score(self, prefs_a: MatchPreferences, prefs_b: MatchPreferences) -> int:
        min_a, max_a = prefs_a.age_range
        min_b, max_b = prefs_b.age_range
        overlap = max(0, min(max_a, max_b) - max(min_a, min_b))
        span = max(max_a, max_b) - min(min_a, min_b)
        age = overlap / span * 100 if span > 0 else 0

        locations_a = prefs_a.location_preferences
        locations_b = prefs_b.location_preferences
        longest = max(len(locations_a), len(locations_b))
        if longest > 0:
            shared = sum(1 for loc in locations_a if _location_overlaps(loc, locations_b))
            location = shared / longest * 100
        else:
            location = self.NO_LOCATIONS_SCORE

        return round_half_up((age + location) / 2)

    def deal_breaker_score(self, prefs_a: MatchPreferences, prefs_b: MatchPreferences) -> int:
        # Shared deal-breakers count as conflicts.
        conflicts = self.conflicting_deal_breakers(prefs_a, prefs_b)
        return max(0, 100 - len(conflicts) * self.DEAL_BREAKER_PENALTY)

    @staticmethod
    def conflicting_deal_breakers(prefs_a: MatchPreferences, prefs_b: MatchPreferences) -> list[str]:
        return [db for db in prefs_a.deal_breakers if db in prefs_b.deal_breakers]

    def property_preferences_score(
        self,
        prefs_a: PropertyPreferences | None,
        prefs_b: PropertyPreferences | None,
    ) -> int:
        """Average per-field agreement between two room preference records."""
        if prefs_a is None or prefs_b is None:
            return self.MISSING_PROPERTY_PREFERENCES_SCORE

        scores: list[int] = []
        for field, (same, flexible, other) in self.PROPERTY_FIELD_SCORES.items():
            value_a = getattr(prefs_a, field)
            value_b = getattr(prefs_b, field)
            if value_a == value_b:
                scores.append(same)
            elif "Flexible" in (value_a, value_b):
                scores.append(flexible)
            elif field == "parking" and "Don't need parking" in (value_a, value_b):
                scores.append(90)
            else:
                scores.append(other)

        internet_a, internet_b = prefs_a.internet, prefs_b.internet
        if internet_a == internet_b:
            scores.append(100)
        elif internet_a.startswith("Required") and internet_b.startswith("Required"):
            scores.append(90)
        elif "Not important" in (internet_a, internet_b):
            scores.append(70)
        else:
            scores.append(80)

        return round_half_up(sum(scores) / len(scores))

    def tenant_reliability_score(self, answers: QuizAnswers, traits: PersonalityTraits) -> int:
        """How comfortable a property owner can be with this tenant (0-100)."""
        score = self.TENANT_BASE_SCORE
        score += self.TENANT_CLEANLINESS_POINTS.get(traits.cleanliness, 0)
        score += self.TENANT_DISH_POINTS.get(answers.dishes, 0)
        if traits.noise_tolerance == "low":
            score += self.TENANT_QUIET_BONUS
        score += self.TENANT_GUEST_POINTS.get(traits.guest_policy, 0)
        score += self.TENANT_OCCUPATION_POINTS.get(answers.occupation, 0)

        age = answers.age if answers.age is not None else self.DEFAULT_AGE
        if 25 <= age <= 35:
            score += 8
        elif 22 <= age <= 40:
            score += 4

        score += self.TENANT_COMMUNICATION_POINTS.get(traits.communication_style, 0)
        return _clamp(score)

    # ── Insights ────────────────────────────────────────────────────

    def generate_insights(
        self,
        a: _ScoringInputs,
        b: _ScoringInputs,
        is_property_owner: bool = False,
    ) -> tuple[list[str], list[str]]:
        """Explain a score as ordered match reasons and concerns."""
        reasons: list[str] = []
        concerns: list[str] = []
        ta, tb = a.traits, b.traits

        if ta.cleanliness == tb.cleanliness:
            reasons.append(f"Both prefer {ta.cleanliness} cleanliness standards")
        elif abs(
            self.CLEANLINESS_ORDER.index(ta.cleanliness)
            - self.CLEANLINESS_ORDER.index(tb.cleanliness)
        ) >= 2:
            concerns.append("Different cleanliness expectations may cause friction")

        if ta.schedule == tb.schedule:
            reasons.append(f"Both are {_label(ta.schedule)} types")
        elif {ta.schedule, tb.schedule} == {"early_bird", "night_owl"}:
            concerns.append("Opposite sleep schedules might be challenging")

        if ta.social_energy == tb.social_energy:
            reasons.append(f"Similar social energy levels ({ta.social_energy})")

        if ta.noise_tolerance == tb.noise_tolerance:
            reasons.append("Compatible noise tolerance levels")

        shared = shared_interests(a.answers, b.answers)
        if len(shared) >= 3:
            reasons.append(f"Share {len(shared)} common interests")
        elif not shared:
            concerns.append("Few shared interests - might have different lifestyles")

        locations_b = b.match_preferences.location_preferences
        if any(_location_overlaps(loc, locations_b) for loc in a.match_preferences.location_preferences):
            reasons.append("Looking in similar areas")

        conflicts = self.conflicting_deal_breakers(a.match_preferences, b.match_preferences)
        if conflicts:
            concerns.append(f"Conflicting deal breakers: {', '.join(conflicts)}")

        if is_property_owner:
            tenant, tenant_traits = b.answers, b.traits
            if tenant_traits.cleanliness == "very_clean":
                reasons.append("Excellent cleanliness standards - ideal tenant")
            if tenant.occupation == "Full-time worker":
                reasons.append("Stable employment - reliable for rent payments")
            if tenant_traits.noise_tolerance == "low" and tenant_traits.guest_policy == "minimal":
                reasons.append("Quiet, respectful lifestyle - great for property reputation")

            if tenant_traits.guest_policy == "frequent":
                concerns.append("Frequent guests might impact property wear")
            if tenant.age is not None and tenant.age < 22:
                concerns.append("Younger tenant - consider experience with independent living")
            if tenant_traits.cleanliness == "relaxed":
                concerns.append("Relaxed cleanliness standards - may need clear expectations")

        return reasons, concerns

    # ── Fallback ────────────────────────────────────────────────────

    def fallback_score(self, user_a: Any, user_b: Any) -> CompatibilityScore:
        """Reduced heuristic used when the primary computation fails."""
        answers_a = _as_mapping(getattr(user_a, "answers", None))
        answers_b = _as_mapping(getattr(user_b, "answers", None))
        if answers_a is None or answers_b is None:
            return self._minimal_score()

        score = self.FALLBACK_BASE_SCORE

        age_a = coerce_int(answers_a.get("age"))
        age_b = coerce_int(answers_b.get("age"))
        age_diff = abs(
            (self.DEFAULT_AGE if age_a is None else age_a)
            - (self.DEFAULT_AGE if age_b is None else age_b)
        )
        if age_diff <= 5:
            score += 10
        elif age_diff <= 10:
            score += 5

        state_a = answers_a.get("state")
        if state_a and state_a == answers_b.get("state"):
            score += 10

        occupation_a = answers_a.get("occupation")
        if occupation_a and occupation_a == answers_b.get("occupation"):
            score += 5

        score = _clamp(score)
        return CompatibilityScore(
            overall=score,
            breakdown=ScoreBreakdown(
                personality=score,
                lifestyle=score,
                preferences=score,
                deal_breakers=100,
            ),
            match_reasons=["Basic compatibility assessment"],
            concerns=["Limited matching data available"],
            is_fallback=True,
        )

    @staticmethod
    def _minimal_score() -> CompatibilityScore:
        return CompatibilityScore(
            overall=50,
            breakdown=ScoreBreakdown(
                personality=50, lifestyle=50, preferences=50, deal_breakers=100
            ),
            match_reasons=["Potential match"],
            concerns=["Matching algorithm temporarily limited"],
            is_fallback=True,
        )

    # ── Presentation ────────────────────────────────────────────────

    def _presentable_answers(self, profile: Any) -> QuizAnswers:
        """Re-validated answers for display, empty when they no longer validate."""
        try:
            return validate_quiz_answers(_as_mapping(getattr(profile, "answers", None)) or {})
        except QuizValidationError as exc:
            logger.warning(
                "match_answers_invalid",
                user_id=getattr(profile, "user_id", None),
                field=exc.field,
                error=exc.message,
            )
            return QuizAnswers()

    def _to_match(
        self,
        user_answers: QuizAnswers,
        candidate: Any,
        compatibility: CompatibilityScore,
    ) -> CompatibilityMatch | None:
        answers = self._presentable_answers(candidate)
        try:
            return CompatibilityMatch(
                user_id=getattr(candidate, "user_id", None),
                display_name=getattr(candidate, "display_name", None) or "Unknown",
                age=answers.age if answers.age is not None else self.DEFAULT_AGE,
                location=answers.preferred_locations or "Location not specified",
                occupation=answers.occupation or "Occupation not specified",
                bio=answers.bio or "No bio available",
                profile_photo_url=getattr(candidate, "profile_photo_url", None),
                compatibility_score=compatibility.overall,
                breakdown=compatibility.breakdown,
                shared_interests=shared_interests(user_answers, answers),
                match_reasons=compatibility.match_reasons,
                concerns=compatibility.concerns,
            )
        except pydantic.ValidationError as exc:
            logger.warning(
                "match_candidate_skipped",
                user_id=getattr(candidate, "user_id", None),
                error=str(exc),
            )
            return None


# ── Module helpers ────────────────────────────────────────────────────────────


def shared_interests(answers_a: QuizAnswers, answers_b: QuizAnswers) -> list[str]:
    """Interests both users selected, in A's order, without repeats."""
    interests_b = set(answers_b.interests or [])
    seen: set[str] = set()
    shared: list[str] = []
    for interest in answers_a.interests or []:
        if interest in interests_b and interest not in seen:
            seen.add(interest)
            shared.append(interest)
    return shared


def _location_overlaps(location: str, others: list[str]) -> bool:
    """Case-insensitive containment either way, e.g. "Newtown" ~ "newtown nsw"."""
    needle = location.lower()
    return any(needle in other.lower() or other.lower() in needle for other in others)


def _label(category: str) -> str:
    return category.replace("_", " ")


def _as_mapping(value: Any) -> dict | None:
    if isinstance(value, pydantic.BaseModel):
        return value.model_dump()
    if isinstance(value, Mapping):
        return dict(value)
    return None
