"""
Flatmatch — Match and room preference extraction.

Derives what a user is looking for in a flatmate (age window, areas,
interests, deal-breakers) and in a room (furnishing, bathroom, household
size, internet, parking) from a validated quiz submission.
"""

from __future__ import annotations

import structlog

from flatmatch.schemas.profile import MatchPreferences, PropertyPreferences
from flatmatch.schemas.quiz import QuizAnswers

logger = structlog.get_logger("flatmatch.preference_service")


class PreferenceService:
    """Extract ``MatchPreferences`` and ``PropertyPreferences``."""

    DEFAULT_AGE: int = 25
    AGE_WINDOW: int = 8
    PLATFORM_MIN_AGE: int = 18
    PLATFORM_MAX_AGE: int = 65

    # (answer field, answer value) -> deal-breaker tag
    DEAL_BREAKER_ANSWERS: dict[tuple[str, object], str] = {
        ("smoking", "Prefer smoke-free house"): "no_smoking",
        ("drinking", "Prefer alcohol-free home"): "no_alcohol",
        ("pets", "Allergic/prefer no pets"): "no_pets",
        ("parties", False): "no_parties",
    }

    PROPERTY_DEFAULTS: dict[str, str] = {
        "furnished_room": "Flexible",
        "bathroom": "Flexible",
        "max_flatmates": "Flexible",
        "internet": "Required (basic internet)",
        "parking": "Flexible",
    }

    def extract_match_preferences(self, answers: QuizAnswers) -> MatchPreferences:
        age = answers.age if answers.age is not None else self.DEFAULT_AGE
        # Both ends stay inside the platform bounds, so ages past the upper
        # bound collapse to (65, 65) rather than an inverted window.
        age_range = (
            max(self.PLATFORM_MIN_AGE, min(age - self.AGE_WINDOW, self.PLATFORM_MAX_AGE)),
            min(self.PLATFORM_MAX_AGE, max(age + self.AGE_WINDOW, self.PLATFORM_MIN_AGE)),
        )

        locations = list(answers.location_preference or []) + answers.location_list

        preferences = MatchPreferences(
            age_range=age_range,
            location_preferences=locations,
            lifestyle_compatibility=list(answers.interests or []),
            deal_breakers=self.extract_deal_breakers(answers),
        )
        logger.debug(
            "match_preferences_extracted",
            age_range=age_range,
            locations=len(locations),
            deal_breakers=preferences.deal_breakers,
        )
        return preferences

    def extract_deal_breakers(self, answers: QuizAnswers) -> list[str]:
        """Map house-rule answers onto the fixed deal-breaker vocabulary."""
        return [
            tag
            for (field, value), tag in self.DEAL_BREAKER_ANSWERS.items()
            if getattr(answers, field) == value
        ]

    def extract_property_preferences(self, answers: QuizAnswers) -> PropertyPreferences:
        return PropertyPreferences(
            **{
                field: getattr(answers, field) or default
                for field, default in self.PROPERTY_DEFAULTS.items()
            }
        )
