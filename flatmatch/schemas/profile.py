from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from flatmatch.schemas.quiz import Bathroom, FurnishedRoom, Internet, MaxFlatmates, Parking, QuizAnswers

DealBreaker = Literal["no_smoking", "no_alcohol", "no_pets", "no_parties"]


class PersonalityTraits(BaseModel):
    model_config = ConfigDict(frozen=True)

    lifestyle: Literal["social", "quiet", "balanced"]
    social_energy: Literal["extrovert", "introvert", "balanced"]
    cleanliness: Literal["very_clean", "moderate", "relaxed"]
    schedule: Literal["early_bird", "night_owl", "flexible"]
    noise_tolerance: Literal["high", "moderate", "low"]
    guest_policy: Literal["frequent", "occasional", "minimal"]
    communication_style: Literal["direct", "diplomatic", "casual"]
    conflict_resolution: Literal["direct", "mediated", "avoidant"]
    shared_spaces: Literal["high", "moderate", "low"]
    personal_space: Literal["high", "moderate", "low"]
    financial_approach: Literal["shared_equally", "proportional", "separate"]
    long_term_goals: Literal["studying", "career_focused", "exploring", "settling"]


class MatchPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    age_range: tuple[int, int]
    location_preferences: list[str] = []
    lifestyle_compatibility: list[str] = []
    deal_breakers: list[DealBreaker] = []

    @field_validator("age_range")
    @classmethod
    def validate_age_range(cls, v: tuple[int, int]) -> tuple[int, int]:
        if v[0] > v[1]:
            raise ValueError(f"Age range minimum {v[0]} exceeds maximum {v[1]}")
        return v


class PropertyPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    furnished_room: FurnishedRoom = "Flexible"
    bathroom: Bathroom = "Flexible"
    max_flatmates: MaxFlatmates = "Flexible"
    internet: Internet = "Required (basic internet)"
    parking: Parking = "Flexible"


class UserProfile(BaseModel):
    """A user's answers together with everything derived from them."""

    user_id: str
    display_name: str = "Unknown"
    profile_photo_url: Optional[str] = None
    answers: QuizAnswers
    personality_traits: PersonalityTraits
    match_preferences: MatchPreferences
    property_preferences: PropertyPreferences
