from pydantic import BaseModel, Field
from uuid import UUID
from typing import Optional

from flatmatch.schemas.profile import PropertyPreferences


class ScoreBreakdown(BaseModel):
    personality: int = Field(ge=0, le=100)
    lifestyle: int = Field(ge=0, le=100)
    preferences: int = Field(ge=0, le=100)
    deal_breakers: int = Field(ge=0, le=100)


class CompatibilityScore(BaseModel):
    overall: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown
    property_fit: Optional[int] = Field(None, ge=0, le=100)
    match_reasons: list[str] = []
    concerns: list[str] = []
    is_fallback: bool = False


class PropertyContext(BaseModel):
    is_property_owner: bool = False
    property_requirements: Optional[PropertyPreferences] = None
    house_rules: list[str] = []


class CompatibilityMatch(BaseModel):
    user_id: str
    display_name: str
    age: int
    location: str
    occupation: str
    bio: str
    profile_photo_url: Optional[str] = None
    compatibility_score: int
    breakdown: ScoreBreakdown
    shared_interests: list[str] = []
    match_reasons: list[str] = []
    concerns: list[str] = []


class MatchScoreRequest(BaseModel):
    user_a_id: UUID
    user_b_id: UUID
    property_context: Optional[PropertyContext] = None
