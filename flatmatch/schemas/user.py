from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Any, Optional

from flatmatch.schemas.match import CompatibilityMatch
from flatmatch.schemas.profile import MatchPreferences, PersonalityTraits, PropertyPreferences


class UserCreate(BaseModel):
    email: str
    first_name: str = Field(min_length=1)
    last_name: str = ""
    phone: Optional[str] = None
    profile_photo_url: Optional[str] = None


class UserResponse(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: Optional[str]
    age: Optional[int]
    location: Optional[str]
    occupation: Optional[str]
    bio: Optional[str]
    interests: Optional[list[str]] = None
    profile_photo_url: Optional[str]
    is_verified: bool
    quiz_completed: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class QuizSubmitResponse(BaseModel):
    user_id: UUID
    version: int
    personality_traits: PersonalityTraits
    match_preferences: MatchPreferences
    property_preferences: PropertyPreferences


class QuizResultResponse(QuizSubmitResponse):
    answers: dict[str, Any]


class BestMatchesResponse(BaseModel):
    user_id: UUID
    candidates_considered: int
    matches: list[CompatibilityMatch]
