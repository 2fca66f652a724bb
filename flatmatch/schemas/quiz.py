"""
Flatmatch — Canonical quiz answer record.

``QuizAnswers`` is the only shape in which quiz data travels past the
validation boundary.  Field order follows the order the questions are asked
in, which is also the order in which validation failures are reported.
"""

from __future__ import annotations

import math
from typing import Any, Literal, Optional, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# ── Option sets ───────────────────────────────────────────────────────────────

Occupation = Literal[
    "Student", "Full-time worker", "Part-time worker", "Freelancer", "Job seeker", "Other",
]
AustralianState = Literal[
    "New South Wales (NSW)",
    "Victoria (VIC)",
    "Queensland (QLD)",
    "Western Australia (WA)",
    "South Australia (SA)",
    "Tasmania (TAS)",
    "Australian Capital Territory (ACT)",
    "Northern Territory (NT)",
]
Bedtime = Literal["Before 9pm", "9-10pm", "10-11pm", "11pm-12am", "12-1am", "After 1am"]
GuestFrequency = Literal[
    "Rarely/never", "Once a month", "2-3 times a month", "Weekly", "Multiple times a week",
]
DishHabit = Literal[
    "Immediately after eating",
    "Same day",
    "Within 2-3 days",
    "When I run out of clean ones",
    "What dishes? (takeaway life)",
]
SmokingStance = Literal[
    "I smoke inside",
    "I smoke outside only",
    "I don't smoke but okay with others",
    "Prefer smoke-free house",
]
DrinkingStance = Literal[
    "Love a good drink", "Social drinker", "Rarely drink", "Prefer alcohol-free home",
]
PetStance = Literal[
    "I have pets",
    "Love pets, want to live with them",
    "Like pets but don't want to live with them",
    "Allergic/prefer no pets",
]
FurnishedRoom = Literal["Required", "Preferred", "Flexible", "Don't want furnished"]
Bathroom = Literal["Own bathroom (ensuite)", "Shared bathroom", "Flexible"]
MaxFlatmates = Literal[
    "Just me (studio/1BR)", "1 other flatmate", "2-3 flatmates", "4+ flatmates", "Flexible",
]
Internet = Literal[
    "Required (fast broadband)", "Required (basic internet)", "Nice to have", "Not important",
]
Parking = Literal[
    "Required (off-street)",
    "Required (street parking okay)",
    "Nice to have",
    "Flexible",
    "Don't need parking",
]
GenderPreference = Literal[
    "Any gender", "Same gender only", "Mixed gender preferred", "No strong preference",
]

OCCUPATIONS: tuple[str, ...] = get_args(Occupation)
AUSTRALIAN_STATES: tuple[str, ...] = get_args(AustralianState)

# Enumerated single-choice questions checked by ``_check_choice``.
CHOICE_OPTIONS: dict[str, tuple[str, ...]] = {
    "bedtime": get_args(Bedtime),
    "guests": get_args(GuestFrequency),
    "dishes": get_args(DishHabit),
    "smoking": get_args(SmokingStance),
    "drinking": get_args(DrinkingStance),
    "pets": get_args(PetStance),
    "furnished_room": get_args(FurnishedRoom),
    "bathroom": get_args(Bathroom),
    "max_flatmates": get_args(MaxFlatmates),
    "internet": get_args(Internet),
    "parking": get_args(Parking),
    "gender_preference": get_args(GenderPreference),
}

SLIDER_FIELDS: tuple[str, ...] = (
    "morning_person", "noise_sensitivity", "socialness", "cleanliness", "common_areas", "cooking",
)
LIST_FIELDS: tuple[str, ...] = ("location_preference", "interests", "music_taste")
BOOLEAN_FIELDS: tuple[str, ...] = (
    "parties", "agree_to_terms", "marketing_emails", "agree_to_id_verification",
)

MAX_LIST_ITEMS = 20
MAX_LIST_ITEM_LENGTH = 50
MAX_LOCATION_LENGTH = 100
MAX_BIO_LENGTH = 2000


def coerce_int(value: Any) -> int | None:
    """Read an integer the way a form field would submit it.

    Returns ``None`` when the value cannot be read as a number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError):
            return None
    return None


def _check_range(value: Any, low: int, high: int, message: str) -> int | None:
    if value is None:
        return None
    number = coerce_int(value)
    if number is None or number < low or number > high:
        raise ValueError(message)
    return number


class QuizAnswers(BaseModel):
    """Validated, immutable quiz submission."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # ── Background ─────────────────────────────────────────────────
    age: Optional[int] = None
    occupation: Optional[Occupation] = None
    state: Optional[AustralianState] = None
    preferred_locations: Optional[str] = None
    location_preference: Optional[list[str]] = None
    bio: Optional[str] = None

    # ── Living habits ──────────────────────────────────────────────
    morning_person: Optional[int] = None
    bedtime: Optional[Bedtime] = None
    noise_sensitivity: Optional[int] = None
    socialness: Optional[int] = None
    guests: Optional[GuestFrequency] = None
    parties: Optional[bool] = None
    cleanliness: Optional[int] = None
    dishes: Optional[DishHabit] = None
    common_areas: Optional[int] = None
    cooking: Optional[int] = None

    # ── Interests ──────────────────────────────────────────────────
    interests: Optional[list[str]] = None
    music_taste: Optional[list[str]] = None

    # ── House rules ────────────────────────────────────────────────
    smoking: Optional[SmokingStance] = None
    drinking: Optional[DrinkingStance] = None
    pets: Optional[PetStance] = None

    # ── Room preferences ───────────────────────────────────────────
    furnished_room: Optional[FurnishedRoom] = None
    bathroom: Optional[Bathroom] = None
    max_flatmates: Optional[MaxFlatmates] = None
    internet: Optional[Internet] = None
    parking: Optional[Parking] = None
    gender_preference: Optional[GenderPreference] = None
    budget: Optional[int] = None

    # ── Consents ───────────────────────────────────────────────────
    agree_to_terms: Optional[bool] = Field(
        None, validation_alias=AliasChoices("agree_to_terms", "agreeToTerms")
    )
    marketing_emails: Optional[bool] = Field(
        None, validation_alias=AliasChoices("marketing_emails", "marketingEmails")
    )
    agree_to_id_verification: Optional[bool] = Field(
        None,
        validation_alias=AliasChoices("agree_to_id_verification", "agreeToIdVerification"),
    )

    # ── Validators ─────────────────────────────────────────────────

    @field_validator("age", mode="before")
    @classmethod
    def _check_age(cls, v: Any) -> int | None:
        return _check_range(v, 18, 100, "Age must be between 18 and 100")

    @field_validator("budget", mode="before")
    @classmethod
    def _check_budget(cls, v: Any) -> int | None:
        return _check_range(v, 50, 1000, "Budget must be between $50 and $1000 per week")

    @field_validator(*SLIDER_FIELDS, mode="before")
    @classmethod
    def _check_slider(cls, v: Any, info) -> int | None:
        return _check_range(v, 0, 10, f"{info.field_name} must be between 0 and 10")

    @field_validator("occupation", mode="before")
    @classmethod
    def _check_occupation(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        if v not in OCCUPATIONS:
            raise ValueError("Invalid occupation value")
        return v

    @field_validator("state", mode="before")
    @classmethod
    def _check_state(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        if v not in AUSTRALIAN_STATES:
            raise ValueError("Invalid Australian state or territory")
        return v

    @field_validator(*CHOICE_OPTIONS, mode="before")
    @classmethod
    def _check_choice(cls, v: Any, info) -> str | None:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError(f"Invalid {info.field_name} value")
        v = v.strip()
        if not v:
            return None
        if v not in CHOICE_OPTIONS[info.field_name]:
            raise ValueError(f"Invalid {info.field_name} value")
        return v

    @field_validator("preferred_locations", mode="before")
    @classmethod
    def _check_locations(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        if not isinstance(v, str):
            raise ValueError("Preferred locations must be a string")
        locations = [
            loc.strip() for loc in v.split(",")
            if 0 < len(loc.strip()) <= MAX_LOCATION_LENGTH
        ]
        if not locations:
            raise ValueError("At least one location preference is required")
        return ", ".join(locations)

    @field_validator(*LIST_FIELDS, mode="before")
    @classmethod
    def _check_selection(cls, v: Any, info) -> list[str] | None:
        if v is None:
            return None
        if not isinstance(v, (list, tuple)):
            raise ValueError(f"{info.field_name} must be a list")
        kept = [
            item for item in v
            if isinstance(item, str) and len(item) <= MAX_LIST_ITEM_LENGTH
        ]
        return kept[:MAX_LIST_ITEMS]

    @field_validator(*BOOLEAN_FIELDS, mode="before")
    @classmethod
    def _coerce_flag(cls, v: Any) -> bool | None:
        if v is None:
            return None
        if isinstance(v, str):
            return v.strip().lower() not in ("", "false", "no", "0", "off")
        return bool(v)

    @field_validator("bio", mode="before")
    @classmethod
    def _check_bio(cls, v: Any) -> str | None:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("Bio must be a string")
        return v.strip()[:MAX_BIO_LENGTH]

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def location_list(self) -> list[str]:
        """``preferred_locations`` split back into individual suburbs."""
        if not self.preferred_locations:
            return []
        return [loc.strip() for loc in self.preferred_locations.split(",") if loc.strip()]
