"""Shared pytest fixtures for Flatmatch tests."""
import pytest
import uuid

from flatmatch.services.profile_service import ProfileService


@pytest.fixture
def sample_user_id():
    return str(uuid.uuid4())


@pytest.fixture
def sample_user_id_b():
    return str(uuid.uuid4())


@pytest.fixture
def raw_answers_a():
    """Tidy early-rising student looking around Newtown."""
    return {
        "age": 24,
        "occupation": "Student",
        "state": "New South Wales (NSW)",
        "preferred_locations": "Newtown, Glebe",
        "location_preference": ["Inner West"],
        "bio": "Design student who likes a calm house.",
        "morning_person": 8,
        "bedtime": "10-11pm",
        "noise_sensitivity": 6,
        "socialness": 6,
        "guests": "Once a month",
        "parties": False,
        "cleanliness": 8,
        "dishes": "Same day",
        "common_areas": 7,
        "cooking": 7,
        "interests": ["Cooking", "Reading", "Gaming", "Music/concerts"],
        "music_taste": ["Indie"],
        "smoking": "Prefer smoke-free house",
        "drinking": "Social drinker",
        "pets": "Love pets, want to live with them",
        "furnished_room": "Preferred",
        "bathroom": "Flexible",
        "max_flatmates": "2-3 flatmates",
        "internet": "Required (fast broadband)",
        "parking": "Don't need parking",
        "gender_preference": "No strong preference",
        "budget": 320,
        "agree_to_terms": True,
    }


@pytest.fixture
def raw_answers_b():
    """Social full-time worker, also looking around Newtown."""
    return {
        "age": 29,
        "occupation": "Full-time worker",
        "state": "New South Wales (NSW)",
        "preferred_locations": "Newtown, Marrickville",
        "location_preference": ["Inner West"],
        "bio": "Engineer, weekend cook.",
        "morning_person": 6,
        "bedtime": "11pm-12am",
        "noise_sensitivity": 5,
        "socialness": 7,
        "guests": "2-3 times a month",
        "parties": True,
        "cleanliness": 7,
        "dishes": "Same day",
        "common_areas": 7,
        "cooking": 8,
        "interests": ["Cooking", "Gaming", "Hiking", "Music/concerts"],
        "music_taste": ["Rock"],
        "smoking": "Prefer smoke-free house",
        "drinking": "Social drinker",
        "pets": "Like pets but don't want to live with them",
        "furnished_room": "Flexible",
        "bathroom": "Shared bathroom",
        "max_flatmates": "2-3 flatmates",
        "internet": "Required (fast broadband)",
        "parking": "Nice to have",
        "gender_preference": "Any gender",
        "budget": 380,
        "agree_to_terms": True,
    }


@pytest.fixture
def profile_service():
    return ProfileService()


@pytest.fixture
def profile_a(profile_service, sample_user_id, raw_answers_a):
    return profile_service.build_profile(sample_user_id, raw_answers_a, display_name="Mia")


@pytest.fixture
def profile_b(profile_service, sample_user_id_b, raw_answers_b):
    return profile_service.build_profile(sample_user_id_b, raw_answers_b, display_name="Josh")
