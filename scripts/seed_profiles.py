"""Seed a handful of demo users with completed quizzes."""
import asyncio
import sys
sys.path.insert(0, ".")

from sqlalchemy import select
from flatmatch.database import async_session_factory
from flatmatch.models.user import User
from flatmatch.services.profile_service import ProfileService


DEMO_USERS = [
    {
        "user": {"email": "mia.demo@flatmatch.dev", "first_name": "Mia", "last_name": "Nguyen"},
        "answers": {
            "age": 24,
            "occupation": "Student",
            "state": "New South Wales (NSW)",
            "preferred_locations": "Newtown, Glebe, Redfern",
            "location_preference": ["Inner West"],
            "bio": "Design student, early riser, always keen for a market run.",
            "morning_person": 8,
            "bedtime": "10-11pm",
            "noise_sensitivity": 6,
            "socialness": 6,
            "guests": "Once a month",
            "parties": False,
            "cleanliness": 8,
            "dishes": "Same day",
            "common_areas": 8,
            "cooking": 7,
            "interests": ["Cooking", "Yoga", "Art", "Markets"],
            "music_taste": ["Indie", "Electronic"],
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
        },
    },
    {
        "user": {"email": "josh.demo@flatmatch.dev", "first_name": "Josh", "last_name": "Taylor"},
        "answers": {
            "age": 29,
            "occupation": "Full-time worker",
            "state": "New South Wales (NSW)",
            "preferred_locations": "Newtown, Marrickville",
            "location_preference": ["Inner West"],
            "bio": "Software engineer who cooks too much on weekends.",
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
            "interests": ["Cooking", "Gaming", "Hiking", "Coffee"],
            "music_taste": ["Rock", "Indie"],
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
        },
    },
    {
        "user": {"email": "priya.demo@flatmatch.dev", "first_name": "Priya", "last_name": "Shah"},
        "answers": {
            "age": 33,
            "occupation": "Freelancer",
            "state": "Victoria (VIC)",
            "preferred_locations": "Fitzroy, Brunswick",
            "bio": "Freelance illustrator. Quiet days, loud playlists (with headphones).",
            "morning_person": 3,
            "bedtime": "12-1am",
            "noise_sensitivity": 8,
            "socialness": 3,
            "guests": "Rarely/never",
            "parties": False,
            "cleanliness": 9,
            "dishes": "Immediately after eating",
            "common_areas": 9,
            "cooking": 4,
            "interests": ["Art", "Reading", "Meditation"],
            "music_taste": ["Jazz", "Classical"],
            "smoking": "Prefer smoke-free house",
            "drinking": "Rarely drink",
            "pets": "Allergic/prefer no pets",
            "furnished_room": "Required",
            "bathroom": "Own bathroom (ensuite)",
            "max_flatmates": "1 other flatmate",
            "internet": "Required (fast broadband)",
            "parking": "Flexible",
            "gender_preference": "Same gender only",
            "budget": 450,
            "agree_to_terms": True,
        },
    },
]


async def seed():
    service = ProfileService()
    async with async_session_factory() as session:
        for entry in DEMO_USERS:
            details = entry["user"]
            existing = await session.execute(
                select(User).where(User.email == details["email"])
            )
            user = existing.scalar_one_or_none()
            if user is None:
                user = User(**details, interests=[])
                session.add(user)
                await session.flush()
                print(f"  Seeded user {details['email']}")
            else:
                print(f"  User {details['email']} already exists, updating quiz.")

            profile = service.build_profile(
                user_id=str(user.id),
                raw_answers=entry["answers"],
                display_name=user.display_name,
            )
            version = await service.save_quiz_result(profile, session)
            print(f"    quiz v{version}: {profile.personality_traits.lifestyle}, "
                  f"{profile.personality_traits.cleanliness}")
        await session.commit()
    print("Done seeding profiles.")


if __name__ == "__main__":
    asyncio.run(seed())
