"""Unit tests for TraitService — personality trait classification."""
import pytest

from flatmatch.schemas.profile import PersonalityTraits
from flatmatch.services.trait_service import TraitService
from flatmatch.services.validation_service import validate_quiz_answers


@pytest.fixture
def trait_service():
    return TraitService()


def _traits(service, **answers):
    return service.analyze(validate_quiz_answers(answers))


class TestTotality:
    """Every submission yields a full trait vector."""

    def test_empty_answers_are_neutral(self, trait_service):
        traits = _traits(trait_service)
        assert traits == PersonalityTraits(**TraitService.NEUTRAL)

    def test_full_profile(self, trait_service, raw_answers_a):
        traits = trait_service.analyze(validate_quiz_answers(raw_answers_a))
        assert traits.lifestyle == "quiet"
        assert traits.social_energy == "balanced"
        assert traits.cleanliness == "very_clean"
        assert traits.schedule == "early_bird"
        assert traits.noise_tolerance == "moderate"
        assert traits.guest_policy == "minimal"
        assert traits.communication_style == "diplomatic"
        assert traits.conflict_resolution == "mediated"
        assert traits.shared_spaces == "high"
        assert traits.personal_space == "moderate"
        assert traits.financial_approach == "shared_equally"
        assert traits.long_term_goals == "studying"

    def test_failing_rule_falls_back_to_neutral(self, trait_service):
        def broken(answers):
            raise TypeError("bad input")

        trait_service._schedule = broken
        traits = _traits(trait_service, morning_person=10)
        assert traits.schedule == "flexible"


class TestLifestyle:
    """Social versus quiet points; one point either way is balanced."""

    def test_social(self, trait_service):
        traits = _traits(trait_service, parties=True, guests="Weekly", socialness=8)
        assert traits.lifestyle == "social"

    def test_quiet(self, trait_service):
        traits = _traits(trait_service, interests=["Reading"], guests="Rarely/never")
        assert traits.lifestyle == "quiet"

    def test_narrow_lead_is_balanced(self, trait_service):
        # social 2 (Partying/nightlife) vs quiet 1 (Gaming)
        traits = _traits(trait_service, interests=["Partying/nightlife", "Gaming"])
        assert traits.lifestyle == "balanced"


class TestSocialEnergy:
    """Extrovert versus introvert points."""

    def test_extrovert(self, trait_service):
        traits = _traits(trait_service, socialness=9, guests="Multiple times a week")
        assert traits.social_energy == "extrovert"

    def test_introvert(self, trait_service):
        traits = _traits(trait_service, socialness=2, common_areas=2)
        assert traits.social_energy == "introvert"


class TestCleanliness:
    """Slider adjusted by dish habit, clamped to 0-10."""

    def test_clamped_high(self, trait_service):
        traits = _traits(trait_service, cleanliness=9, dishes="Immediately after eating")
        assert traits.cleanliness == "very_clean"

    def test_dishes_pull_down(self, trait_service):
        traits = _traits(trait_service, cleanliness=6, dishes="When I run out of clean ones")
        assert traits.cleanliness == "relaxed"

    def test_absent_slider_reads_midpoint(self, trait_service):
        traits = _traits(trait_service, dishes="Immediately after eating")
        assert traits.cleanliness == "moderate"

    def test_zero_slider_is_not_midpoint(self, trait_service):
        traits = _traits(trait_service, cleanliness=0)
        assert traits.cleanliness == "relaxed"


class TestSchedule:
    """Morning slider adjusted by bedtime."""

    def test_early_bird(self, trait_service):
        assert _traits(trait_service, morning_person=6, bedtime="9-10pm").schedule == "early_bird"

    def test_night_owl(self, trait_service):
        assert _traits(trait_service, morning_person=4, bedtime="After 1am").schedule == "night_owl"

    def test_flexible(self, trait_service):
        assert _traits(trait_service, morning_person=5, bedtime="11pm-12am").schedule == "flexible"


class TestRemainingTraits:
    """Single-input rules."""

    @pytest.mark.parametrize("sensitivity,expected", [(8, "low"), (3, "high"), (5, "moderate")])
    def test_noise_tolerance(self, trait_service, sensitivity, expected):
        assert _traits(trait_service, noise_sensitivity=sensitivity).noise_tolerance == expected

    def test_guest_policy(self, trait_service):
        assert _traits(trait_service, guests="Multiple times a week").guest_policy == "frequent"
        assert _traits(trait_service, guests="Weekly", parties=True).guest_policy == "frequent"
        assert _traits(trait_service, guests="Weekly", parties=False).guest_policy == "minimal"
        assert _traits(trait_service, guests="Weekly").guest_policy == "occasional"

    def test_communication_style(self, trait_service):
        direct = _traits(trait_service, socialness=7, occupation="Full-time worker")
        assert direct.communication_style == "direct"
        assert _traits(trait_service, socialness=7, occupation="Student").communication_style == "diplomatic"
        assert _traits(trait_service, socialness=4).communication_style == "casual"

    def test_conflict_resolution(self, trait_service):
        assert _traits(trait_service, socialness=7).conflict_resolution == "direct"
        assert _traits(trait_service, socialness=3).conflict_resolution == "avoidant"

    def test_shared_and_personal_space(self, trait_service):
        traits = _traits(trait_service, socialness=2, common_areas=2)
        assert traits.shared_spaces == "low"
        assert traits.personal_space == "high"
        traits = _traits(trait_service, socialness=9, common_areas=9)
        assert traits.shared_spaces == "high"
        assert traits.personal_space == "low"

    def test_long_term_goals(self, trait_service):
        assert _traits(trait_service, occupation="Student", age=35).long_term_goals == "studying"
        assert _traits(trait_service, occupation="Full-time worker", age=25).long_term_goals == "career_focused"
        assert _traits(trait_service, occupation="Full-time worker", age=24).long_term_goals == "exploring"
        assert _traits(trait_service, occupation="Freelancer", age=30).long_term_goals == "settling"
