"""Unit tests for quiz answer validation."""
import pytest

from flatmatch.schemas.quiz import QuizAnswers, coerce_int
from flatmatch.services.validation_service import QuizValidationError, validate_quiz_answers


def _rejects(raw):
    with pytest.raises(QuizValidationError) as exc_info:
        validate_quiz_answers(raw)
    return exc_info.value


class TestIdempotence:
    """Validated answers survive a second pass unchanged."""

    def test_revalidate_model(self, raw_answers_a):
        first = validate_quiz_answers(raw_answers_a)
        assert validate_quiz_answers(first) == first

    def test_revalidate_dump(self, raw_answers_b):
        first = validate_quiz_answers(raw_answers_b)
        assert validate_quiz_answers(first.model_dump(exclude_none=True)) == first

    def test_empty_submission_is_valid(self):
        answers = validate_quiz_answers({})
        assert isinstance(answers, QuizAnswers)
        assert answers.age is None
        assert answers.location_list == []


class TestRanges:
    """Numeric answers outside their range are rejected with a field message."""

    def test_age_too_young(self):
        err = _rejects({"age": 17})
        assert err.field == "age"
        assert err.message == "Age must be between 18 and 100"

    def test_age_numeric_string(self):
        assert validate_quiz_answers({"age": "30"}).age == 30

    def test_age_not_a_number(self):
        assert _rejects({"age": "thirty"}).message == "Age must be between 18 and 100"

    def test_slider_out_of_range(self):
        err = _rejects({"cleanliness": 11})
        assert err.field == "cleanliness"
        assert err.message == "cleanliness must be between 0 and 10"

    def test_slider_zero_is_kept(self):
        assert validate_quiz_answers({"socialness": 0}).socialness == 0

    def test_slider_rejects_boolean(self):
        assert _rejects({"cooking": True}).field == "cooking"

    def test_budget_bounds(self):
        assert _rejects({"budget": 40}).message == "Budget must be between $50 and $1000 per week"
        assert validate_quiz_answers({"budget": 1000}).budget == 1000

    def test_first_failure_in_question_order(self):
        err = _rejects({"budget": 5, "age": 5})
        assert err.field == "age"


class TestOptions:
    """Enumerated answers must match one of the offered options."""

    def test_unknown_occupation(self):
        assert _rejects({"occupation": "Astronaut"}).message == "Invalid occupation value"

    def test_unknown_state(self):
        assert _rejects({"state": "California"}).message == "Invalid Australian state or territory"

    def test_unknown_choice(self):
        err = _rejects({"bedtime": "Midnight"})
        assert err.field == "bedtime"
        assert err.message == "Invalid bedtime value"

    def test_empty_string_is_absent(self):
        answers = validate_quiz_answers({"occupation": "", "dishes": ""})
        assert answers.occupation is None
        assert answers.dishes is None

    def test_choice_is_trimmed(self):
        assert validate_quiz_answers({"guests": " Weekly "}).guests == "Weekly"


class TestLocations:
    """Preferred locations are a comma-separated list of suburbs."""

    def test_blank_entries_removed(self):
        answers = validate_quiz_answers({"preferred_locations": "Newtown, Surry Hills,  , Redfern"})
        assert answers.preferred_locations == "Newtown, Surry Hills, Redfern"
        assert answers.location_list == ["Newtown", "Surry Hills", "Redfern"]

    def test_only_blank_entries_rejected(self):
        err = _rejects({"preferred_locations": " , ,"})
        assert err.field == "preferred_locations"
        assert err.message == "At least one location preference is required"

    def test_overlong_entry_dropped(self):
        answers = validate_quiz_answers({"preferred_locations": "Glebe, " + "x" * 101})
        assert answers.preferred_locations == "Glebe"

    def test_non_string_rejected(self):
        assert _rejects({"preferred_locations": 42}).message == "Preferred locations must be a string"


class TestSelections:
    """Selection lists are trimmed rather than rejected."""

    def test_not_a_list(self):
        err = _rejects({"interests": "Cooking"})
        assert err.field == "interests"
        assert err.message == "interests must be a list"

    def test_truncated_to_twenty(self):
        tags = [f"Tag {i}" for i in range(25)]
        answers = validate_quiz_answers({"music_taste": tags})
        assert answers.music_taste == tags[:20]

    def test_bad_items_dropped(self):
        answers = validate_quiz_answers({"interests": ["Cooking", 7, "y" * 51, "Hiking"]})
        assert answers.interests == ["Cooking", "Hiking"]


class TestFreeTextAndFlags:
    """Bio, booleans and consent keys."""

    def test_bio_capped(self):
        answers = validate_quiz_answers({"bio": "  " + "b" * 2500})
        assert len(answers.bio) == 2000

    def test_bio_must_be_text(self):
        assert _rejects({"bio": 5}).message == "Bio must be a string"

    def test_boolean_strings(self):
        assert validate_quiz_answers({"parties": "false"}).parties is False
        assert validate_quiz_answers({"parties": "no"}).parties is False
        assert validate_quiz_answers({"parties": "yes"}).parties is True

    def test_camel_case_consent_keys(self):
        answers = validate_quiz_answers({"agreeToTerms": True, "marketingEmails": "off"})
        assert answers.agree_to_terms is True
        assert answers.marketing_emails is False

    def test_unknown_keys_dropped(self):
        answers = validate_quiz_answers({"favourite_colour": "teal", "age": 30})
        assert "favourite_colour" not in answers.model_dump()

    def test_not_a_mapping(self):
        err = _rejects(["age", 30])
        assert err.field is None
        assert err.message == "Quiz answers must be a valid object"
        assert err.to_dict() == {"field": None, "message": "Quiz answers must be a valid object"}


class TestCoerceInt:
    """Form-style integer reading."""

    def test_values(self):
        assert coerce_int(7) == 7
        assert coerce_int(7.9) == 7
        assert coerce_int(" 8 ") == 8
        assert coerce_int("8.0") == 8
        assert coerce_int(False) is None
        assert coerce_int(float("nan")) is None
        assert coerce_int(None) is None
