"""
Flatmatch — Personality trait classification.

Maps a validated quiz submission onto the fixed 12-field categorical
``PersonalityTraits`` vector.  Each trait has its own rule: one to three
answers are combined into a small integer score which is then thresholded
into a category.

The analyzer is total.  Missing sliders read as the scale midpoint (5),
missing categorical answers simply contribute nothing, and a record that
fails re-validation is still classified as given.
"""

from __future__ import annotations

import structlog

from flatmatch.schemas.profile import PersonalityTraits
from flatmatch.schemas.quiz import QuizAnswers
from flatmatch.services.validation_service import QuizValidationError, validate_quiz_answers

logger = structlog.get_logger("flatmatch.trait_service")


class TraitService:
    """Derive ``PersonalityTraits`` from ``QuizAnswers``.

    Point tables and thresholds are class-level attributes so that each rule
    can be reviewed (and overridden in tests) independently.
    """

    SLIDER_MIDPOINT: int = 5
    DEFAULT_AGE: int = 25

    # Category used when a rule cannot read its inputs.
    NEUTRAL: dict[str, str] = {
        "lifestyle": "balanced",
        "social_energy": "balanced",
        "cleanliness": "moderate",
        "schedule": "flexible",
        "noise_tolerance": "moderate",
        "guest_policy": "occasional",
        "communication_style": "diplomatic",
        "conflict_resolution": "mediated",
        "shared_spaces": "moderate",
        "personal_space": "moderate",
        "financial_approach": "shared_equally",
        "long_term_goals": "exploring",
    }

    # ── Lifestyle ─────────────────────────────────────────────────────────
    SOCIAL_INTERESTS: dict[str, int] = {
        "Partying/nightlife": 2,
        "Music/concerts": 1,
        "Sports": 1,
        "Outdoor activities": 1,
    }
    QUIET_INTERESTS: dict[str, int] = {
        "Reading": 2,
        "Study groups": 1,
        "Art/creative stuff": 1,
        "Gaming": 1,
    }

    # ── Adjustments applied to slider readings ────────────────────────────
    DISH_ADJUSTMENT: dict[str, int] = {
        "Immediately after eating": 2,
        "Same day": 1,
        "Within 2-3 days": -1,
        "When I run out of clean ones": -2,
        "What dishes? (takeaway life)": -1,
    }
    BEDTIME_ADJUSTMENT: dict[str, int] = {
        "Before 9pm": 2,
        "9-10pm": 1,
        "12-1am": -1,
        "After 1am": -2,
    }

    # ── Public API ──────────────────────────────────────────────────

    def analyze(self, answers: QuizAnswers) -> PersonalityTraits:
        """Classify every trait for a single submission."""
        try:
            answers = validate_quiz_answers(answers)
        except QuizValidationError as exc:
            logger.warning(
                "trait_revalidation_failed",
                field=exc.field,
                reason=exc.message,
            )

        values: dict[str, str] = {}
        for trait, rule in self._rules().items():
            try:
                values[trait] = rule(answers)
            except (AttributeError, TypeError, ValueError):
                logger.warning("trait_rule_failed", trait=trait, fallback=self.NEUTRAL[trait])
                values[trait] = self.NEUTRAL[trait]

        traits = PersonalityTraits(**values)
        logger.debug("traits_analyzed", **values)
        return traits

    def _rules(self) -> dict:
        return {
            "lifestyle": self._lifestyle,
            "social_energy": self._social_energy,
            "cleanliness": self._cleanliness,
            "schedule": self._schedule,
            "noise_tolerance": self._noise_tolerance,
            "guest_policy": self._guest_policy,
            "communication_style": self._communication_style,
            "conflict_resolution": self._conflict_resolution,
            "shared_spaces": self._shared_spaces,
            "personal_space": self._personal_space,
            "financial_approach": self._financial_approach,
            "long_term_goals": self._long_term_goals,
        }

    # ── Helpers ─────────────────────────────────────────────────────

    def _slider(self, answers: QuizAnswers, name: str) -> int:
        value = getattr(answers, name, None)
        return self.SLIDER_MIDPOINT if value is None else value

    @staticmethod
    def _prevailing(first: int, second: int) -> int:
        """+1 if ``first`` wins by more than one point, -1 for ``second``, else 0."""
        if first > second + 1:
            return 1
        if second > first + 1:
            return -1
        return 0

    # ── Per-trait rules ─────────────────────────────────────────────

    def _lifestyle(self, answers: QuizAnswers) -> str:
        interests = answers.interests or []
        socialness = self._slider(answers, "socialness")

        social = sum(p for tag, p in self.SOCIAL_INTERESTS.items() if tag in interests)
        quiet = sum(p for tag, p in self.QUIET_INTERESTS.items() if tag in interests)

        if answers.parties is True:
            social += 2
        elif answers.parties is False:
            quiet += 2

        if answers.guests in ("Multiple times a week", "Weekly"):
            social += 2
        elif answers.guests == "Rarely/never":
            quiet += 2

        if socialness >= 8:
            social += 2
        elif socialness >= 6:
            social += 1
        elif socialness <= 2:
            quiet += 2
        elif socialness <= 4:
            quiet += 1

        return {1: "social", -1: "quiet", 0: "balanced"}[self._prevailing(social, quiet)]

    def _social_energy(self, answers: QuizAnswers) -> str:
        socialness = self._slider(answers, "socialness")
        common_areas = self._slider(answers, "common_areas")

        extrovert = 0
        introvert = 0

        if socialness >= 8:
            extrovert += 3
        elif socialness >= 7:
            extrovert += 2
        elif socialness >= 6:
            extrovert += 1
        elif socialness <= 2:
            introvert += 3
        elif socialness <= 3:
            introvert += 2
        elif socialness <= 4:
            introvert += 1

        if answers.guests == "Multiple times a week":
            extrovert += 2
        elif answers.guests == "Weekly":
            extrovert += 1
        elif answers.guests == "Rarely/never":
            introvert += 2

        if answers.parties is True:
            extrovert += 1
        elif answers.parties is False:
            introvert += 1

        if common_areas >= 8:
            extrovert += 1
        elif common_areas <= 3:
            introvert += 1

        return {1: "extrovert", -1: "introvert", 0: "balanced"}[
            self._prevailing(extrovert, introvert)
        ]

    def _cleanliness(self, answers: QuizAnswers) -> str:
        score = self._slider(answers, "cleanliness")
        score += self.DISH_ADJUSTMENT.get(answers.dishes, 0)
        score = max(0, min(10, score))

        if score >= 8:
            return "very_clean"
        if score <= 4:
            return "relaxed"
        return "moderate"

    def _schedule(self, answers: QuizAnswers) -> str:
        score = self._slider(answers, "morning_person")
        score += self.BEDTIME_ADJUSTMENT.get(answers.bedtime, 0)

        if score >= 7:
            return "early_bird"
        if score <= 3:
            return "night_owl"
        return "flexible"

    def _noise_tolerance(self, answers: QuizAnswers) -> str:
        # High sensitivity means low tolerance.
        sensitivity = self._slider(answers, "noise_sensitivity")
        if sensitivity >= 8:
            return "low"
        if sensitivity <= 3:
            return "high"
        return "moderate"

    def _guest_policy(self, answers: QuizAnswers) -> str:
        guests = answers.guests
        if guests == "Multiple times a week" or (guests == "Weekly" and answers.parties is True):
            return "frequent"
        if guests == "Rarely/never" or answers.parties is False:
            return "minimal"
        return "occasional"

    def _communication_style(self, answers: QuizAnswers) -> str:
        socialness = self._slider(answers, "socialness")
        if socialness >= 7 and answers.occupation == "Full-time worker":
            return "direct"
        if socialness <= 4:
            return "casual"
        return "diplomatic"

    def _conflict_resolution(self, answers: QuizAnswers) -> str:
        socialness = self._slider(answers, "socialness")
        if socialness >= 7:
            return "direct"
        if socialness <= 3:
            return "avoidant"
        return "mediated"

    def _shared_spaces(self, answers: QuizAnswers) -> str:
        usage = self._slider(answers, "common_areas")
        if usage >= 7:
            return "high"
        if usage <= 3:
            return "low"
        return "moderate"

    def _personal_space(self, answers: QuizAnswers) -> str:
        socialness = self._slider(answers, "socialness")
        common_areas = self._slider(answers, "common_areas")
        space = 10 - (socialness + common_areas) / 2

        if space >= 7:
            return "high"
        if space <= 3:
            return "low"
        return "moderate"

    def _financial_approach(self, answers: QuizAnswers) -> str:
        # No quiz question feeds this trait yet.
        return "shared_equally"

    def _long_term_goals(self, answers: QuizAnswers) -> str:
        age = answers.age if answers.age is not None else self.DEFAULT_AGE
        if answers.occupation == "Student":
            return "studying"
        if answers.occupation == "Full-time worker" and age >= 25:
            return "career_focused"
        if age >= 30:
            return "settling"
        return "exploring"
