from datetime import date

import pytest

from assessor.app.matching.scoring import (
    calculate_total_score,
    days_between,
    round_half_up,
    score_availability,
    score_experience,
    score_expertise,
    score_language,
)
from assessor.app.schemas.reviewer import (
    AvailabilitySlot,
    AvailabilityType,
    ExpertiseArea,
    Language,
    LanguageProficiency,
    ProficiencyLevel,
)
from assessor.tests.fixtures.reviewer_factory import (
    REVIEW_END,
    REVIEW_START,
    available_for_review,
    expertise,
    language,
)


def _slot(start, end, availability_type, notes=None) -> AvailabilitySlot:
    return AvailabilitySlot(
        start_date=start,
        end_date=end,
        availability_type=availability_type,
        notes=notes,
    )


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(0.25) == 0.3
    assert round_half_up(2.5, 0) == 3.0
    assert round_half_up(18.125) == 18.1


# ---------------------------------------------------------------------------
# Expertise
# ---------------------------------------------------------------------------

def test_full_expertise_score_without_required_areas():
    result = score_expertise([], required=[])

    assert result.score == 40
    assert result.missing_required == []


def test_required_areas_share_thirty_points():
    result = score_expertise(
        [expertise(ExpertiseArea.ATS), expertise(ExpertiseArea.SMS)],
        required=[ExpertiseArea.ATS, ExpertiseArea.SMS],
    )

    assert result.score == 30
    assert result.matched_required == [ExpertiseArea.ATS, ExpertiseArea.SMS]


def test_proficiency_scales_share_and_parts_are_capped():
    result = score_expertise(
        [
            expertise(ExpertiseArea.ATS, ProficiencyLevel.EXPERT),
            expertise(ExpertiseArea.SMS, ProficiencyLevel.EXPERT),
            expertise(ExpertiseArea.MET, ProficiencyLevel.EXPERT),
        ],
        required=[ExpertiseArea.ATS, ExpertiseArea.SMS],
        preferred=[ExpertiseArea.MET],
    )

    assert result.score == 40
    assert result.matched_preferred == [ExpertiseArea.MET]


def test_missing_required_area_is_reported():
    result = score_expertise(
        [expertise(ExpertiseArea.ATS, ProficiencyLevel.BASIC)],
        required=[ExpertiseArea.ATS, ExpertiseArea.SMS],
    )

    assert result.score == 9.0
    assert result.missing_required == [ExpertiseArea.SMS]


def test_preferred_area_already_required_is_not_double_counted():
    result = score_expertise(
        [expertise(ExpertiseArea.ATS), expertise(ExpertiseArea.MET)],
        required=[ExpertiseArea.ATS],
        preferred=[ExpertiseArea.ATS, ExpertiseArea.MET],
    )

    assert result.score == 35
    assert result.matched_preferred == [ExpertiseArea.MET]


# ---------------------------------------------------------------------------
# Language
# ---------------------------------------------------------------------------

def test_full_language_score_without_required_languages():
    result = score_language([], required=[])

    assert result.score == 25
    assert result.can_conduct_review is True


def test_language_points_by_proficiency_and_interviews():
    result = score_language(
        [
            language(Language.EN),
            language(Language.FR, LanguageProficiency.BASIC, interviews=False),
        ],
        required=[Language.EN, Language.FR],
    )

    assert result.score == 20.8
    assert result.matched_languages == [Language.EN, Language.FR]
    assert result.can_conduct_review is False


def test_intermediate_speaker_can_conduct_review():
    result = score_language(
        [language(Language.EN, LanguageProficiency.INTERMEDIATE, interviews=False)],
        required=[Language.EN],
    )

    assert result.score == 18.1
    assert result.can_conduct_review is True


def test_missing_language_blocks_review():
    result = score_language([language(Language.EN)], required=[Language.FR])

    assert result.score == 0
    assert result.missing_languages == [Language.FR]
    assert result.can_conduct_review is False


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------

def test_period_counts_both_ends():
    assert days_between(REVIEW_START, REVIEW_END) == 10
    assert days_between(REVIEW_END, REVIEW_START) == 10


def test_days_without_slots_are_unavailable():
    result = score_availability([], REVIEW_START, REVIEW_END)

    assert result.score == 0
    assert result.total_days == 10
    assert result.coverage == 0


def test_fully_available_reviewer():
    result = score_availability(
        [available_for_review()], REVIEW_START, REVIEW_END
    )

    assert result.score == 25
    assert result.available_days == 10
    assert result.coverage == 1.0


def test_tentative_days_count_half():
    result = score_availability(
        [available_for_review(AvailabilityType.TENTATIVE)],
        REVIEW_START,
        REVIEW_END,
    )

    assert result.available_days == 5
    assert result.coverage == 0.5
    assert result.score == 12.5


def test_later_slot_overrides_earlier_slot():
    result = score_availability(
        [
            available_for_review(),
            _slot(date(2025, 3, 8), date(2025, 3, 12), AvailabilityType.UNAVAILABLE),
        ],
        REVIEW_START,
        REVIEW_END,
    )

    assert result.available_days == 5
    assert result.coverage == 0.5


def test_slot_is_clipped_to_review_period():
    result = score_availability(
        [_slot(date(2025, 2, 25), date(2025, 3, 7), AvailabilityType.AVAILABLE)],
        REVIEW_START,
        REVIEW_END,
    )

    assert result.available_days == 5


def test_assignment_notes_are_reported_once():
    result = score_availability(
        [
            _slot(
                date(2025, 3, 3),
                date(2025, 3, 4),
                AvailabilityType.ON_ASSIGNMENT,
                notes="Audit mission",
            ),
            _slot(
                date(2025, 3, 10),
                date(2025, 3, 10),
                AvailabilityType.ON_ASSIGNMENT,
                notes="Audit mission",
            ),
        ],
        REVIEW_START,
        REVIEW_END,
    )

    assert result.conflicts == ["Audit mission"]
    assert result.available_days == 0


def test_reversed_period_yields_zero_coverage():
    result = score_availability(
        [available_for_review()], REVIEW_END, REVIEW_START
    )

    assert result.total_days == 10
    assert result.coverage == 0
    assert result.score == 0


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "years, reviews, expected",
    [
        (0, 0, 0.0),
        (3, 1, 0.5),
        (5, 2, 2.0),
        (7, 3, 3.5),
        (10, 5, 6.0),
        (15, 10, 10.0),
        (40, 60, 10.0),
    ],
)
def test_experience_score(years, reviews, expected):
    assert score_experience(years, reviews).score == expected


def test_experience_bonuses_are_rounded_separately():
    result = score_experience(7, 3)

    assert result.years_bonus == 1.8
    assert result.reviews_bonus == 1.7


# ---------------------------------------------------------------------------
# Total
# ---------------------------------------------------------------------------

def test_total_score_and_percentage():
    total = calculate_total_score(
        score_expertise(
            [expertise(ExpertiseArea.ATS)], required=[ExpertiseArea.ATS]
        ),
        score_language([language(Language.EN)], required=[Language.EN]),
        score_availability([available_for_review()], REVIEW_START, REVIEW_END),
        score_experience(15, 10),
    )

    assert total.total_score == 90
    assert total.max_possible_score == 100
    assert total.percentage == 90
