# Standard library imports
from datetime import timedelta
import uuid

# Third-party imports
import pytest

# Local application imports
from samadhan.core.errors import AlreadyUpvotedError, ValidationError
from samadhan.models.complaints.enums import ComplaintCategory
from samadhan.services.complaints.scoring_services import (
    CategorySuggestion,
    resolve_category,
    trending_score,
    upvote,
)

from conftest import NOW, build_complaint


@pytest.mark.parametrize(
    ("confidence", "expected"),
    [
        (0.85, ComplaintCategory.ROAD_DAMAGE),
        (0.7, ComplaintCategory.ROAD_DAMAGE),
        (0.69, ComplaintCategory.OTHER),
        (0.5, ComplaintCategory.OTHER),
    ],
)
def test_ai_category_needs_threshold_confidence(confidence, expected):
    suggestion = CategorySuggestion(ComplaintCategory.ROAD_DAMAGE, confidence)
    assert resolve_category(ComplaintCategory.OTHER, suggestion, threshold=0.7, policy="override") == expected


def test_no_suggestion_keeps_user_choice():
    assert resolve_category(ComplaintCategory.SEWAGE, None) == ComplaintCategory.SEWAGE


def test_override_policy_replaces_explicit_choice():
    suggestion = CategorySuggestion(ComplaintCategory.WATER_SUPPLY, 0.9)
    assert resolve_category(ComplaintCategory.SEWAGE, suggestion, policy="override") == ComplaintCategory.WATER_SUPPLY


def test_fill_other_policy_only_fills_other():
    suggestion = CategorySuggestion(ComplaintCategory.WATER_SUPPLY, 0.9)
    assert resolve_category(ComplaintCategory.SEWAGE, suggestion, policy="fill-other") == ComplaintCategory.SEWAGE
    assert resolve_category(ComplaintCategory.OTHER, suggestion, policy="fill-other") == ComplaintCategory.WATER_SUPPLY


@pytest.mark.parametrize("confidence", [-0.1, 1.01])
def test_confidence_must_be_a_probability(confidence):
    with pytest.raises(ValidationError):
        CategorySuggestion(ComplaintCategory.OTHER, confidence)


def test_upvotes_match_upvoters():
    complaint = build_complaint()
    voters = [uuid.uuid4() for _ in range(4)]
    for i, voter in enumerate(voters, start=1):
        upvote(complaint, voter, now=NOW + timedelta(minutes=i))
        assert complaint.upvotes == len(complaint.upvoted_by) == i

    assert set(complaint.upvoted_by) == set(voters)
    assert complaint.updated_at == NOW + timedelta(minutes=4)


def test_second_upvote_is_rejected():
    complaint = build_complaint()
    voter = uuid.uuid4()
    upvote(complaint, voter)
    with pytest.raises(AlreadyUpvotedError):
        upvote(complaint, voter)
    assert complaint.upvotes == 1
    assert list(complaint.upvoted_by) == [voter]


def test_trending_score_decays_with_age():
    fresh = trending_score(10, NOW - timedelta(hours=1), now=NOW)
    stale = trending_score(10, NOW - timedelta(days=3), now=NOW)
    assert fresh > stale > 0
    assert trending_score(0, NOW, now=NOW) == 0


def test_trending_score_formula():
    assert trending_score(9, NOW - timedelta(hours=7), now=NOW, gravity=1.5) == pytest.approx(9 / 9**1.5)


def test_future_dates_count_as_new():
    assert trending_score(4, NOW + timedelta(hours=5), now=NOW, gravity=1.0) == pytest.approx(2.0)
