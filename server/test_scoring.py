"""Tests for the score combiner, the language distribution and issue serialization."""

import itertools
from decimal import ROUND_HALF_UP, Decimal

import pytest

from scoring.combiner import combine
from scoring.languages import language_distribution
from scoring.schemas import CategoryResult, Issue, ScoreBreakdown, Severity


def breakdown(security: int, quality: int, practices: int) -> ScoreBreakdown:
    return ScoreBreakdown(
        security=CategoryResult(score=security),
        code_quality=CategoryResult(score=quality),
        best_practices=CategoryResult(score=practices),
    )


@pytest.mark.parametrize(
    "scores, expected",
    [
        ((100, 100, 100), 100),
        ((0, 0, 0), 0),
        ((50, 20, 10), 30),
        ((70, 20, 10), 38),  # 37.5 rounds up
        ((100, 0, 0), 40),
    ],
)
def test_combine(scores, expected):
    assert combine(breakdown(*scores)) == expected


def test_combine_matches_decimal_half_up():
    weights = (Decimal("0.40"), Decimal("0.35"), Decimal("0.25"))
    for scores in itertools.product(range(0, 101, 7), repeat=3):
        exact = sum(w * s for w, s in zip(weights, scores))
        expected = int(exact.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        assert combine(breakdown(*scores)) == expected, scores


def test_language_percentages():
    result = language_distribution({"CSS": 100, "TypeScript": 300})

    assert result == {"TypeScript": 75, "CSS": 25}
    assert list(result) == ["TypeScript", "CSS"]


def test_language_ties_ordered_by_name():
    assert list(language_distribution({"Go": 50, "C": 50})) == ["C", "Go"]


def test_language_percentages_round_half_up():
    assert language_distribution({"A": 1, "B": 7}) == {"B": 88, "A": 13}


def test_no_language_bytes():
    assert language_distribution({}) == {}
    assert language_distribution({"Shell": 0}) == {}


def test_issue_dump_omits_missing_file():
    located = Issue(severity=Severity.CRITICAL, message="Hardcoded API key detected", file="config.js")
    general = Issue(severity=Severity.INFO, message="No LICENSE file found")

    assert located.model_dump(mode="json", by_alias=True) == {
        "severity": "critical", "message": "Hardcoded API key detected", "file": "config.js",
    }
    assert general.model_dump(mode="json", by_alias=True) == {"severity": "info", "message": "No LICENSE file found"}
    assert CategoryResult(score=90, issues=[general]).model_dump(by_alias=True)["issues"][0] == {
        "severity": Severity.INFO, "message": "No LICENSE file found",
    }
