from __future__ import annotations

import json

import pytest

from drill_eval.errors import InvalidScoreError
from drill_eval.parser import parse_model_output
from drill_eval.schemas import DrillTemplate, DrillType, EvaluationCriterion, RawModelOutput
from drill_eval.scoring import compute_criteria_scores, compute_overall_score, round_half_up


def _template(*criteria: tuple[str, float]) -> DrillTemplate:
	return DrillTemplate(
		id="t",
		type=DrillType.MARKET_SIZING,
		description="Size the market for e-bikes in Berlin.",
		evaluation_criteria=[EvaluationCriterion(category=c, weight=w) for c, w in criteria],
	)


def test_weighted_overall_example(case_template):
	raw = RawModelOutput.model_validate({"Structure": 80, "Analysis": 90})
	scores = compute_criteria_scores(case_template, raw)
	assert scores == {"Structure": 80, "Analysis": 90}
	# round((80*40 + 90*60) / 100)
	assert compute_overall_score(scores, case_template) == 86


@pytest.mark.parametrize(
	"criteria, scores, expected",
	[
		((("A", 50), ("B", 50)), {"A": 85, "B": 86}, 86),  # 85.5 rounds half-up
		((("A", 50), ("B", 50)), {"A": 84, "B": 85}, 85),  # 84.5 rounds half-up
		((("A", 1), ("B", 2)), {"A": 100, "B": 0}, 33),
		((("A", 100),), {"A": 0}, 0),
		((("A", 30), ("B", 30), ("C", 40)), {"A": 70, "B": 80, "C": 90}, 81),
	],
)
def test_overall_is_weighted_mean_rounded_half_up(criteria, scores, expected):
	assert compute_overall_score(scores, _template(*criteria)) == expected


def test_zero_total_weight_gives_zero():
	empty = _template()
	assert compute_criteria_scores(empty, RawModelOutput.model_validate({"A": 99})) == {}
	assert compute_overall_score({}, empty) == 0

	zero_weights = DrillTemplate.model_construct(
		id="z",
		type=DrillType.CASE_PROMPT,
		description="",
		evaluation_criteria=[
			EvaluationCriterion.model_construct(category="A", weight=0),
			EvaluationCriterion.model_construct(category="B", weight=0),
		],
	)
	assert compute_overall_score({"A": 100, "B": 90}, zero_weights) == 0


def test_scores_from_nested_map():
	raw = RawModelOutput.model_validate({"scores": {"Structure": 70, "Analysis": 60}})
	template = _template(("Structure", 40), ("Analysis", 60))
	assert compute_criteria_scores(template, raw) == {"Structure": 70, "Analysis": 60}


@pytest.mark.parametrize("category", ["overall", "feedback", "criteria", "strengths", "improvements", "scores"])
def test_category_named_like_an_output_field(category):
	raw = parse_model_output(json.dumps({category: 70, "Analysis": 80}))
	template = _template((category, 50), ("Analysis", 50))
	assert compute_criteria_scores(template, raw) == {category: 70, "Analysis": 80}
	assert compute_overall_score({category: 70, "Analysis": 80}, template) == 75


def test_undeclared_categories_are_ignored(case_template):
	raw = RawModelOutput.model_validate({"Structure": 80, "Analysis": 90, "Charisma": 100})
	assert set(compute_criteria_scores(case_template, raw)) == {"Structure", "Analysis"}


def test_missing_category_fails(case_template):
	raw = RawModelOutput.model_validate({"Structure": 80})
	with pytest.raises(InvalidScoreError) as exc_info:
		compute_criteria_scores(case_template, raw)
	assert exc_info.value.category == "Analysis"


@pytest.mark.parametrize("value", ["90", True, None, [90], {"score": 90}, float("nan"), float("inf")])
def test_non_numeric_score_fails(case_template, value):
	raw = RawModelOutput.model_validate({"Structure": 80, "Analysis": value})
	with pytest.raises(InvalidScoreError):
		compute_criteria_scores(case_template, raw)


@pytest.mark.parametrize("value", [-1, 100.5, 101, 1000])
def test_out_of_range_score_fails(case_template, value):
	raw = RawModelOutput.model_validate({"Structure": 80, "Analysis": value})
	with pytest.raises(InvalidScoreError):
		compute_criteria_scores(case_template, raw)


def test_fractional_scores_round_half_up(case_template):
	raw = RawModelOutput.model_validate({"Structure": 79.5, "Analysis": 100.0})
	assert compute_criteria_scores(case_template, raw) == {"Structure": 80, "Analysis": 100}


def test_round_half_up():
	assert round_half_up(0.5) == 1
	assert round_half_up(2.5) == 3
	assert round_half_up(2.4999) == 2
	assert round_half_up(99.5) == 100
