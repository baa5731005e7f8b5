from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping

from .errors import InvalidScoreError
from .schemas import DrillTemplate, RawModelOutput

SCORE_MIN = 0
SCORE_MAX = 100


def round_half_up(value: float) -> int:
	# round() is banker's rounding: round(86.5) == 86
	return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _validate_score(category: str, value: object) -> int:
	if value is None:
		raise InvalidScoreError(category, "missing")
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		raise InvalidScoreError(category, f"non-numeric value {value!r}")
	if isinstance(value, float) and not math.isfinite(value):
		raise InvalidScoreError(category, f"non-numeric value {value!r}")
	if value < SCORE_MIN or value > SCORE_MAX:
		raise InvalidScoreError(category, f"{value} outside [{SCORE_MIN}, {SCORE_MAX}]")
	return round_half_up(value)


def compute_criteria_scores(template: DrillTemplate, raw: RawModelOutput) -> Dict[str, int]:
	"""Validate the model's score for every criterion the template declares.

	Categories the model invented are ignored; declared ones must be present,
	numeric and within [0, 100].
	"""
	scores: Dict[str, int] = {}
	for criterion in template.evaluation_criteria:
		scores[criterion.category] = _validate_score(criterion.category, raw.value_for(criterion.category))
	return scores


def compute_overall_score(criteria_scores: Mapping[str, int], template: DrillTemplate) -> int:
	"""Weighted mean of the criteria scores, rounded half-up; 0 when weights sum to 0."""
	total_score = 0.0
	total_weight = 0.0
	for criterion in template.evaluation_criteria:
		try:
			score = criteria_scores[criterion.category]
		except KeyError:
			raise InvalidScoreError(criterion.category, "missing") from None
		total_score += score * criterion.weight
		total_weight += criterion.weight
	if total_weight <= 0:
		return 0
	return round_half_up(total_score / total_weight)
