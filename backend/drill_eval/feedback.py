from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from .errors import IncompleteFeedbackError
from .schemas import DrillFeedback, RawModelOutput

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("overall", "criteria", "improvements", "strengths")


def as_list(value: Any) -> List[str]:
	"""Wrap a scalar narrative into a one-element list; pass lists through."""
	if value is None:
		return []
	if isinstance(value, (list, tuple)):
		return [str(v) for v in value]
	return [str(value)]


def _is_absent(value: Any) -> bool:
	# Empty lists and maps are valid answers
	return value is None or value == ""


def format_feedback(
	raw: RawModelOutput,
	attempt_id: str,
	categories: Optional[Iterable[str]] = None,
) -> DrillFeedback:
	"""Shape raw model output into ``DrillFeedback``.

	When ``categories`` is given, narratives for categories outside it are
	dropped.
	"""
	missing = [name for name in REQUIRED_FIELDS if _is_absent(getattr(raw, name))]
	if missing:
		raise IncompleteFeedbackError(missing)
	if not isinstance(raw.criteria, dict):
		raise IncompleteFeedbackError(["criteria"])

	criteria_feedback: Dict[str, str] = {str(k): str(v) for k, v in raw.criteria.items()}
	if categories is not None:
		allowed = set(categories)
		dropped = sorted(k for k in criteria_feedback if k not in allowed)
		if dropped:
			logger.warning("dropping feedback for undeclared criteria: %s", ", ".join(dropped))
		criteria_feedback = {k: v for k, v in criteria_feedback.items() if k in allowed}

	return DrillFeedback(
		attempt_id=attempt_id,
		overall_feedback=str(raw.overall),
		criteria_feedback=criteria_feedback,
		improvement_areas=as_list(raw.improvements),
		strengths=as_list(raw.strengths),
	)
