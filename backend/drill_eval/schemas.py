from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator


class BackoffStrategy(str, Enum):
	FIXED = "fixed"
	LINEAR = "linear"
	EXPONENTIAL = "exponential"
	JITTER = "jitter"


class DrillType(str, Enum):
	CASE_PROMPT = "CASE_PROMPT"
	CALCULATIONS = "CALCULATIONS"
	CASE_MATH = "CASE_MATH"
	BRAINSTORMING = "BRAINSTORMING"
	MARKET_SIZING = "MARKET_SIZING"
	SYNTHESIZING = "SYNTHESIZING"


class EvaluationCriterion(BaseModel):
	model_config = ConfigDict(frozen=True)

	category: str = Field(min_length=1)
	weight: float = Field(gt=0, le=100)


class DrillTemplate(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	type: DrillType
	description: str
	evaluation_criteria: List[EvaluationCriterion] = Field(default_factory=list)

	@field_validator("evaluation_criteria")
	@classmethod
	def _unique_categories(cls, value: List[EvaluationCriterion]) -> List[EvaluationCriterion]:
		seen: set[str] = set()
		for criterion in value:
			if criterion.category in seen:
				raise ValueError(f"duplicate criteria category: {criterion.category}")
			seen.add(criterion.category)
		return value

	@property
	def categories(self) -> List[str]:
		return [c.category for c in self.evaluation_criteria]


class DrillAttempt(BaseModel):
	id: str
	# Opaque learner payload; serialized into the prompt as JSON
	response: Any = None


class RawModelOutput(BaseModel):
	"""Decoded but unverified inference output.

	Scores may arrive as top-level keys named after each category or inside a
	``scores`` map. Narrative fields may be scalars or lists. Nothing here has
	been checked against a template yet.

	The decoded payload is kept as-is, so a category that shares its name with
	one of the fields below (``overall``, ``feedback``...) can still be scored.
	"""

	model_config = ConfigDict(extra="allow", populate_by_name=True)

	scores: Any = Field(default=None, validation_alias="criteriaScores")
	feedback: Any = None
	overall: Any = None
	criteria: Any = None
	improvements: Any = Field(default=None, validation_alias="improvementAreas")
	strengths: Any = None

	_payload: Dict[str, Any] = PrivateAttr(default_factory=dict)

	@model_validator(mode="wrap")
	@classmethod
	def _keep_payload(cls, data: Any, handler: Any) -> "RawModelOutput":
		model = handler(data)
		if isinstance(data, dict):
			model._payload = dict(data)
		return model

	def value_for(self, category: str) -> Any:
		"""Return the raw score for ``category``, or None when the model omitted it."""
		if isinstance(self.scores, dict) and category in self.scores:
			return self.scores[category]
		if category in self._payload:
			return self._payload[category]
		extra = self.model_extra or {}
		return extra.get(category)


class EvaluationResult(BaseModel):
	overall_score: int = Field(ge=0, le=100)
	criteria_scores: Dict[str, int]
	feedback: str
	improvement_areas: List[str]
	strengths: List[str]


class DrillFeedback(BaseModel):
	attempt_id: str
	overall_feedback: str
	criteria_feedback: Dict[str, str]
	improvement_areas: List[str]
	strengths: List[str]


class EvaluationOptions(BaseModel):
	detailed: bool = True
	# Reserved; the pipeline always waits for the complete response
	streaming: bool = False
	# Per-attempt timeout in milliseconds; None uses the evaluator default (200)
	timeout: Optional[int] = Field(default=None, gt=0)


class FeedbackOptions(EvaluationOptions):
	include_examples: bool = True
	max_suggestions: int = Field(default=3, ge=1, le=10)


class FeedbackContext(BaseModel):
	drill_type: DrillType
	criteria_scores: Dict[str, int] = Field(default_factory=dict)
	evaluation_result: Dict[str, Any] = Field(default_factory=dict)
