"""
Evaluation Error Taxonomy
=========================

Every failure raised by the evaluation pipeline derives from
``DrillEvaluationError``. Stage-level errors (timeouts, exhausted retries,
malformed payloads, invalid scores, incomplete feedback) are wrapped by the
orchestrator into exactly one ``EvaluationError`` or ``FeedbackError`` before
they reach a caller.

Callers should treat any of these as "evaluation unavailable, retry later".
"""

from __future__ import annotations

from typing import Optional, Sequence


class DrillEvaluationError(Exception):
	"""Base class for all evaluation pipeline failures."""


class PromptTemplateError(DrillEvaluationError):
	"""Unknown drill type or missing template variables."""


class ModelConfigError(DrillEvaluationError):
	"""Unknown drill type or a model configuration that fails validation."""


class InferenceRequestError(DrillEvaluationError):
	"""Transport-level failure talking to the inference service."""

	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class InferenceTimeoutError(DrillEvaluationError, TimeoutError):
	"""The per-attempt timer fired before the inference service answered."""

	def __init__(self, timeout_ms: int) -> None:
		super().__init__(f"inference request timed out after {timeout_ms}ms")
		self.timeout_ms = timeout_ms


class GatewayError(DrillEvaluationError):
	"""All gateway attempts failed; wraps the last underlying cause."""

	def __init__(self, attempts: int, last_error: Optional[BaseException]) -> None:
		detail = f"{type(last_error).__name__}: {last_error}" if last_error is not None else "unknown error"
		super().__init__(f"inference request failed after {attempts} attempts ({detail})")
		self.attempts = attempts
		self.last_error = last_error


class ParseError(DrillEvaluationError):
	"""Inference output is empty or not a decodable JSON object."""


class InvalidScoreError(DrillEvaluationError):
	"""A declared criterion score is missing, non-numeric or out of range."""

	def __init__(self, category: str, reason: str) -> None:
		super().__init__(f"invalid score for criteria {category!r}: {reason}")
		self.category = category
		self.reason = reason


class IncompleteFeedbackError(DrillEvaluationError):
	"""Inference output lacks one or more required narrative fields."""

	def __init__(self, missing: Sequence[str]) -> None:
		self.missing = list(missing)
		super().__init__(f"feedback is missing required fields: {', '.join(self.missing)}")


class _PipelineError(DrillEvaluationError):
	action = "pipeline"

	def __init__(self, stage: str, cause: BaseException) -> None:
		super().__init__(f"{self.action} failed during {stage}: {cause}")
		self.stage = stage
		self.cause = cause


class EvaluationError(_PipelineError):
	"""Top-level error surfaced by ``DrillEvaluator.evaluate_response``."""

	action = "evaluation"


class FeedbackError(_PipelineError):
	"""Top-level error surfaced by ``DrillEvaluator.generate_feedback``."""

	action = "feedback generation"
