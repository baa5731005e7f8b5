"""
Evaluation Orchestrator
=======================

Turns a learner's drill attempt into a scored ``EvaluationResult`` or a
narrative ``DrillFeedback`` by running a strictly sequential pipeline:

	PROMPTING -> INVOKING -> PARSING -> AGGREGATING | FORMATTING

Every call is independent. The first stage that fails aborts the pipeline and
is surfaced as a single ``EvaluationError`` / ``FeedbackError`` carrying the
stage name and the underlying cause; no partial result is ever returned.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Optional

from .errors import EvaluationError, FeedbackError
from .feedback import as_list, format_feedback
from .gateway import ModelGateway
from .model_config import ModelConfigProvider
from .parser import parse_model_output
from .prompt_templates import PromptRegistry
from .schemas import (
	DrillAttempt,
	DrillFeedback,
	DrillTemplate,
	EvaluationOptions,
	EvaluationResult,
	FeedbackContext,
	FeedbackOptions,
)
from .scoring import compute_criteria_scores, compute_overall_score

logger = logging.getLogger(__name__)

# 200ms target response time
DEFAULT_TIMEOUT_MS = 200


class PipelineStage(str, Enum):
	PROMPTING = "prompting"
	INVOKING = "invoking"
	PARSING = "parsing"
	AGGREGATING = "aggregating"
	FORMATTING = "formatting"


def _output_format(template: DrillTemplate, detailed: bool) -> str:
	keys = ", ".join(f'"{c}"' for c in template.categories)
	lines = [
		"Return ONLY a JSON object (no markdown) with keys:",
		f"- one integer score from 0 to 100 for each criterion: {keys}",
		"- feedback (string): overall assessment",
		"- improvements (array of strings): areas to improve",
		"- strengths (array of strings): what the candidate did well",
	]
	if detailed:
		lines.append("- criteria (object): a short narrative per criterion, keyed by criterion name")
	return "\n".join(lines)


class DrillEvaluator:
	def __init__(
		self,
		gateway: ModelGateway,
		*,
		prompts: Optional[PromptRegistry] = None,
		model_configs: Optional[ModelConfigProvider] = None,
		default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
	) -> None:
		self.gateway = gateway
		self.default_timeout_ms = default_timeout_ms
		self.prompts = prompts or PromptRegistry()
		self.model_configs = model_configs or ModelConfigProvider()

	async def evaluate_response(
		self,
		template: DrillTemplate,
		attempt: DrillAttempt,
		options: Optional[EvaluationOptions] = None,
	) -> EvaluationResult:
		options = options or EvaluationOptions()
		stage = PipelineStage.PROMPTING
		try:
			prompt_template = self.prompts.get_prompt_template(template.type)
			model_config = self.model_configs.get_model_config(template.type)
			prompt = self.prompts.generate_prompt(prompt_template, {
				"drill_prompt": template.description,
				"response": json.dumps(attempt.response, default=str),
				"criteria": "\n".join(f"{c.category} ({c.weight:g}%)" for c in template.evaluation_criteria),
				"output_format": _output_format(template, options.detailed),
			})

			stage = PipelineStage.INVOKING
			text = await self.gateway.invoke(prompt, model_config, options.timeout or self.default_timeout_ms)

			stage = PipelineStage.PARSING
			raw = parse_model_output(text)

			stage = PipelineStage.AGGREGATING
			criteria_scores = compute_criteria_scores(template, raw)
			overall_score = compute_overall_score(criteria_scores, template)
			result = EvaluationResult(
				overall_score=overall_score,
				criteria_scores=criteria_scores,
				feedback=str(raw.feedback or raw.overall or ""),
				improvement_areas=as_list(raw.improvements),
				strengths=as_list(raw.strengths),
			)
		except Exception as err:
			logger.warning("evaluation of attempt %s failed during %s: %s", attempt.id, stage.value, err)
			raise EvaluationError(stage.value, err) from err
		logger.info("attempt %s evaluated: overall=%d", attempt.id, result.overall_score)
		return result

	async def generate_feedback(
		self,
		attempt: DrillAttempt,
		context: FeedbackContext,
		options: Optional[FeedbackOptions] = None,
	) -> DrillFeedback:
		options = options or FeedbackOptions()
		stage = PipelineStage.PROMPTING
		try:
			prompt_template = self.prompts.get_feedback_template(context.drill_type)
			model_config = self.model_configs.get_feedback_config()
			prompt = self.prompts.generate_prompt(prompt_template, {
				"response": json.dumps(attempt.response, default=str),
				"scores": json.dumps(context.criteria_scores),
				"evaluation": json.dumps(context.evaluation_result, default=str),
				"detailed": str(options.detailed).lower(),
				"include_examples": str(options.include_examples).lower(),
				"max_suggestions": str(options.max_suggestions),
			})

			stage = PipelineStage.INVOKING
			text = await self.gateway.invoke(prompt, model_config, options.timeout or self.default_timeout_ms)

			stage = PipelineStage.PARSING
			raw = parse_model_output(text)

			stage = PipelineStage.FORMATTING
			categories = list(context.criteria_scores) or None
			feedback = format_feedback(raw, attempt.id, categories)
		except Exception as err:
			logger.warning("feedback for attempt %s failed during %s: %s", attempt.id, stage.value, err)
			raise FeedbackError(stage.value, err) from err
		return feedback
