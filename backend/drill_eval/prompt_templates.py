"""
Prompt Template Registry
========================

Drill-specific prompt templates for evaluation and feedback generation.

Templates use ``{{name}}`` placeholders. Every evaluation template shares the
same variable set so the orchestrator can fill any of them:

- drill_prompt: the drill's description shown to the learner
- response: the learner's submission serialized as JSON
- criteria: one ``Category (weight%)`` line per evaluation criterion
- output_format: the JSON contract the model must answer with
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from .errors import PromptTemplateError
from .schemas import DrillType


@dataclass(frozen=True)
class PromptTemplate:
	system_prompt: str
	user_prompt_template: str
	required_variables: List[str]
	examples: Dict[str, str] = field(default_factory=dict)


_PLACEHOLDER_RX = re.compile(r"\{\{(\w+)\}\}")

EVALUATION_VARIABLES = ["drill_prompt", "response", "criteria", "output_format"]

_EVALUATION_FOOTER = """

Evaluation Criteria:
{{criteria}}

{{output_format}}"""


CASE_PROMPT_TEMPLATE = PromptTemplate(
	system_prompt="""You are an expert case interview evaluator assessing candidate responses to case prompts.
Evaluate responses based on:
- Problem structuring and framework development
- Key insights and analysis
- Communication clarity and professionalism
- Recommendations and next steps""",
	user_prompt_template="""Case Prompt: {{drill_prompt}}

Candidate Response: {{response}}""" + _EVALUATION_FOOTER,
	required_variables=EVALUATION_VARIABLES,
	examples={
		"drill_prompt": "Your client is a luxury car manufacturer considering entering the electric vehicle market...",
		"response": "I would structure this problem by examining three key areas: market opportunity, competitive landscape, and internal capabilities...",
		"criteria": "Problem Structuring (30%)\nAnalysis Quality (30%)\nCommunication (20%)\nRecommendations (20%)",
	},
)

MARKET_SIZING_TEMPLATE = PromptTemplate(
	system_prompt="""You are an expert evaluator assessing market sizing responses in case interviews.
Focus on:
- Methodology and approach
- Key assumptions and calculations
- Logic and reasoning
- Final estimate accuracy""",
	user_prompt_template="""Market Sizing Question: {{drill_prompt}}

Candidate's Approach and Calculations: {{response}}""" + _EVALUATION_FOOTER,
	required_variables=EVALUATION_VARIABLES,
	examples={
		"drill_prompt": "What is the annual market size for coffee cups in New York City?",
		"response": "Population: 8M * 60% coffee drinkers * 2 cups/day * 365 days * $0.25/cup = $876M",
	},
)

CALCULATION_TEMPLATE = PromptTemplate(
	system_prompt="""You are an expert evaluator assessing calculation accuracy and methodology in case interviews.
Evaluate:
- Mathematical accuracy
- Problem-solving approach
- Calculation efficiency
- Result interpretation""",
	user_prompt_template="""Calculation Problem: {{drill_prompt}}

Candidate's Solution: {{response}}""" + _EVALUATION_FOOTER,
	required_variables=EVALUATION_VARIABLES,
	examples={
		"drill_prompt": "Calculate the break-even point for a new product line with fixed costs of $100,000...",
		"response": "Contribution margin is $20 per unit, so break-even point = 5,000 units",
	},
)

BRAINSTORMING_TEMPLATE = PromptTemplate(
	system_prompt="""You are an expert evaluator assessing brainstorming exercises in case interviews.
Focus on:
- Creativity and innovation
- Structured thinking
- Comprehensiveness
- Practicality of ideas""",
	user_prompt_template="""Brainstorming Topic: {{drill_prompt}}

Candidate's Ideas: {{response}}""" + _EVALUATION_FOOTER,
	required_variables=EVALUATION_VARIABLES,
	examples={
		"drill_prompt": "How can a traditional bookstore compete with online retailers?",
		"response": "1. Create a unique in-store experience\n2. Develop a loyalty program...",
	},
)

SYNTHESIZING_TEMPLATE = PromptTemplate(
	system_prompt="""You are an expert evaluator assessing candidates' ability to synthesize information in case interviews.
Evaluate:
- Key insight identification
- Information prioritization
- Clarity of communication
- Strategic thinking""",
	user_prompt_template="""Case Information: {{drill_prompt}}

Candidate's Synthesis: {{response}}""" + _EVALUATION_FOOTER,
	required_variables=EVALUATION_VARIABLES,
	examples={
		"drill_prompt": "Market research shows declining customer satisfaction...",
		"response": "Based on the data, there are three key insights we should focus on...",
	},
)

FEEDBACK_TEMPLATE = PromptTemplate(
	system_prompt="""You are a case interview coach turning an evaluation into actionable feedback for a learner.
Be specific, reference the learner's own words, and keep every point short.""",
	user_prompt_template="""Learner Response: {{response}}

Criteria Scores: {{scores}}

Evaluation Summary: {{evaluation}}

Detailed per-criterion commentary requested: {{detailed}}
Include concrete examples: {{include_examples}}
Maximum suggestions per list: {{max_suggestions}}

Return ONLY a JSON object with keys:
- overall (string): overall narrative feedback
- criteria (object): one short narrative per criterion, keyed by criterion name
- improvements (array of strings): areas to improve
- strengths (array of strings): what the learner did well""",
	required_variables=["response", "scores", "evaluation", "detailed", "include_examples", "max_suggestions"],
	examples={
		"scores": '{"Structure": 80, "Analysis": 90}',
		"evaluation": '{"feedback": "Clear framework, shallow quantification."}',
	},
)

_EVALUATION_TEMPLATES: Dict[DrillType, PromptTemplate] = {
	DrillType.CASE_PROMPT: CASE_PROMPT_TEMPLATE,
	DrillType.MARKET_SIZING: MARKET_SIZING_TEMPLATE,
	DrillType.CALCULATIONS: CALCULATION_TEMPLATE,
	DrillType.CASE_MATH: CALCULATION_TEMPLATE,
	DrillType.BRAINSTORMING: BRAINSTORMING_TEMPLATE,
	DrillType.SYNTHESIZING: SYNTHESIZING_TEMPLATE,
}


def _coerce_drill_type(drill_type: DrillType | str) -> DrillType:
	try:
		return DrillType(drill_type)
	except ValueError:
		raise PromptTemplateError(f"Unsupported drill type: {drill_type}") from None


def get_prompt_template(drill_type: DrillType | str) -> PromptTemplate:
	return _EVALUATION_TEMPLATES[_coerce_drill_type(drill_type)]


def get_feedback_template(drill_type: DrillType | str) -> PromptTemplate:
	# One coaching template serves every drill type; the type is still validated
	_coerce_drill_type(drill_type)
	return FEEDBACK_TEMPLATE


def generate_prompt(template: PromptTemplate, variables: Mapping[str, str]) -> str:
	"""Fill ``template`` with ``variables``.

	Raises:
		PromptTemplateError: If any required variable is not supplied.
	"""
	missing = [v for v in template.required_variables if v not in variables]
	if missing:
		raise PromptTemplateError(f"Missing required variables: {', '.join(missing)}")
	prompt = template.system_prompt + "\n\n" + template.user_prompt_template

	# Single pass, so placeholders inside substituted learner text stay literal
	def _substitute(match: re.Match[str]) -> str:
		name = match.group(1)
		return str(variables[name]) if name in variables else match.group(0)

	return _PLACEHOLDER_RX.sub(_substitute, prompt)


def validate_template(template: PromptTemplate) -> bool:
	if not isinstance(template.system_prompt, str) or len(template.system_prompt) < 10:
		return False
	if not isinstance(template.user_prompt_template, str) or len(template.user_prompt_template) < 10:
		return False
	if not template.required_variables:
		return False
	text = template.user_prompt_template
	if any("{{" + v + "}}" not in text for v in template.required_variables):
		return False
	if not template.examples:
		return False
	return True


class PromptRegistry:
	"""Bundles template lookup and filling so the evaluator can take it as one dependency."""

	def get_prompt_template(self, drill_type: DrillType | str) -> PromptTemplate:
		return get_prompt_template(drill_type)

	def get_feedback_template(self, drill_type: DrillType | str) -> PromptTemplate:
		return get_feedback_template(drill_type)

	def generate_prompt(self, template: PromptTemplate, variables: Mapping[str, str]) -> str:
		return generate_prompt(template, variables)
