from __future__ import annotations

from typing import Any, Dict

import pytest

from drill_eval.schemas import DrillAttempt, DrillTemplate, DrillType, EvaluationCriterion


@pytest.fixture
def case_template() -> DrillTemplate:
	return DrillTemplate(
		id="drill-1",
		type=DrillType.CASE_PROMPT,
		description="Your client is a regional airline facing falling profits.",
		evaluation_criteria=[
			EvaluationCriterion(category="Structure", weight=40),
			EvaluationCriterion(category="Analysis", weight=60),
		],
	)


@pytest.fixture
def attempt() -> DrillAttempt:
	return DrillAttempt(id="attempt-1", response={"text": "I would split profits into revenue and costs."})


@pytest.fixture
def complete_output() -> Dict[str, Any]:
	return {
		"Structure": 80,
		"Analysis": 90,
		"feedback": "Clear framework with solid quantification.",
		"overall": "Strong answer overall.",
		"criteria": {"Structure": "MECE split.", "Analysis": "Good use of data."},
		"improvements": ["Prioritize branches earlier"],
		"strengths": ["Clear structure", "Numerate"],
	}
