from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from ..errors import DrillEvaluationError
from ..evaluator import DrillEvaluator
from ..schemas import (
	DrillAttempt,
	DrillFeedback,
	DrillTemplate,
	EvaluationOptions,
	EvaluationResult,
	FeedbackContext,
	FeedbackOptions,
)
from .auth import EVALUATE_DRILL, User, require_permission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drills", tags=["drills"])

UNAVAILABLE = "evaluation unavailable, retry later"


class EvaluateRequest(BaseModel):
	template: DrillTemplate
	attempt: DrillAttempt
	options: EvaluationOptions = Field(default_factory=EvaluationOptions)


class FeedbackRequest(BaseModel):
	attempt: DrillAttempt
	context: FeedbackContext
	options: FeedbackOptions = Field(default_factory=FeedbackOptions)


class EvaluationData(EvaluationResult):
	attempt_id: str


class EvaluateResponse(BaseModel):
	success: bool = True
	data: EvaluationData


class FeedbackResponse(BaseModel):
	success: bool = True
	data: DrillFeedback


def get_evaluator(request: Request) -> DrillEvaluator:
	evaluator = getattr(request.app.state, "evaluator", None)
	if evaluator is None:
		raise HTTPException(status_code=503, detail="inference service is not configured")
	return evaluator


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(
	req: EvaluateRequest,
	user: User = Depends(require_permission(EVALUATE_DRILL)),
	evaluator: DrillEvaluator = Depends(get_evaluator),
):
	try:
		result = await evaluator.evaluate_response(req.template, req.attempt, req.options)
	except DrillEvaluationError as e:
		logger.error("drill evaluation failed for user %s: %s", user.username, e)
		raise HTTPException(status_code=503, detail=UNAVAILABLE)
	return EvaluateResponse(data=EvaluationData(attempt_id=req.attempt.id, **result.model_dump()))


@router.post("/feedback", response_model=FeedbackResponse)
async def feedback(
	req: FeedbackRequest,
	user: User = Depends(require_permission(EVALUATE_DRILL)),
	evaluator: DrillEvaluator = Depends(get_evaluator),
):
	try:
		data = await evaluator.generate_feedback(req.attempt, req.context, req.options)
	except DrillEvaluationError as e:
		logger.error("feedback generation failed for user %s: %s", user.username, e)
		raise HTTPException(status_code=503, detail=UNAVAILABLE)
	return FeedbackResponse(data=data)
