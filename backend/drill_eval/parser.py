from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .errors import ParseError
from .schemas import RawModelOutput

_FENCE_RX = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_OBJECT_RX = re.compile(r"\{[\s\S]*\}")


def _extract_json_block(text: str) -> Dict[str, Any]:
	"""Extract a JSON object from model output.

	Tries the whole text first, then the span between the first ``{`` and the
	last ``}`` to tolerate prose or markdown fences around the payload.

	Raises:
		ParseError: If no JSON object can be decoded.
	"""
	candidate = _FENCE_RX.sub("", text.strip())
	try:
		data = json.loads(candidate)
	except ValueError:
		match = _OBJECT_RX.search(candidate)
		if not match:
			raise ParseError("Failed to parse AI response: no JSON object found") from None
		try:
			data = json.loads(match.group(0))
		except ValueError as err:
			raise ParseError(f"Failed to parse AI response: {err}") from None
	if not isinstance(data, dict):
		raise ParseError(f"Failed to parse AI response: expected a JSON object, got {type(data).__name__}")
	return data


def parse_model_output(text: Optional[str]) -> RawModelOutput:
	"""Decode raw inference text into an unverified ``RawModelOutput``.

	Only syntax is checked here; scores and narrative fields are validated by
	the score aggregator and feedback formatter.
	"""
	if not isinstance(text, str) or not text.strip():
		raise ParseError("Invalid AI response format: empty content")
	data = _extract_json_block(text)
	try:
		return RawModelOutput.model_validate(data)
	except ValidationError as err:
		raise ParseError(f"Failed to parse AI response: {err.error_count()} invalid fields") from err
