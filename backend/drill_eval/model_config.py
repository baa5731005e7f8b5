from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict

from .errors import ModelConfigError
from .schemas import DrillType


class ModelConfig(BaseModel):
	model_config = ConfigDict(frozen=True)

	model: str
	temperature: float
	max_tokens: int
	top_p: float
	presence_penalty: float
	frequency_penalty: float


SUPPORTED_MODELS: Dict[str, int] = {
	# model -> max_tokens limit
	"gpt-4": 8192,
	"gpt-4-32k": 32768,
	"gpt-3.5-turbo": 4096,
	"gpt-4o": 16384,
	"gpt-4o-mini": 16384,
}

DEFAULT_MODEL_CONFIG = ModelConfig(
	model="gpt-4",
	temperature=0.7,
	max_tokens=2048,
	top_p=1.0,
	presence_penalty=0.0,
	frequency_penalty=0.0,
)

# Low temperature for arithmetic drills, high for open-ended ideation
DRILL_MODEL_CONFIGS: Dict[DrillType, ModelConfig] = {
	DrillType.CASE_PROMPT: DEFAULT_MODEL_CONFIG.model_copy(update={"temperature": 0.8, "max_tokens": 3072, "presence_penalty": 0.1}),
	DrillType.CALCULATIONS: DEFAULT_MODEL_CONFIG.model_copy(update={"temperature": 0.2, "max_tokens": 1024, "presence_penalty": 0.2}),
	DrillType.CASE_MATH: DEFAULT_MODEL_CONFIG.model_copy(update={"temperature": 0.3, "max_tokens": 1536, "presence_penalty": 0.1}),
	DrillType.BRAINSTORMING: DEFAULT_MODEL_CONFIG.model_copy(update={"temperature": 0.9, "max_tokens": 2048, "presence_penalty": 0.2, "frequency_penalty": 0.3}),
	DrillType.MARKET_SIZING: DEFAULT_MODEL_CONFIG.model_copy(update={"temperature": 0.6, "max_tokens": 2048, "presence_penalty": 0.1}),
	DrillType.SYNTHESIZING: DEFAULT_MODEL_CONFIG.model_copy(update={"temperature": 0.7, "max_tokens": 4096, "presence_penalty": 0.15, "frequency_penalty": 0.1}),
}

FEEDBACK_MODEL_CONFIG = ModelConfig(
	model="gpt-4",
	temperature=0.7,
	max_tokens=1000,
	top_p=1.0,
	presence_penalty=0.1,
	frequency_penalty=0.1,
)


def validate_model_config(config: ModelConfig) -> bool:
	limit = SUPPORTED_MODELS.get(config.model)
	if limit is None:
		return False
	if not 0 <= config.temperature <= 1:
		return False
	if not 0 < config.max_tokens <= limit:
		return False
	if not 0 <= config.top_p <= 1:
		return False
	if not -2 <= config.presence_penalty <= 2:
		return False
	if not -2 <= config.frequency_penalty <= 2:
		return False
	return True


class ModelConfigProvider:
	"""Resolves inference parameters per drill type."""

	def __init__(self, configs: Dict[DrillType, ModelConfig] | None = None, *, feedback_config: ModelConfig = FEEDBACK_MODEL_CONFIG) -> None:
		self._configs = dict(DRILL_MODEL_CONFIGS if configs is None else configs)
		self._feedback_config = feedback_config

	def get_model_config(self, drill_type: DrillType | str) -> ModelConfig:
		try:
			key = DrillType(drill_type)
		except ValueError:
			raise ModelConfigError(f"Invalid drill category: {drill_type}") from None
		config = self._configs.get(key, DEFAULT_MODEL_CONFIG)
		if not validate_model_config(config):
			raise ModelConfigError(f"Invalid model configuration for category: {key.value}")
		return config

	def get_feedback_config(self) -> ModelConfig:
		if not validate_model_config(self._feedback_config):
			raise ModelConfigError("Invalid model configuration for feedback generation")
		return self._feedback_config
