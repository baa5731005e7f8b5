from __future__ import annotations

import pytest

from drill_eval.errors import ModelConfigError
from drill_eval.model_config import (
	DEFAULT_MODEL_CONFIG,
	DRILL_MODEL_CONFIGS,
	FEEDBACK_MODEL_CONFIG,
	ModelConfigProvider,
	validate_model_config,
)
from drill_eval.schemas import DrillType


@pytest.mark.parametrize("drill_type", list(DrillType))
def test_builtin_configs_are_valid(drill_type):
	config = ModelConfigProvider().get_model_config(drill_type)
	assert config == DRILL_MODEL_CONFIGS[drill_type]
	assert validate_model_config(config)


def test_drill_specific_overrides():
	provider = ModelConfigProvider()
	assert provider.get_model_config("CALCULATIONS").temperature == 0.2
	assert provider.get_model_config(DrillType.BRAINSTORMING).frequency_penalty == 0.3
	assert provider.get_model_config(DrillType.SYNTHESIZING).max_tokens == 4096


def test_missing_override_falls_back_to_default():
	provider = ModelConfigProvider({})
	assert provider.get_model_config(DrillType.CASE_PROMPT) == DEFAULT_MODEL_CONFIG


def test_unknown_drill_type():
	with pytest.raises(ModelConfigError, match="Invalid drill category"):
		ModelConfigProvider().get_model_config("ROLE_PLAY")


def test_feedback_config():
	assert ModelConfigProvider().get_feedback_config() == FEEDBACK_MODEL_CONFIG


@pytest.mark.parametrize(
	"update",
	[
		{"model": "davinci"},
		{"temperature": 1.5},
		{"temperature": -0.1},
		{"max_tokens": 0},
		{"max_tokens": 9000},
		{"top_p": 1.1},
		{"presence_penalty": 2.5},
		{"frequency_penalty": -3},
	],
)
def test_validate_model_config_rejects(update):
	assert not validate_model_config(DEFAULT_MODEL_CONFIG.model_copy(update=update))


def test_invalid_override_is_rejected():
	provider = ModelConfigProvider({DrillType.CASE_PROMPT: DEFAULT_MODEL_CONFIG.model_copy(update={"temperature": 3})})
	with pytest.raises(ModelConfigError, match="CASE_PROMPT"):
		provider.get_model_config(DrillType.CASE_PROMPT)
