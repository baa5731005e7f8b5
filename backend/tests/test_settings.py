from __future__ import annotations

import pytest
from pydantic import ValidationError

from drill_eval.gateway import BackoffStrategy
from drill_eval.settings import Settings


def test_backoff_strategy_defaults_to_linear(monkeypatch):
	monkeypatch.delenv("EVAL_BACKOFF_STRATEGY", raising=False)
	assert Settings().eval_backoff_strategy is BackoffStrategy.LINEAR


@pytest.mark.parametrize("value", ["exponential", "EXPONENTIAL"])
def test_backoff_strategy_from_env(monkeypatch, value):
	monkeypatch.setenv("EVAL_BACKOFF_STRATEGY", value)
	assert Settings().eval_backoff_strategy is BackoffStrategy.EXPONENTIAL


def test_unknown_backoff_strategy_is_a_settings_error(monkeypatch):
	monkeypatch.setenv("EVAL_BACKOFF_STRATEGY", "quadratic")
	with pytest.raises(ValidationError, match="EVAL_BACKOFF_STRATEGY"):
		Settings()


def test_max_retries_must_be_positive(monkeypatch):
	monkeypatch.setenv("EVAL_MAX_RETRIES", "0")
	with pytest.raises(ValidationError):
		Settings()
