"""
Model Invocation Gateway
========================

Sends one inference request per attempt, races it against a per-attempt
timeout and retries failed attempts with a pluggable backoff policy.

The gateway is stateless: the injected transport is only read from, so one
instance can be shared across concurrent evaluations.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol

from .errors import GatewayError, InferenceTimeoutError
from .inference_client import extract_content
from .model_config import ModelConfig
from .schemas import BackoffStrategy

logger = logging.getLogger(__name__)


class InferenceTransport(Protocol):
	async def complete(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class BackoffPolicy:
	"""Delay between gateway attempts.

	Attributes:
		strategy: How the delay grows with the attempt number.
		base_delay_ms: Delay unit; LINEAR waits ``base_delay_ms * attempt``.
		multiplier: Growth factor for EXPONENTIAL and JITTER.
		max_delay_ms: Upper bound applied to every strategy.
		jitter_range: Fractional spread for JITTER (0.1 = +/-10%).
	"""

	strategy: BackoffStrategy = BackoffStrategy.LINEAR
	base_delay_ms: float = 100
	multiplier: float = 2.0
	max_delay_ms: float = 5000
	jitter_range: float = 0.1

	def delay_ms(self, attempt: int) -> float:
		"""Delay in milliseconds after the 1-based ``attempt`` failed."""
		if self.strategy == BackoffStrategy.FIXED:
			delay = self.base_delay_ms
		elif self.strategy == BackoffStrategy.LINEAR:
			delay = self.base_delay_ms * attempt
		elif self.strategy == BackoffStrategy.EXPONENTIAL:
			delay = self.base_delay_ms * (self.multiplier ** (attempt - 1))
		elif self.strategy == BackoffStrategy.JITTER:
			base = self.base_delay_ms * (self.multiplier ** (attempt - 1))
			delay = base * (1 + random.uniform(-self.jitter_range, self.jitter_range))
		else:
			delay = self.base_delay_ms
		return max(0.0, min(delay, self.max_delay_ms))


def build_request(prompt: str, model_config: ModelConfig) -> Dict[str, Any]:
	return {
		"messages": [{"role": "system", "content": prompt}],
		"model": model_config.model,
		"temperature": model_config.temperature,
		"max_tokens": model_config.max_tokens,
		"top_p": model_config.top_p,
		"presence_penalty": model_config.presence_penalty,
		"frequency_penalty": model_config.frequency_penalty,
	}


class ModelGateway:
	def __init__(
		self,
		client: InferenceTransport,
		*,
		max_retries: int = 3,
		backoff: Optional[BackoffPolicy] = None,
		sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
	) -> None:
		if max_retries < 1:
			raise ValueError("max_retries must be at least 1")
		self.client = client
		# Total attempts, including the first
		self.max_retries = max_retries
		self.backoff = backoff or BackoffPolicy()
		self._sleep = sleep

	async def invoke(self, prompt: str, model_config: ModelConfig, timeout_ms: int) -> str:
		"""Return the raw completion text for ``prompt``.

		Each attempt is cancelled when ``timeout_ms`` elapses. Raises
		``GatewayError`` wrapping the last failure once every attempt is used.
		"""
		payload = build_request(prompt, model_config)
		last_error: Optional[BaseException] = None
		for attempt in range(1, self.max_retries + 1):
			try:
				completion = await self._attempt(payload, timeout_ms)
				return extract_content(completion)
			except asyncio.CancelledError:
				raise
			except Exception as err:
				last_error = err
				logger.warning(
					"inference attempt %d/%d failed (model=%s): %s",
					attempt, self.max_retries, model_config.model, err,
				)
			if attempt < self.max_retries:
				await self._sleep(self.backoff.delay_ms(attempt) / 1000.0)
		logger.error("inference failed after %d attempts", self.max_retries)
		raise GatewayError(self.max_retries, last_error) from last_error

	async def _attempt(self, payload: Dict[str, Any], timeout_ms: int) -> Dict[str, Any]:
		try:
			return await asyncio.wait_for(self.client.complete(payload), timeout=timeout_ms / 1000.0)
		except asyncio.TimeoutError:
			raise InferenceTimeoutError(timeout_ms) from None
