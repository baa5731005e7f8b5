from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .errors import InferenceRequestError
from .settings import settings

class InferenceClient:
	"""Async client for an OpenAI-compatible chat completions endpoint.

	Holds no per-request state, so a single instance can serve concurrent
	evaluations. Pass ``http_client`` to share or mock the transport.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		timeout: Optional[float] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self.api_key = api_key or settings.inference_api_key
		if not self.api_key:
			raise ValueError("INFERENCE_API_KEY is not configured")
		self.base_url = base_url or settings.inference_base_url
		self._headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		self._owns_client = http_client is None
		self._client = http_client or httpx.AsyncClient(timeout=timeout or settings.inference_http_timeout)

	async def complete(self, payload: Dict[str, Any]) -> Dict[str, Any]:
		try:
			r = await self._client.post(self.base_url, headers=self._headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise InferenceRequestError(
				f"inference service returned HTTP {http_err.response.status_code}",
				status_code=http_err.response.status_code,
			) from http_err
		except httpx.RequestError as net_err:
			raise InferenceRequestError(f"inference service unreachable: {net_err}") from net_err
		try:
			data = r.json()
		except ValueError as err:
			raise InferenceRequestError(f"Unexpected inference response: {r.text[:200]}") from err
		if not isinstance(data, dict):
			raise InferenceRequestError(f"Unexpected inference response: {r.text[:200]}")
		return data

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()


def extract_content(completion: Dict[str, Any]) -> str:
	"""Return ``choices[0].message.content`` or an empty string when absent."""
	try:
		content = completion["choices"][0]["message"]["content"]
	except (KeyError, IndexError, TypeError):
		return ""
	return content if isinstance(content, str) else ""
