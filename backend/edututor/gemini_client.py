from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .errors import UpstreamUnavailable
from .schemas import GenerationConfig
from .settings import Settings, settings as default_settings

class GeminiClient:
	"""Model provider backed by the Gemini REST API.

	``complete`` is the only capability the orchestrator relies on. When an
	OpenRouter key is configured, failed Gemini calls are retried there once.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		settings: Optional[Settings] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		cfg = settings or default_settings
		self.api_key = api_key or cfg.gemini_api_key
		self.model = model or cfg.gemini_model
		self.provider = cfg.gemini_provider
		if self.provider == "vertex":
			region = cfg.vertex_region
			project = cfg.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = http_client or httpx.AsyncClient(timeout=cfg.model_timeout_seconds)
		self._fallback_enabled = bool(cfg.openrouter_api_key)
		self._openrouter_api_key = cfg.openrouter_api_key
		self._openrouter_model = cfg.openrouter_model
		self._openrouter_base_url = cfg.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": cfg.openrouter_referer,
			"X-Title": cfg.openrouter_title,
		}

	@property
	def configured(self) -> bool:
		return bool(self.api_key) or self._fallback_enabled

	async def complete(self, prompt: str, config: Optional[GenerationConfig] = None) -> str:
		config = config or GenerationConfig()
		if not self.api_key:
			if self._fallback_enabled:
				return await self._fallback_generate(prompt, config, None)
			raise UpstreamUnavailable("GEMINI_API_KEY is not configured")
		payload: Dict[str, Any] = {
			"contents": [{"parts": [{"text": prompt}]}],
			"generationConfig": config.to_gemini(),
		}
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		last_error: Optional[Exception] = None
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			last_error = http_err
		except httpx.RequestError as net_err:
			last_error = net_err
		if last_error is None:
			try:
				data = r.json()
				return data["candidates"][0]["content"]["parts"][0]["text"]
			except Exception:
				last_error = UpstreamUnavailable(f"Unexpected Gemini response: {r.text[:500]}")
		if not self._fallback_enabled:
			raise UpstreamUnavailable(f"Gemini call failed: {last_error}") from last_error
		return await self._fallback_generate(prompt, config, last_error)

	async def aclose(self) -> None:
		await self._client.aclose()

	async def _fallback_generate(self, prompt: str, config: GenerationConfig, primary_error: Optional[Exception]) -> str:
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		payload: Dict[str, Any] = {
			"model": self._openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
			"temperature": config.temperature,
			"top_p": config.top_p,
			"top_k": config.top_k,
			"max_tokens": config.max_output_tokens,
		}
		try:
			r = await self._client.post(
				self._openrouter_base_url,
				headers=headers,
				json=payload,
			)
			r.raise_for_status()
			data = r.json()
			return data["choices"][0]["message"]["content"]
		except Exception as fallback_err:
			if primary_error is not None:
				raise UpstreamUnavailable(
					f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed"
				) from fallback_err
			raise UpstreamUnavailable(f"OpenRouter call failed: {fallback_err}") from fallback_err
