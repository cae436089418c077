from __future__ import annotations


class TutorError(Exception):
	"""Base class for errors raised by the orchestration layer."""


class InvalidArgument(TutorError, ValueError):
	"""Bad caller input. Raised before any cache, rate-limit or model step."""


class RateLimited(TutorError):
	def __init__(self, retry_after: float) -> None:
		self.retry_after = max(0.0, float(retry_after))
		super().__init__(f"rate limit exceeded, retry in {self.retry_after:.1f}s")


class UpstreamUnavailable(TutorError):
	"""The model provider failed. Always converted to fallback content by the orchestrator."""
