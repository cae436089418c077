from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Tuple


class RateLimiter:
	"""Sliding-window admission control for outbound model calls.

	Timestamps of admitted calls are kept oldest-first; anything older than
	``window`` seconds is pruned on every check.
	"""

	def __init__(self, max_requests: int = 10, window: float = 60.0, *, clock: Callable[[], float] = time.monotonic) -> None:
		if max_requests <= 0:
			raise ValueError("max_requests must be positive")
		if window <= 0:
			raise ValueError("window must be positive")
		self.max_requests = max_requests
		self.window = float(window)
		self._clock = clock
		self._timestamps: Deque[float] = deque()
		self._lock = threading.Lock()

	def _prune(self, now: float) -> None:
		while self._timestamps and now - self._timestamps[0] >= self.window:
			self._timestamps.popleft()

	def _retry_after(self, now: float) -> float:
		if len(self._timestamps) < self.max_requests:
			return 0.0
		return max(0.0, self.window - (now - self._timestamps[0]))

	def try_admit(self) -> Tuple[bool, float]:
		"""Admit and report the retry hint under one lock: ``(admitted, retry_after)``."""
		with self._lock:
			now = self._clock()
			self._prune(now)
			if len(self._timestamps) < self.max_requests:
				self._timestamps.append(now)
				return True, 0.0
			return False, self._retry_after(now)

	def admit(self) -> bool:
		return self.try_admit()[0]

	def time_until_next_slot(self) -> float:
		with self._lock:
			now = self._clock()
			self._prune(now)
			return self._retry_after(now)

	def __len__(self) -> int:
		with self._lock:
			self._prune(self._clock())
			return len(self._timestamps)
