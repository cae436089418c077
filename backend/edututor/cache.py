from __future__ import annotations

import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def make_cache_key(operation: str, *args: Any) -> str:
	"""Deterministic key from an operation name and its positional arguments.

	Arguments are serialized as a JSON array so order is kept and ``None`` never
	collides with the string ``"None"``.
	"""
	return f"{operation}:{json.dumps(list(args), sort_keys=True, ensure_ascii=False, default=str)}"


@dataclass
class CacheEntry(Generic[T]):
	data: T
	timestamp: float


class ResponseCache(Generic[T]):
	"""Time-bounded memoization with lazy expiry on read.

	With ``max_entries`` unset the cache grows without bound; when set, least
	recently used entries are dropped on insert.
	"""

	def __init__(
		self,
		timeout: float = 300.0,
		*,
		max_entries: Optional[int] = None,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		if timeout <= 0:
			raise ValueError("timeout must be positive")
		if max_entries is not None and max_entries <= 0:
			raise ValueError("max_entries must be positive")
		self.timeout = float(timeout)
		self.max_entries = max_entries
		self._clock = clock
		self._entries: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
		self._lock = threading.Lock()

	def get(self, key: str) -> Optional[T]:
		with self._lock:
			entry = self._entries.get(key)
			if entry is None:
				return None
			if self._clock() - entry.timestamp >= self.timeout:
				del self._entries[key]
				logger.debug("Cache entry expired: %s", key)
				return None
			self._entries.move_to_end(key)
			return entry.data

	def set(self, key: str, data: T) -> None:
		with self._lock:
			self._entries[key] = CacheEntry(data=data, timestamp=self._clock())
			self._entries.move_to_end(key)
			if self.max_entries is not None:
				while len(self._entries) > self.max_entries:
					evicted, _ = self._entries.popitem(last=False)
					logger.debug("Cache entry evicted: %s", evicted)

	def clear(self) -> None:
		with self._lock:
			self._entries.clear()

	def __len__(self) -> int:
		return len(self._entries)

	def __contains__(self, key: str) -> bool:
		return self.get(key) is not None
