"""
In-process cache for evaluation verdicts
"""

from collections import OrderedDict
from typing import Dict, Optional
import threading

from .rule_engine import EvaluationVerdict


class VerdictCache:
    """Thread-safe LRU cache of verdicts keyed by the raw input string"""

    def __init__(self, max_size: int):
        self.max_size = max_size
        self._cache: 'OrderedDict[str, EvaluationVerdict]' = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[EvaluationVerdict]:
        """Get verdict from cache"""
        with self._lock:
            if key in self._cache:
                # Move to end (most recently used)
                self._cache.move_to_end(key)
                self._hits += 1
                return self._cache[key]
            self._misses += 1
            return None

    def put(self, key: str, verdict: EvaluationVerdict):
        """Put verdict in cache"""
        if self.max_size <= 0:
            return
        with self._lock:
            self._cache[key] = verdict
            self._cache.move_to_end(key)
            # Remove oldest if over capacity
            if len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def clear(self):
        """Clear entire cache"""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> Dict[str, float]:
        """Get cache statistics"""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0
            return {
                'size': len(self._cache),
                'max_size': self.max_size,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': hit_rate
            }
