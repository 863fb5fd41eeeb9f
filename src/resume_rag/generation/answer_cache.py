"""resume_rag.generation.answer_cache

Process-lifetime memoization of generated answers.

Entries are keyed by the normalised question namespaced by answer mode, so a
``strict`` and a ``recommend`` answer to the same question never collide.
An entry is valid while ``now - stored_at < ttl``. Expired entries are
ignored on read but never purged, so the map grows for the life of the
process.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from resume_rag.common.schemas import AnswerMode

DEFAULT_TTL_SECONDS = 60 * 60

_WHITESPACE = re.compile(r"\s+")


@dataclass
class CacheEntry:
    """A cached answer and the clock reading at which it was stored."""
    answer: str
    stored_at: float
    metadata: Dict[str, Any] = field(default_factory=dict)


def normalise_question(question: str) -> str:
    """Trim, collapse whitespace and lowercase ``question``."""
    return _WHITESPACE.sub(" ", (question or "").strip()).lower()


class AnswerCache:
    """In-memory answer cache with time-based expiry.

    Parameters
    ----------
    ttl_seconds : float, optional
        Maximum entry age. Defaults to one hour.
    clock : Callable[[], float], optional
        Returns the current time in seconds. Defaults to :func:`time.monotonic`.
    """

    def __init__(
            self,
            ttl_seconds: float = DEFAULT_TTL_SECONDS,
            clock: Callable[[], float] = time.monotonic,
        ):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds!r}")
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def key_for(question: str, mode: AnswerMode | str = AnswerMode.RECOMMEND) -> str:
        """Build the cache key for ``question`` answered in ``mode``.

        Examples
        --------
        >>> AnswerCache.key_for("  What languages do I know? ", "recommend")
        'what languages do i know?:recommend'
        """
        return f"{normalise_question(question)}:{AnswerMode.parse(mode).value}"

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for ``key``, or ``None`` if absent or stale."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            return None
        return entry

    def get(self, key: str) -> Optional[str]:
        """Return the cached answer for ``key``, or ``None`` if absent or stale."""
        entry = self.get_entry(key)
        return entry.answer if entry is not None else None

    def put(self, key: str, answer: str, **metadata: Any) -> None:
        """Store ``answer`` under ``key``, replacing any previous entry."""
        self._entries[key] = CacheEntry(answer=answer, stored_at=self._clock(), metadata=metadata)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get_entry(key) is not None


__all__ = ["DEFAULT_TTL_SECONDS", "AnswerCache", "CacheEntry", "normalise_question"]
