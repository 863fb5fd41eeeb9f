import pytest

from resume_rag.common.schemas import AnswerMode
from resume_rag.generation.answer_cache import AnswerCache, normalise_question


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_normalise_question_trims_collapses_and_lowercases():
    assert normalise_question("  What   languages\tdo I KNOW?  ") == "what languages do i know?"


def test_key_is_namespaced_by_mode():
    recommend = AnswerCache.key_for("What languages do I know?", AnswerMode.RECOMMEND)
    strict = AnswerCache.key_for("What languages do I know?", "strict")

    assert recommend == "what languages do i know?:recommend"
    assert strict == "what languages do i know?:strict"
    assert recommend != strict


def test_key_defaults_to_recommend():
    assert AnswerCache.key_for("Hi there") == "hi there:recommend"


def test_entry_is_live_until_ttl_elapses():
    clock = FakeClock()
    cache = AnswerCache(ttl_seconds=3600, clock=clock)
    cache.put("q:recommend", "answer")

    clock.now += 3600 - 0.001
    assert cache.get("q:recommend") == "answer"

    clock.now += 0.002
    assert cache.get("q:recommend") is None


def test_entry_expires_exactly_at_ttl():
    clock = FakeClock()
    cache = AnswerCache(ttl_seconds=10, clock=clock)
    cache.put("k", "v")

    clock.now += 10
    assert cache.get("k") is None
    assert "k" not in cache


def test_put_overwrites_and_refreshes_timestamp():
    clock = FakeClock()
    cache = AnswerCache(ttl_seconds=10, clock=clock)
    cache.put("k", "old")
    clock.now += 8
    cache.put("k", "new", backend="fallback")
    clock.now += 8

    entry = cache.get_entry("k")
    assert entry.answer == "new"
    assert entry.metadata == {"backend": "fallback"}


def test_expired_entries_are_not_purged():
    clock = FakeClock()
    cache = AnswerCache(ttl_seconds=1, clock=clock)
    cache.put("k", "v")
    clock.now += 5

    assert cache.get("k") is None
    assert len(cache) == 1


def test_invalidate_and_clear():
    cache = AnswerCache()
    cache.put("a", "1")
    cache.put("b", "2")

    cache.invalidate("a")
    cache.invalidate("missing")
    assert "a" not in cache
    assert "b" in cache

    cache.clear()
    assert len(cache) == 0


@pytest.mark.parametrize("ttl", [0, -1])
def test_non_positive_ttl_is_rejected(ttl):
    with pytest.raises(ValueError):
        AnswerCache(ttl_seconds=ttl)
