"""Response cache tests."""
import pytest

from chronos_ai.cache import make_cache_key, name_signature


class Counter:
    def __init__(self, value="payload"):
        self.calls = 0
        self.value = value

    async def __call__(self):
        self.calls += 1
        return f"{self.value}-{self.calls}"


@pytest.mark.asyncio
async def test_hit_within_ttl_skips_compute(cache, clock):
    compute = Counter()

    first, first_hit = await cache.get_or_compute("ideas:abc", compute)
    clock.advance(299)
    second, second_hit = await cache.get_or_compute("ideas:abc", compute)

    assert (first, first_hit) == ("payload-1", False)
    assert (second, second_hit) == ("payload-1", True)
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_expired_entry_recomputes_once(cache, clock):
    compute = Counter()
    await cache.get_or_compute("scene:abc", compute)

    clock.advance(300)
    payload, hit = await cache.get_or_compute("scene:abc", compute)
    again, again_hit = await cache.get_or_compute("scene:abc", compute)

    assert (payload, hit) == ("payload-2", False)
    assert (again, again_hit) == ("payload-2", True)
    assert compute.calls == 2


@pytest.mark.asyncio
async def test_expired_entries_are_not_purged_eagerly(cache, clock):
    cache.set("voice:abc", "old")
    clock.advance(1000)

    assert cache.get("voice:abc") is None
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_failed_compute_is_not_cached(cache):
    async def boom():
        raise RuntimeError("provider down")

    with pytest.raises(RuntimeError):
        await cache.get_or_compute("gaps:abc", boom)

    compute = Counter()
    payload, hit = await cache.get_or_compute("gaps:abc", compute)
    assert (payload, hit) == ("payload-1", False)


def test_keys_are_hashed_and_prefixed():
    key = make_cache_key("ideas", "Aria", "character", "A" * 50)

    assert key.startswith("ideas:")
    assert "Aria" not in key
    assert key == make_cache_key("ideas", "Aria", "character", "A" * 50)
    assert key != make_cache_key("ideas", "Aria", "location", "A" * 50)


def test_limit_bounds_each_part():
    assert make_cache_key("chapter", "x" * 300, limit=200) == make_cache_key("chapter", "x" * 250, limit=200)


def test_name_signature_is_order_independent_and_bounded():
    assert name_signature(["b", "a"]) == name_signature(["a", "b"]) == "a,b"
    assert len(name_signature(["n" * 80, "m" * 80])) == 100
