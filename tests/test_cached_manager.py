import pytest

from managers.cached_manager import CachedManager, ResourceCache
from models.problem import ContestProblemSample, Sample
from utils.errors import ResolutionError


class CountingProvider:
    def __init__(self):
        self.calls: list[tuple] = []

    async def from_id(self, id, *, cache=True, force=False, all=True):
        self.calls.append((id, cache, force, all))
        return {"id": id, "samples": [{"index": 1, "input": "1 2\n", "output": "3\n"}]}


class FailingProvider:
    async def from_id(self, id, **options):
        raise RuntimeError("boom")


class StubScraper:
    def __init__(self, answer):
        self.answer = answer
        self.calls = 0

    async def exists(self):
        self.calls += 1
        return self.answer


@pytest.fixture
def problem(make_client):
    return make_client().problem("ABC300", "abc300_a")


@pytest.fixture
def provider(problem):
    provider = CountingProvider()
    problem.samples.provider = provider
    return provider


@pytest.mark.asyncio
async def test_second_fetch_is_served_from_cache(problem, provider):
    first = await problem.samples.fetch("abc300_a")
    second = await problem.samples.fetch("abc300_a")

    assert first is second
    assert len(provider.calls) == 1
    assert isinstance(first, ContestProblemSample)
    assert first.problem is problem
    assert first.samples == [Sample(index=1, input="1 2\n", output="3\n")]


@pytest.mark.asyncio
async def test_force_refetches_and_replaces(problem, provider):
    first = await problem.samples.fetch("abc300_a")

    forced = await problem.samples.fetch("abc300_a", force=True)

    assert forced is not first
    assert len(provider.calls) == 2
    assert provider.calls[1] == ("abc300_a", True, True, True)
    assert problem.samples.cache.get("abc300_a") is forced
    assert len(problem.samples.cache) == 1


@pytest.mark.asyncio
async def test_identifiers_are_case_insensitive(problem, provider):
    upper = await problem.samples.fetch("ABC300_A")
    lower = await problem.samples.fetch("abc300_a")

    assert upper is lower
    assert list(problem.samples.cache) == ["abc300_a"]
    assert provider.calls[0][0] == "abc300_a"


@pytest.mark.asyncio
async def test_fetch_accepts_the_problem_object(problem, provider):
    samples = await problem.samples.fetch(problem)

    assert samples.id == "abc300_a"


@pytest.mark.asyncio
async def test_cache_false_does_not_store(problem, provider):
    samples = await problem.samples.fetch("abc300_a", cache=False)

    assert samples.id == "abc300_a"
    assert "abc300_a" not in problem.samples.cache
    await problem.samples.fetch("abc300_a")
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_force_without_cache_keeps_old_entry(problem, provider):
    cached = await problem.samples.fetch("abc300_a")

    await problem.samples.fetch("abc300_a", force=True, cache=False)

    assert problem.samples.cache.get("abc300_a") is cached


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [None, "", "   ", object(), 3.5])
async def test_unresolvable_identifier(problem, provider, bad):
    with pytest.raises(ResolutionError) as exc:
        await problem.samples.fetch(bad)

    assert exc.value.code == "RESOLUTION_ERROR"
    assert provider.calls == []


@pytest.mark.asyncio
async def test_provider_errors_propagate_and_cache_nothing(problem):
    problem.samples.provider = FailingProvider()

    with pytest.raises(RuntimeError, match="boom"):
        await problem.samples.fetch("abc300_a")

    assert len(problem.samples.cache) == 0


@pytest.mark.asyncio
async def test_exists_delegates_without_touching_cache(problem, provider):
    scraper = StubScraper(True)
    problem.samples.scraper = scraper

    assert await problem.samples.exists() is True
    assert scraper.calls == 1
    assert len(problem.samples.cache) == 0
    assert provider.calls == []


def test_initial_iterable_is_cached_under_normalized_ids():
    manager = CachedManager(
        client=None,
        holds=ContestProblemSample,
        iterable=[{"id": "ABC300_B", "samples": []}],
    )

    assert "abc300_b" in manager.cache
    assert manager.cache.get("abc300_b").problem is None


def test_resource_cache_overwrites_and_deletes():
    cache = ResourceCache()
    cache.set("a", 1)
    cache.set("a", 2)

    assert cache.get("a") == 2
    assert len(cache) == 1
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    assert cache.get("a") is None
