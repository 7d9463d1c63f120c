"""Sample test cases of one contest problem, cached per task id."""
from integrations.samples import ContestProblemSampleDataScraper, RawContestProblemSampleDataProvider
from managers.cached_manager import CachedManager
from models.problem import ContestProblemSample


class ContestProblemSampleManager(CachedManager[ContestProblemSample]):
    def __init__(self, problem, iterable=None):
        super().__init__(problem.client, ContestProblemSample, iterable)
        self.problem = problem
        self.provider = RawContestProblemSampleDataProvider(self)
        self.scraper = ContestProblemSampleDataScraper(self)

    async def fetch(self, problem, *, cache: bool = True, force: bool = False, all: bool = True) -> ContestProblemSample:
        """Return the samples for problem (a task id or a ContestProblem).

        Served from cache unless force is set. A failed provider call leaves the cache untouched.
        """
        id = self.resolve_key(problem)

        if not force:
            existing = self.cache.get(id)
            if existing is not None:
                self.logger.debug("Samples for %s served from cache", id)
                return existing

        self.logger.debug("Fetching samples for %s (force=%s)", id, force)
        data = await self.provider.from_id(id, cache=cache, force=force, all=all)
        return self._add(data, cache, id=id, extras=[self.problem])

    async def exists(self) -> bool:
        return await self.scraper.exists()
