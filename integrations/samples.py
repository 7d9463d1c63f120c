"""Scrapes sample input/output pairs from AtCoder task pages."""
import logging
import re
from typing import Any

import httpx
from bs4 import BeautifulSoup

from utils.logging import get_logger

RE_SAMPLE_HEADING = re.compile(r"^\s*(Sample Input|Sample Output|入力例|出力例)\s*(\d+)")

_KIND = {
    "Sample Input": "input",
    "入力例": "input",
    "Sample Output": "output",
    "出力例": "output",
}


def _text(pre) -> str:
    text = pre.get_text()
    # Add trailing newline, like a file on disk would have
    if not text.endswith("\n"):
        text += "\n"
    return text


def parse_samples(html: str) -> list[dict[str, Any]]:
    """Return [{"index", "input", "output"}, ...] ordered by sample number.

    Uses the English statement when the page has one, otherwise the whole task statement.
    Samples missing either half are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    root = soup.find("span", class_="lang-en") or soup.find(id="task-statement") or soup

    found: dict[int, dict[str, str]] = {}
    for heading in root.find_all("h3"):
        m = RE_SAMPLE_HEADING.match(heading.get_text(" ", strip=True))
        if not m:
            continue
        pre = heading.find_next("pre")
        if pre is None:
            continue
        found.setdefault(int(m.group(2)), {})[_KIND[m.group(1)]] = _text(pre)

    return [
        {"index": index, "input": pair["input"], "output": pair["output"]}
        for index, pair in sorted(found.items())
        if "input" in pair and "output" in pair
    ]


class RawContestProblemSampleDataProvider:
    """Fetches raw sample data for a task id in the owning problem's contest."""

    def __init__(self, manager, logger: logging.Logger | None = None):
        self.manager = manager
        self.logger = logger or get_logger(__name__)

    async def from_id(self, id: str, *, cache: bool = True, force: bool = False, all: bool = True) -> dict[str, Any]:
        client = self.manager.client
        url = client.routes.task(self.manager.problem.contest_id, id)
        html = await client.adapter.get_text(url)
        samples = parse_samples(html)
        if not all:
            samples = samples[:1]
        self.logger.info("Scraped %d samples from %s", len(samples), url)
        return {"id": id, "samples": samples}


class ContestProblemSampleDataScraper:
    """Answers whether the owning problem's page exists and shows samples."""

    def __init__(self, manager, logger: logging.Logger | None = None):
        self.manager = manager
        self.logger = logger or get_logger(__name__)

    async def exists(self) -> bool:
        problem = self.manager.problem
        r = await self.manager.client.adapter.get(problem.url)
        if r.status_code == 404:
            return False
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.logger.warning("Could not check %s: %s", problem.url, e)
            raise
        return bool(parse_samples(r.text))
