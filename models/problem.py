"""Contest problems and their sample test cases."""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Sample:
    index: int
    input: str
    output: str


class ContestProblem:
    """A task of a contest, e.g. contest ``abc300`` / task ``abc300_a``."""

    def __init__(self, client, contest_id: str, task_id: str):
        from managers.contest_problem_samples import ContestProblemSampleManager

        self.client = client
        self.contest_id = contest_id.lower()
        self.id = task_id.lower()
        self.samples = ContestProblemSampleManager(self)

    @property
    def url(self) -> str:
        return self.client.routes.task(self.contest_id, self.id)

    def __repr__(self) -> str:
        return f"<ContestProblem {self.contest_id}/{self.id}>"


class ContestProblemSample:
    """All sample input/output pairs of one problem. Built from provider data plus the owning problem."""

    def __init__(self, client, data: dict[str, Any], problem: ContestProblem | None = None):
        self.client = client
        self.problem = problem
        self.id = data["id"]
        self.samples = [
            Sample(index=int(s.get("index", i + 1)), input=s["input"], output=s["output"])
            for i, s in enumerate(data.get("samples") or [])
        ]

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __repr__(self) -> str:
        return f"<ContestProblemSample {self.id} ({len(self.samples)} samples)>"
