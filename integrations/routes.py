"""AtCoder URLs."""
from config.settings import settings


class Routes:
    def __init__(self, base_url: str | None = None):
        self.base_url = (base_url or settings.ATCODER_BASE_URL).rstrip("/")

    @property
    def login(self) -> str:
        return f"{self.base_url}/login"

    @property
    def logout(self) -> str:
        return f"{self.base_url}/logout"

    def contest(self, contest_id: str) -> str:
        return f"{self.base_url}/contests/{contest_id}"

    def task(self, contest_id: str, task_id: str) -> str:
        return f"{self.base_url}/contests/{contest_id}/tasks/{task_id}"
