"""Fixtures for unit tests."""

import logging
from types import SimpleNamespace
from typing import Any, Callable, Generator

import pytest
import structlog
from githubkit.utils import UNSET

from superstitious.schemas.config import SuperstitiousConfig
from superstitious.utils.github import is_pull_request


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


class FakeTracker:
    """In-memory stand-in for GitHubKitAdapter.

    Issues and pull requests share one number sequence, like on GitHub, and
    the issues listing includes pull requests. Plain issues leave
    ``pull_request`` as githubkit's UNSET sentinel. Every mutating call is recorded
    in ``writes`` so tests can assert that nothing was changed.
    """

    def __init__(self, owner: str = "owner", repo_name: str = "repo") -> None:
        self.owner = owner
        self.repo_name = repo_name
        self.items: dict[int, SimpleNamespace] = {}
        self.comments: dict[int, list[str]] = {}
        self.writes: list[tuple[str, int]] = []
        self.counter = 1
        # Organic issues opened by someone else just before each create_issue call.
        self.concurrent_issues_per_create = 0
        # Number of upcoming create_issue calls that should fail.
        self.failing_creates = 0
        self.failing_create_titles: set[str] = set()
        self.failing_comment_numbers: set[int] = set()
        self.failing_update_numbers: set[int] = set()
        self.read_error: Exception | None = None

    # Helpers for arranging state
    def _store(self, number: int | None, **fields: Any) -> SimpleNamespace:
        if number is None:
            number = self.counter
        self.counter = max(self.counter, number + 1)
        item = SimpleNamespace(number=number, **fields)
        self.items[number] = item
        return item

    def add_issue(
        self,
        number: int | None = None,
        title: str = "An issue",
        body: str | None = "Issue body",
        labels: list[str] | None = None,
        assignees: list[str] | None = None,
        milestone: int | None = None,
        state: str = "open",
    ) -> SimpleNamespace:
        item = self._store(
            number,
            title=title,
            body=body,
            labels=[SimpleNamespace(name=label) for label in labels or []],
            assignees=[SimpleNamespace(login=login) for login in assignees or []],
            milestone=SimpleNamespace(number=milestone) if milestone is not None else None,
            state=state,
            pull_request=UNSET,
            user=SimpleNamespace(login="reporter"),
        )
        item.html_url = f"https://github.com/{self.owner}/{self.repo_name}/issues/{item.number}"
        return item

    def add_pull_request(
        self,
        number: int | None = None,
        title: str = "A pull request",
        body: str | None = "PR body",
        author: str = "contributor",
        labels: list[str] | None = None,
        state: str = "open",
    ) -> SimpleNamespace:
        item = self._store(
            number,
            title=title,
            body=body,
            labels=[SimpleNamespace(name=label) for label in labels or []],
            assignees=[],
            milestone=None,
            state=state,
            user=SimpleNamespace(login=author),
        )
        item.pull_request = SimpleNamespace(url=f"https://api.github.com/repos/{self.owner}/{self.repo_name}/pulls/{item.number}")
        item.html_url = f"https://github.com/{self.owner}/{self.repo_name}/pull/{item.number}"
        return item

    def seed_counter(self, next_number: int) -> None:
        """Make next_number the number the repository would assign next."""
        if next_number > 1:
            self.add_issue(number=next_number - 1, title="Existing issue", state="closed")

    def _check_read(self) -> None:
        if self.read_error is not None:
            raise self.read_error

    @property
    def issues(self) -> list[SimpleNamespace]:
        return [item for item in self.items.values() if not is_pull_request(item)]

    @property
    def next_assignable_number(self) -> int:
        return max(self.items, default=0) + 1

    # Reads
    async def list_issues(self, state: str = "all", **kwargs: Any) -> list[SimpleNamespace]:
        self._check_read()
        return [item for number, item in sorted(self.items.items()) if state == "all" or item.state == state]

    async def list_pull_requests(self, state: str = "all", **kwargs: Any) -> list[SimpleNamespace]:
        self._check_read()
        return [item for item in await self.list_issues(state) if is_pull_request(item)]

    async def get_latest_issue_number(self) -> int | None:
        self._check_read()
        return max(self.items, default=None)

    async def get_latest_pull_request_number(self) -> int | None:
        self._check_read()
        return max((number for number, item in self.items.items() if is_pull_request(item)), default=None)

    # Writes
    async def create_issue(
        self,
        title: str,
        body: str | None = None,
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
        milestone: str | int | None = None,
        **kwargs: Any,
    ) -> SimpleNamespace:
        if self.failing_creates > 0:
            self.failing_creates -= 1
            raise RuntimeError("create failed")
        if title in self.failing_create_titles:
            raise RuntimeError(f"create failed for {title}")
        for _ in range(self.concurrent_issues_per_create):
            self.add_issue(title="Organic issue")
        issue = self.add_issue(title=title, body=body, labels=labels, assignees=assignees, milestone=milestone)  # type: ignore[arg-type]
        self.writes.append(("create_issue", issue.number))
        return issue

    async def update_issue(
        self,
        issue_number: int,
        title: str | None = None,
        body: str | None = None,
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
        milestone: str | int | None = None,
        state: str | None = None,
        **kwargs: Any,
    ) -> SimpleNamespace:
        if issue_number in self.failing_update_numbers:
            raise RuntimeError(f"update failed for #{issue_number}")
        item = self.items[issue_number]
        if title is not None:
            item.title = title
        if body is not None:
            item.body = body
        if labels is not None:
            item.labels = [SimpleNamespace(name=label) for label in labels]
        if state is not None:
            item.state = state
        self.writes.append(("update_issue", issue_number))
        return item

    async def update_pull_request(
        self,
        pull_number: int,
        title: str | None = None,
        body: str | None = None,
        state: str | None = None,
        **kwargs: Any,
    ) -> SimpleNamespace:
        if pull_number in self.failing_update_numbers:
            raise RuntimeError(f"update failed for #{pull_number}")
        item = self.items[pull_number]
        if title is not None:
            item.title = title
        if state is not None:
            item.state = state
        self.writes.append(("update_pull_request", pull_number))
        return item

    async def create_issue_comment(self, issue_number: int, body: str) -> SimpleNamespace:
        if issue_number in self.failing_comment_numbers:
            raise RuntimeError(f"comment failed for #{issue_number}")
        self.comments.setdefault(issue_number, []).append(body)
        self.writes.append(("create_issue_comment", issue_number))
        return SimpleNamespace(body=body)


def label_names(item: Any) -> list[str]:
    """Return the label names of a fake item."""
    return [label.name for label in item.labels]


@pytest.fixture
def tracker() -> FakeTracker:
    """An empty fake repository."""
    return FakeTracker()


@pytest.fixture
def label_names_of() -> Any:
    """Helper returning the label names of a fake item."""
    return label_names


@pytest.fixture
def default_config() -> SuperstitiousConfig:
    """The built-in configuration."""
    return SuperstitiousConfig()


@pytest.fixture
def log_events(caplog: pytest.LogCaptureFixture) -> Callable[[], list[dict[str, Any]]]:
    """Capture INFO logs; the returned helper lists the structlog event dicts logged so far."""
    caplog.set_level(logging.INFO)

    def events() -> list[dict[str, Any]]:
        return [record.msg for record in caplog.records if isinstance(record.msg, dict)]

    return events
