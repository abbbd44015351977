"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any, Literal


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients.

    Only the operations needed to consume and migrate issue/PR numbers are
    modelled. GitHub shares one number sequence between issues and pull
    requests, so both kinds are exposed.
    """

    # Issue CRUD
    @abstractmethod
    async def create_issue(
        self,
        title: str,
        body: str | None = None,
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
        milestone: str | int | None = None,
        **kwargs: Any,
    ) -> Any:
        """Create an issue for a repository."""
        pass

    @abstractmethod
    async def update_issue(
        self,
        issue_number: int,
        title: str | None = None,
        body: str | None = None,
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
        milestone: str | int | None = None,
        state: Literal["open", "closed"] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Update an issue for a repository."""
        pass

    @abstractmethod
    async def list_issues(self, state: Literal["open", "closed", "all"] = "all", **kwargs: Any) -> list[Any]:
        """List issues for a repository."""
        pass

    @abstractmethod
    async def get_latest_issue_number(self) -> int | None:
        """Get the number of the most recently created issue, if any."""
        pass

    # Comments
    @abstractmethod
    async def create_issue_comment(self, issue_number: int, body: str) -> Any:
        """Add a comment to an issue or pull request thread."""
        pass

    # Pull Request CRUD
    @abstractmethod
    async def update_pull_request(
        self,
        pull_number: int,
        title: str | None = None,
        body: str | None = None,
        state: Literal["open", "closed"] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Update a pull request for a repository."""
        pass

    @abstractmethod
    async def list_pull_requests(self, state: Literal["open", "closed", "all"] = "all", **kwargs: Any) -> list[Any]:
        """List pull requests for a repository."""
        pass

    @abstractmethod
    async def get_latest_pull_request_number(self) -> int | None:
        """Get the number of the most recently created pull request, if any."""
        pass
