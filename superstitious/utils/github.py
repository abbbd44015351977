"""Contains utility functions for GitHub interactions."""

from typing import Any, Sequence

from githubkit.utils import UNSET

from superstitious.utils.types import HasName, LabelType


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A repository in 'owner/repo' format is required.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def extract_label_names(labels: Sequence[LabelType] | None) -> list[str]:
    """Extract label names, in order, from GitHub label objects, strings, or dicts."""
    names: list[str] = []
    for label in labels or []:
        if isinstance(label, str):
            name: str | None = label
        elif isinstance(label, dict):
            name = label.get("name")
        elif isinstance(label, HasName):
            name = label.name
        else:
            name = None
        if name and name not in names:
            names.append(name)
    return names


def has_label(item: Any, label_name: str) -> bool:
    """Return True if a GitHub issue or pull request carries the given label."""
    return label_name in extract_label_names(getattr(item, "labels", None))


def is_pull_request(item: Any) -> bool:
    """Return True if an entry from the issues endpoint is really a pull request.

    githubkit leaves the field as UNSET, not None, on plain issues.
    """
    pull_request = getattr(item, "pull_request", None)
    return pull_request is not None and pull_request is not UNSET
