"""Retires the placeholder issues created during a run."""

from typing import Any

import structlog

from superstitious.github.adapter import GitHubKitAdapter
from superstitious.schemas.config import SuperstitiousConfig
from superstitious.utils.constants import (
    CLOSED_LABEL,
    DELETED_LABELS,
    DELETED_PLACEHOLDER_TITLE,
    PLACEHOLDER_LABEL,
    PLACEHOLDER_MARKER_LABEL,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def retire_placeholder_issue(
    github_adapter: GitHubKitAdapter,
    issue_number: int,
    deletion_mode: bool = False,
    dry_run: bool = False,
) -> bool:
    """Close a placeholder issue, marking it as deleted in deletion mode.

    GitHub has no hard delete for issues, so "deleting" means closing the
    issue with a deleted title and labels. Closing an already closed issue
    succeeds. Returns True if the placeholder was retired.
    """
    action = "delete" if deletion_mode else "close"
    if dry_run:
        logger.info(f"Would {action} placeholder issue", issue_number=issue_number)
        return False

    try:
        if deletion_mode:
            await github_adapter.update_issue(
                issue_number=issue_number,
                state="closed",
                labels=[PLACEHOLDER_MARKER_LABEL, PLACEHOLDER_LABEL, *DELETED_LABELS],
                title=DELETED_PLACEHOLDER_TITLE,
            )
            logger.info("Deleted placeholder issue", issue_number=issue_number)
        else:
            await github_adapter.update_issue(
                issue_number=issue_number,
                state="closed",
                labels=[PLACEHOLDER_MARKER_LABEL, PLACEHOLDER_LABEL, CLOSED_LABEL],
            )
            logger.info("Closed placeholder issue", issue_number=issue_number)
    except Exception as exc:
        logger.warning(f"Failed to {action} placeholder issue", issue_number=issue_number, error=str(exc))
        return False
    return True


async def cleanup_placeholder_issues(
    github_adapter: GitHubKitAdapter,
    placeholders: list[Any],
    config: SuperstitiousConfig,
    dry_run: bool = False,
) -> int:
    """Retire every placeholder, carrying on past individual failures.

    Returns the number of placeholders retired.
    """
    retired = 0
    for placeholder in placeholders:
        if await retire_placeholder_issue(github_adapter, placeholder.number, config.deletion_mode, dry_run):
            retired += 1
    logger.info("Cleaned up placeholder issues", retired=retired, total=len(placeholders), deletion_mode=config.deletion_mode)
    return retired
