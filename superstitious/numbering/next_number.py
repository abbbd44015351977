"""Works out which number GitHub will assign next."""

import asyncio

import structlog

from superstitious.github.adapter import GitHubKitAdapter

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def get_next_number(github_adapter: GitHubKitAdapter) -> int:
    """Return the number GitHub would assign to the next issue or pull request.

    This is a volatile read: other activity in the repository can move it at
    any time, so callers must re-query rather than add to a previous value.
    Falls back to 1 if GitHub cannot be read.
    """
    try:
        latest_issue_number, latest_pull_request_number = await asyncio.gather(
            github_adapter.get_latest_issue_number(),
            github_adapter.get_latest_pull_request_number(),
        )
    except Exception as exc:
        logger.warning("Error getting next number, assuming 1", error=str(exc), error_type=type(exc).__name__)
        return 1

    next_number = max(latest_issue_number or 0, latest_pull_request_number or 0) + 1
    logger.debug(
        "Observed next number",
        next_number=next_number,
        latest_issue_number=latest_issue_number,
        latest_pull_request_number=latest_pull_request_number,
    )
    return next_number
