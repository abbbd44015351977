"""Consumes upcoming unlucky numbers with placeholder issues."""

from typing import AbstractSet

import structlog
from githubkit.versions.latest.models import Issue

from superstitious.github.adapter import GitHubKitAdapter
from superstitious.numbering.luck import find_unlucky_numbers_in_range, is_unlucky
from superstitious.numbering.next_number import get_next_number
from superstitious.numbering.results import ReservationResult
from superstitious.schemas.config import SuperstitiousConfig

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def compute_reservation_end(next_number: int, reservation_space: int, luck_set: AbstractSet[int]) -> int:
    """Return the last number to reserve ahead of next_number.

    When the reservation space ends part way through a run of consecutive
    unlucky numbers, it is stretched to the end of the run so GitHub's counter
    is never left sitting on an unlucky number.
    """
    reservation_end = next_number + reservation_space - 1
    if reservation_space > 0:
        while is_unlucky(reservation_end, luck_set) and is_unlucky(reservation_end + 1, luck_set):
            reservation_end += 1
    return reservation_end


async def create_placeholder_issue(
    github_adapter: GitHubKitAdapter,
    config: SuperstitiousConfig,
    target: int,
    next_number: int,
) -> Issue:
    """Create one placeholder issue on the way to consuming the target number."""
    placeholder = await github_adapter.create_issue(
        title=config.placeholder.title,
        body=config.placeholder.body,
        labels=list(config.placeholder.labels),
    )
    logger.info("Created placeholder issue", issue_number=placeholder.number, target=target, expected_number=next_number)
    return placeholder


async def reserve_target(
    github_adapter: GitHubKitAdapter,
    config: SuperstitiousConfig,
    target: int,
    result: ReservationResult,
) -> None:
    """Create placeholders until GitHub's next number is past the target.

    Each creation can move the counter by more than one (other issues and
    pull requests are being opened concurrently), so the next number is read
    back from GitHub after every placeholder instead of being counted locally.
    """
    next_number = await get_next_number(github_adapter)
    while next_number <= target:
        try:
            placeholder = await create_placeholder_issue(github_adapter, config, target, next_number)
        except Exception as exc:
            logger.error("Failed to create placeholder issue", target=target, next_number=next_number, error=str(exc))
            result.failed_targets.append(target)
            return
        result.placeholders.append(placeholder)
        # The listing can lag behind the issue we just created.
        next_number = max(await get_next_number(github_adapter), placeholder.number + 1)
    logger.debug("Target number already consumed", target=target, next_number=next_number)


async def reserve_unlucky_numbers(
    github_adapter: GitHubKitAdapter,
    config: SuperstitiousConfig,
    dry_run: bool = False,
) -> ReservationResult:
    """Consume every unlucky number within the reservation space ahead of GitHub's counter."""
    next_number = await get_next_number(github_adapter)
    reservation_end = compute_reservation_end(next_number, config.reservation_space, config.luck_set)
    logger.info("Checking upcoming numbers for unlucky numbers", next_number=next_number, reservation_end=reservation_end)

    targets = find_unlucky_numbers_in_range(next_number, reservation_end, config.luck_set)
    result = ReservationResult(targets)
    if not targets:
        logger.info("No unlucky numbers found in the upcoming range. No action needed.")
        return result

    logger.info("Found unlucky numbers in range", unlucky_numbers=targets)
    projected_next_number = next_number
    for target in targets:
        if dry_run:
            # Placeholders for earlier targets would already have moved the counter.
            logger.info(
                "Would create placeholder issues until the target number is consumed",
                target=target,
                next_number=projected_next_number,
                placeholder_count=target - projected_next_number + 1,
            )
            projected_next_number = target + 1
            continue
        await reserve_target(github_adapter, config, target, result)

    logger.info(
        "Would have reserved unlucky numbers" if dry_run else "Reserved unlucky numbers",
        targets=targets,
        placeholders_created=len(result.placeholders),
        failed_targets=result.failed_targets,
    )
    return result
