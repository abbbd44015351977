"""Moves open issues and pull requests off unlucky numbers.

Each unlucky item goes through FOUND -> DUPLICATED -> ORIGINAL_CLOSED -> DONE,
or ends in FAILED. The duplicate is always created before the original is
touched, so a failure part way through never loses content: at worst the
original and its duplicate are both left open for a human to reconcile.
"""

import asyncio
from typing import AbstractSet, Any

import structlog
from githubkit.versions.latest.models import Issue

from superstitious.github.adapter import GitHubKitAdapter
from superstitious.numbering.luck import is_unlucky
from superstitious.numbering.models import ItemKind, MigrationState, UnluckyItem
from superstitious.numbering.results import MigrationRecord
from superstitious.schemas.config import SuperstitiousConfig
from superstitious.utils.constants import (
    CLOSURE_COMMENT_TEMPLATE,
    DELETED_LABELS,
    DELETED_TITLE_PREFIX,
    MOVED_FROM_PR_LABELS,
    ORIGINAL_NUMBER_TOKEN,
    PLACEHOLDER_MARKER_LABEL,
    PULL_REQUEST_DUPLICATE_BODY_TEMPLATE,
    UNLUCKY_ORIGINAL_LABELS,
)
from superstitious.utils.github import extract_label_names, has_label, is_pull_request
from superstitious.utils.templates import render_template_string

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def get_existing_unlucky_items(github_adapter: GitHubKitAdapter, luck_set: AbstractSet[int]) -> list[UnluckyItem]:
    """Find open issues and pull requests whose number is unlucky.

    Placeholder issues are skipped: they exist to sit on unlucky numbers.
    Returns an empty list if GitHub cannot be read.
    """
    try:
        open_issues, open_pull_requests = await asyncio.gather(
            github_adapter.list_issues(state="open"),
            github_adapter.list_pull_requests(state="open"),
        )
    except Exception as exc:
        logger.warning("Error getting existing unlucky items", error=str(exc), error_type=type(exc).__name__)
        return []

    unlucky_items: list[UnluckyItem] = []
    for issue in open_issues:
        # The issues endpoint also returns pull requests; those come from the pulls listing.
        if is_pull_request(issue) or has_label(issue, PLACEHOLDER_MARKER_LABEL):
            continue
        if is_unlucky(issue.number, luck_set):
            unlucky_items.append(UnluckyItem(ItemKind.ISSUE, issue))
    for pull_request in open_pull_requests:
        if has_label(pull_request, PLACEHOLDER_MARKER_LABEL):
            continue
        if is_unlucky(pull_request.number, luck_set):
            unlucky_items.append(UnluckyItem(ItemKind.PULL_REQUEST, pull_request))

    unlucky_items.sort(key=lambda unlucky_item: unlucky_item.number)
    return unlucky_items


def render_explanation_comment(template: str, original_number: int) -> str:
    """Substitute the original number into the explanation comment template."""
    return template.replace(ORIGINAL_NUMBER_TOKEN, str(original_number))


async def duplicate_issue(
    github_adapter: GitHubKitAdapter,
    original_issue: Any,
    config: SuperstitiousConfig,
    dry_run: bool = False,
) -> Issue | None:
    """Create a copy of an issue, which GitHub gives the next (safe) number."""
    if dry_run:
        logger.info("Would duplicate issue", issue_number=original_issue.number, title=original_issue.title)
        return None

    clearing = config.clearing
    milestone = getattr(original_issue, "milestone", None)
    new_issue = await github_adapter.create_issue(
        title=f"{original_issue.title}{clearing.title_suffix}",
        body=(original_issue.body or "") if clearing.preserve_content else "",
        labels=extract_label_names(original_issue.labels),
        assignees=[assignee.login for assignee in original_issue.assignees or []],
        milestone=milestone.number if milestone else None,
    )
    logger.info("Created duplicate issue", issue_number=new_issue.number, original_number=original_issue.number)
    return new_issue


async def duplicate_pull_request(
    github_adapter: GitHubKitAdapter,
    original_pull_request: Any,
    config: SuperstitiousConfig,
    dry_run: bool = False,
) -> Issue | None:
    """Create an issue standing in for a pull request; pull requests cannot be duplicated."""
    if dry_run:
        logger.info("Would create issue for unlucky pull request", pull_number=original_pull_request.number, title=original_pull_request.title)
        return None

    clearing = config.clearing
    author = original_pull_request.user.login if original_pull_request.user else "ghost"
    body = render_template_string(
        PULL_REQUEST_DUPLICATE_BODY_TEMPLATE,
        number=original_pull_request.number,
        html_url=original_pull_request.html_url,
        title=original_pull_request.title,
        author=author,
        body=(original_pull_request.body or "") if clearing.preserve_content else "",
    )
    new_issue = await github_adapter.create_issue(
        title=f"[PR #{original_pull_request.number}] {original_pull_request.title}{clearing.title_suffix}",
        body=body,
        labels=list(MOVED_FROM_PR_LABELS),
        assignees=[author] if original_pull_request.user else None,
    )
    logger.info("Created tracking issue for unlucky pull request", issue_number=new_issue.number, pull_number=original_pull_request.number)
    return new_issue


async def duplicate_unlucky_item(
    github_adapter: GitHubKitAdapter,
    unlucky_item: UnluckyItem,
    config: SuperstitiousConfig,
    dry_run: bool = False,
) -> Issue | None:
    """Duplicate an unlucky item according to its kind."""
    if unlucky_item.kind == ItemKind.PULL_REQUEST:
        return await duplicate_pull_request(github_adapter, unlucky_item.item, config, dry_run)
    return await duplicate_issue(github_adapter, unlucky_item.item, config, dry_run)


async def add_explanation_comment(
    github_adapter: GitHubKitAdapter,
    new_issue_number: int,
    original_number: int,
    config: SuperstitiousConfig,
) -> None:
    """Explain on the duplicate where it came from.

    The duplicate already holds the content, so a failure here is only logged.
    """
    body = render_explanation_comment(config.clearing.explanation_comment, original_number)
    try:
        await github_adapter.create_issue_comment(issue_number=new_issue_number, body=body)
    except Exception as exc:
        logger.warning("Failed to add explanation comment", issue_number=new_issue_number, original_number=original_number, error=str(exc))


async def close_unlucky_item(
    github_adapter: GitHubKitAdapter,
    unlucky_item: UnluckyItem,
    new_number: int | None,
    deletion_mode: bool = False,
    dry_run: bool = False,
) -> None:
    """Comment on and close an unlucky item whose content has moved to new_number.

    Raises whatever the GitHub client raises; the caller decides what a failed
    closure means for the migration.
    """
    kind = unlucky_item.kind.value
    if dry_run:
        logger.info(f"Would {'delete' if deletion_mode else 'close'} unlucky {kind}", number=unlucky_item.number)
        return

    comment = render_template_string(
        CLOSURE_COMMENT_TEMPLATE,
        kind=kind,
        action="deleted" if deletion_mode else "closed",
        original_number=unlucky_item.number,
        new_number=new_number,
    )
    await github_adapter.create_issue_comment(issue_number=unlucky_item.number, body=comment)

    title = f"{DELETED_TITLE_PREFIX}{unlucky_item.title}" if deletion_mode else None
    if unlucky_item.kind == ItemKind.PULL_REQUEST:
        await github_adapter.update_pull_request(pull_number=unlucky_item.number, state="closed", title=title)
    else:
        labels = extract_label_names([*extract_label_names(unlucky_item.item.labels), *UNLUCKY_ORIGINAL_LABELS])
        if deletion_mode:
            labels = extract_label_names([*labels, *DELETED_LABELS])
        await github_adapter.update_issue(issue_number=unlucky_item.number, state="closed", labels=labels, title=title)

    logger.info(f"{'Deleted' if deletion_mode else 'Closed'} unlucky {kind}", number=unlucky_item.number, new_number=new_number)


async def migrate_unlucky_item(
    github_adapter: GitHubKitAdapter,
    unlucky_item: UnluckyItem,
    config: SuperstitiousConfig,
    dry_run: bool = False,
) -> MigrationRecord:
    """Move one unlucky item to a new number and close the original."""
    record = MigrationRecord(unlucky_item.number, unlucky_item.kind)
    logger.info(f"Processing unlucky {unlucky_item.kind.value}", number=unlucky_item.number, title=unlucky_item.title)

    try:
        duplicate = await duplicate_unlucky_item(github_adapter, unlucky_item, config, dry_run)
    except Exception as exc:
        logger.error(f"Failed to duplicate unlucky {unlucky_item.kind.value}, leaving it open", number=unlucky_item.number, error=str(exc))
        record.fail(exc)
        return record

    if duplicate is None:
        await close_unlucky_item(github_adapter, unlucky_item, None, config.deletion_mode, dry_run=True)
        return record

    record.new_number = duplicate.number
    record.advance(MigrationState.DUPLICATED)
    if config.clearing.add_explanation_comment:
        await add_explanation_comment(github_adapter, duplicate.number, unlucky_item.number, config)

    try:
        await close_unlucky_item(github_adapter, unlucky_item, duplicate.number, config.deletion_mode)
    except Exception as exc:
        logger.error(
            f"Failed to close unlucky {unlucky_item.kind.value} after duplicating it; both remain open",
            number=unlucky_item.number,
            new_number=duplicate.number,
            error=str(exc),
        )
        record.fail(exc)
        return record

    record.advance(MigrationState.ORIGINAL_CLOSED)
    logger.debug("Migration state changed", number=unlucky_item.number, new_number=duplicate.number, state=record.state.value)
    record.advance(MigrationState.DONE)
    return record


async def clear_unlucky_items(
    github_adapter: GitHubKitAdapter,
    config: SuperstitiousConfig,
    dry_run: bool = False,
) -> list[MigrationRecord]:
    """Migrate every open unlucky item, one at a time, isolating failures per item."""
    logger.info("Checking for existing unlucky items")
    unlucky_items = await get_existing_unlucky_items(github_adapter, config.luck_set)
    if not unlucky_items:
        logger.info("No existing unlucky items found")
        return []

    logger.info("Found unlucky items to clear", count=len(unlucky_items), numbers=[unlucky_item.number for unlucky_item in unlucky_items])
    records: list[MigrationRecord] = []
    for unlucky_item in unlucky_items:
        records.append(await migrate_unlucky_item(github_adapter, unlucky_item, config, dry_run))

    logger.info(
        "Would have cleared unlucky items" if dry_run else "Cleared unlucky items",
        cleared=sum(1 for record in records if record.cleared),
        failed=sum(1 for record in records if record.state == MigrationState.FAILED),
    )
    return records
