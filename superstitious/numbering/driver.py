"""Orchestrates a superstitious run against a GitHub repository."""

import time
from pathlib import Path

import structlog

from superstitious.configuration.models import GitHubAuthenticationType, RunInputs
from superstitious.github.adapter import GitHubKitAdapter
from superstitious.numbering.cleanup import cleanup_placeholder_issues
from superstitious.numbering.luck import compute_next_safe_number
from superstitious.numbering.migration import clear_unlucky_items
from superstitious.numbering.next_number import get_next_number
from superstitious.numbering.reservation import reserve_unlucky_numbers
from superstitious.numbering.results import MigrationRecord, RunReport
from superstitious.schemas.config import SuperstitiousConfig
from superstitious.utils.yaml import load_config

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def run_superstitious(
    github_adapter: GitHubKitAdapter,
    config: SuperstitiousConfig,
    clearing_mode: bool = False,
    dry_run: bool = False,
) -> RunReport:
    """Clear existing unlucky items, reserve upcoming unlucky numbers, then clean up.

    Clearing runs first so that duplicates it creates are numbered before the
    reservation looks ahead. Every step re-reads GitHub instead of trusting an
    earlier step's view, so an interrupted run can simply be started again.
    """
    effective_clearing_mode = clearing_mode or config.clearing_mode
    logger.info(
        "Superstitious run starting",
        owner=github_adapter.owner,
        repo_name=github_adapter.repo_name,
        clearing_mode=effective_clearing_mode,
        deletion_mode=config.deletion_mode,
        dry_run=dry_run,
        unlucky_numbers=sorted(config.luck_set),
    )

    migrations: list[MigrationRecord] = []
    if effective_clearing_mode:
        start_time = time.time()
        migrations = await clear_unlucky_items(github_adapter, config, dry_run)
        logger.info("Processed unlucky items", duration=round(time.time() - start_time, 2), count=len(migrations))

    start_time = time.time()
    reservation = await reserve_unlucky_numbers(github_adapter, config, dry_run)
    logger.info("Processed reservation", duration=round(time.time() - start_time, 2), targets=reservation.targets)

    if reservation.placeholders and not dry_run:
        logger.info("Cleaning up placeholder issues", count=len(reservation.placeholders))
        await cleanup_placeholder_issues(github_adapter, reservation.placeholders, config, dry_run)

    next_safe_number = compute_next_safe_number(await get_next_number(github_adapter), config.luck_set)
    report = RunReport(
        items_created=len(reservation.placeholders),
        items_cleared=sum(1 for record in migrations if record.cleared),
        next_safe_number=next_safe_number,
        migrations=migrations,
        dry_run=dry_run,
    )
    logger.info(
        "Superstitious run completed",
        items_created=report.items_created,
        items_cleared=report.items_cleared,
        next_safe_number=report.next_safe_number,
    )
    return report


async def run_superstitious_workflow(
    repo: str,
    inputs: RunInputs,
    github_auth_type: GitHubAuthenticationType,
    github_api_url: str,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
) -> RunReport:
    """Load the configuration, connect to GitHub and run."""
    config = load_config(inputs.config_path)
    github_adapter = await GitHubKitAdapter.create(
        repo=repo,
        github_auth_type=github_auth_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        github_api_url=github_api_url,
    )
    return await run_superstitious(github_adapter, config, clearing_mode=inputs.clearing_mode, dry_run=inputs.dry_run)
