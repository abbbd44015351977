"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import logging
import sys
import traceback
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from superstitious.configuration.env import Settings
from superstitious.configuration.models import RunInputs
from superstitious.configuration.reconcile import validate_github_authentication_configuration
from superstitious.numbering.driver import run_superstitious_workflow
from superstitious.numbering.results import RunReport
from superstitious.utils.constants import CONFIG_PATH_DEFAULT

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Keep unlucky numbers out of a GitHub repository's issues and pull requests.")


def configure_logging(debug: bool) -> None:
    """Route structlog through the standard library at INFO, or DEBUG when requested."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def write_action_outputs(report: RunReport, output_path: Path | None) -> None:
    """Append the run's outputs to the GitHub Actions output file, if there is one."""
    if output_path is None:
        return
    with open(output_path, "a", encoding="utf-8") as f:
        for name, value in report.as_outputs().items():
            f.write(f"{name}={value}\n")


@typer_app.callback()
def repo_callback(
    ctx: typer.Context,
    repo: Annotated[str, Option(envvar="GITHUB_REPOSITORY", help="Repository name (owner/repo).")],
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = "https://api.github.com",
    github_pat_token: Annotated[
        str | None, Option(envvar=["GITHUB_PAT_TOKEN", "GITHUB_TOKEN"], help="GitHub Personal Access Token or workflow token.")
    ] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
) -> None:
    """Set the repository and credentials for the current context."""
    ctx.ensure_object(dict)
    ctx.obj["repo"] = repo
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["github_pat_token"] = github_pat_token
    ctx.obj["github_app_id"] = github_app_id
    ctx.obj["github_app_private_key_path"] = github_app_private_key_path
    ctx.obj["github_app_installation_id"] = github_app_installation_id
    ctx.obj["github_auth_type"] = asyncio.run(
        validate_github_authentication_configuration(
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
        )
    )


@typer_app.command(name="run")
def run_cli(
    ctx: typer.Context,
    config_path: Annotated[Path, Option(envvar="CONFIG_PATH", help="Path to the superstitious YAML configuration.")] = Path(CONFIG_PATH_DEFAULT),
    clearing_mode: Annotated[bool, Option(envvar="CLEARING_MODE", help="Move existing unlucky issues and pull requests to new numbers.")] = False,
    dry_run: Annotated[bool, Option(envvar="DRY_RUN", help="Log what would happen without changing anything.")] = False,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Reserve upcoming unlucky numbers and, in clearing mode, move existing unlucky items."""
    settings = Settings()
    configure_logging(debug or settings.DEBUG)

    if dry_run:
        typer.echo("Dry run enabled - no issues or pull requests will be changed")

    inputs = RunInputs(config_path=config_path, clearing_mode=clearing_mode, dry_run=dry_run)
    try:
        report = asyncio.run(
            run_superstitious_workflow(
                repo=ctx.obj["repo"],
                inputs=inputs,
                github_auth_type=ctx.obj["github_auth_type"],
                github_api_url=ctx.obj["github_api_url"],
                github_pat_token=ctx.obj["github_pat_token"],
                github_app_id=ctx.obj["github_app_id"],
                github_app_private_key_path=ctx.obj["github_app_private_key_path"],
                github_app_installation_id=ctx.obj["github_app_installation_id"],
            )
        )
    except Exception as exc:
        typer.echo(f"Action failed: {exc}", err=True)
        traceback.print_exc()
        raise typer.Exit(1) from exc

    write_action_outputs(report, settings.GITHUB_OUTPUT)

    typer.echo("Action completed successfully!")
    typer.echo(f"Issues created: {report.items_created}")
    typer.echo(f"Issues cleared: {report.items_cleared}")
    typer.echo(f"Next safe number: {report.next_safe_number}")


if __name__ == "__main__":
    typer_app()
