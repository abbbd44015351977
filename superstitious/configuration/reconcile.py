"""Reconcile GitHub authentication configuration."""

from pathlib import Path

from superstitious.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError
from superstitious.configuration.models import GitHubAuthenticationType

_GITHUB_APP_SETTINGS = (
    ("GitHub App ID", "--github-app-id", "GITHUB_APP_ID"),
    ("GitHub App private key path", "--github-app-private-key-path", "GITHUB_APP_PRIVATE_KEY_PATH"),
    ("GitHub App installation ID", "--github-app-installation-id", "GITHUB_APP_INSTALLATION_ID"),
)


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    A token (PAT, or the workflow's GITHUB_TOKEN) and a GitHub App are
    mutually exclusive, and a GitHub App needs all three of its settings.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If the configuration is ambiguous, incomplete or missing.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_values = (github_app_id, github_app_private_key_path, github_app_installation_id)

    if github_pat_token and any(app_values):
        raise GitHubAuthenticationConfigurationUndefinedError("Both token and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if all(app_values):
        return GitHubAuthenticationType.APP

    if any(app_values):
        missing = [
            f"{name} (command line option {cli_name}, environment variable {env_name})"
            for (name, cli_name, env_name), value in zip(_GITHUB_APP_SETTINGS, app_values)
            if not value
        ]
        raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))

    raise GitHubAuthenticationConfigurationUndefinedError(
        "No GitHub authentication configuration provided. Please provide either a token or a GitHub App configuration."
    )
