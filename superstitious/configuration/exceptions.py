"""Contains exceptions raised when reconciling application configuration."""

from pathlib import Path


class GitHubAuthenticationConfigurationUndefinedError(Exception):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class ConfigurationLoadError(Exception):
    """Raised when the configuration document cannot be read or validated."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initializes the exception with the path and what went wrong."""
        super().__init__(f"Could not load config from {path}: {reason}")
        self.path = path
        self.reason = reason
