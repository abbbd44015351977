"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass(frozen=True)
class RunInputs:
    """Run-level inputs taken from the command line or the action environment."""

    config_path: Path
    clearing_mode: bool = False
    dry_run: bool = False
