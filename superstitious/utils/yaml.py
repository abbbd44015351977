"""Contains utility functions for working with YAML files."""

from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from superstitious.configuration.exceptions import ConfigurationLoadError
from superstitious.schemas.config import SuperstitiousConfig

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

yaml = YAML(typ="safe")


def load_yaml_file(path: Path) -> Any:
    """Loads a YAML file and returns its contents."""
    with open(path, encoding="utf-8") as f:
        return yaml.load(f)


def parse_config_document(path: Path) -> SuperstitiousConfig:
    """Load and validate a configuration document, raising on any problem.

    Keys missing from the document, including keys missing inside the
    ``placeholder`` and ``clearing`` sections, take their default values.
    """
    try:
        content = load_yaml_file(path)
    except (OSError, YAMLError) as exc:
        raise ConfigurationLoadError(path, str(exc)) from exc

    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ConfigurationLoadError(path, f"expected a mapping at the top level, got {type(content).__name__}")

    try:
        return SuperstitiousConfig.model_validate(content)
    except ValidationError as exc:
        raise ConfigurationLoadError(path, str(exc)) from exc


def load_config(path: Path | str) -> SuperstitiousConfig:
    """Load the configuration document, falling back to the defaults on failure."""
    path = Path(path)
    try:
        config = parse_config_document(path)
    except ConfigurationLoadError as exc:
        logger.warning("Could not load config, using defaults", config_path=str(path), error=exc.reason)
        return SuperstitiousConfig()
    logger.debug("Loaded config", config_path=str(path))
    return config
