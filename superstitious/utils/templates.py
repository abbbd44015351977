"""Contains utilities for rendering Jinja2 templates."""

from typing import Any

import jinja2
import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def construct_jinja2_environment() -> jinja2.Environment:
    """Construct a Jinja2 environment."""
    # Issue bodies are Markdown, not HTML.
    jinja_env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False, keep_trailing_newline=True)
    return jinja_env


def construct_jinja2_template_from_string(template_string: str, environment: jinja2.Environment | None = None) -> jinja2.Template:
    """Construct a Jinja2 template from a string."""
    if environment is None:
        environment = construct_jinja2_environment()
    return environment.from_string(template_string)


def render_template_string(template_string: str, **context: Any) -> str:
    """Render a Jinja2 template string against keyword context."""
    template = construct_jinja2_template_from_string(template_string)
    try:
        return template.render(**context)
    except jinja2.UndefinedError as exc:
        logger.error("Failed to render template", context_keys=sorted(context), error=str(exc))
        raise
