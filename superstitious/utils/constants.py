"""Shared constants used across the application."""

# Labels
# ------

PLACEHOLDER_MARKER_LABEL = "superstitious"
"""Label carried by every placeholder issue; items with it are never migrated."""

PLACEHOLDER_LABEL = "placeholder"

CLOSED_LABEL = "closed"

DELETED_LABELS = ["deleted", "auto-removed"]
"""Labels added in deletion mode, since GitHub has no hard delete for issues."""

UNLUCKY_ORIGINAL_LABELS = ["unlucky-number", "moved"]
"""Labels added to an original issue after its content has been moved."""

MOVED_FROM_PR_LABELS = ["moved-from-pr", "superstitious-clearing"]
"""Labels for the issue that replaces an unlucky pull request."""

# Titles and tokens
# -----------------

DELETED_TITLE_PREFIX = "🗑️ [DELETED] "

DELETED_PLACEHOLDER_TITLE = f"{DELETED_TITLE_PREFIX}Reserved for superstitious purposes"

ORIGINAL_NUMBER_TOKEN = "{original_number}"
"""Literal token substituted into the explanation comment, not a Jinja2 variable."""

CONFIG_PATH_DEFAULT = "superstitious.yml"

# Jinja2 templates
# ----------------

PULL_REQUEST_DUPLICATE_BODY_TEMPLATE = """\
**This issue was created to replace unlucky PR #{{ number }}**

Original PR: {{ html_url }}
Original Title: {{ title }}
Original Author: @{{ author }}

---

{{ body }}"""
"""Body of the issue that replaces an unlucky pull request."""

CLOSURE_COMMENT_TEMPLATE = (
    "This {{ kind }} was {{ action }} due to having an unlucky number (#{{ original_number }}). The content has been moved to #{{ new_number }}."
)
"""Comment left on an original item before it is closed."""
