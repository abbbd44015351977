"""Models shared by the reservation and migration logic."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ItemKind(str, Enum):
    """The kind of a tracked GitHub item."""

    ISSUE = "issue"
    PULL_REQUEST = "pull request"


class MigrationState(str, Enum):
    """Where a single unlucky item is in its migration."""

    FOUND = "found"
    DUPLICATED = "duplicated"
    ORIGINAL_CLOSED = "original_closed"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class UnluckyItem:
    """An open issue or pull request currently sitting on an unlucky number."""

    kind: ItemKind
    item: Any

    @property
    def number(self) -> int:
        """The item's current (unlucky) number."""
        return int(self.item.number)

    @property
    def title(self) -> str:
        """The item's current title."""
        return str(self.item.title)
