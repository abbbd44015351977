"""Contains results of a superstitious run."""

from typing import Any

from superstitious.numbering.models import ItemKind, MigrationState


class MigrationRecord:
    """Tracks one unlucky item through its migration to a new number."""

    def __init__(self, original_number: int, kind: ItemKind) -> None:
        """Initialize the record in the FOUND state."""
        self.original_number = original_number
        self.kind = kind
        self.new_number: int | None = None
        self.state = MigrationState.FOUND
        self.error: str | None = None
        self.history: list[MigrationState] = [MigrationState.FOUND]

    def advance(self, state: MigrationState) -> None:
        """Move the record to the given state, keeping every state it passed through."""
        self.state = state
        self.history.append(state)

    def fail(self, error: Exception | str) -> None:
        """Move the record to the terminal FAILED state."""
        self.advance(MigrationState.FAILED)
        self.error = str(error)

    @property
    def cleared(self) -> bool:
        """Whether the original was both duplicated and closed."""
        return self.state == MigrationState.DONE

    def __repr__(self) -> str:
        return (
            f"MigrationRecord(original_number={self.original_number}, kind={self.kind.value!r}, "
            f"new_number={self.new_number}, state={self.state.value!r})"
        )


class ReservationResult:
    """Contains results of reserving upcoming unlucky numbers."""

    def __init__(self, targets: list[int], placeholders: list[Any] | None = None, failed_targets: list[int] | None = None) -> None:
        """Initialize the result with the targets found and the placeholders created for them."""
        self.targets = targets
        self.placeholders = placeholders or []
        self.failed_targets = failed_targets or []


class RunReport:
    """Contains the outputs of a whole run."""

    def __init__(
        self,
        items_created: int,
        items_cleared: int,
        next_safe_number: int,
        migrations: list[MigrationRecord] | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the report with the run's counters and the next safe number."""
        self.items_created = items_created
        self.items_cleared = items_cleared
        self.next_safe_number = next_safe_number
        self.migrations = migrations or []
        self.dry_run = dry_run

    def as_outputs(self) -> dict[str, int]:
        """Return the action outputs keyed by their output names."""
        return {
            "issues-created": self.items_created,
            "issues-cleared": self.items_cleared,
            "next-safe-number": self.next_safe_number,
        }
