"""Pydantic schema for the superstitious configuration document."""

from pydantic import BaseModel, Field, PositiveInt, field_validator

from superstitious.utils.constants import PLACEHOLDER_LABEL, PLACEHOLDER_MARKER_LABEL


class PlaceholderConfig(BaseModel):
    """Pydantic model for the placeholder issue template."""

    title: str = "🔮 Reserved for superstitious purposes"
    body: str = (
        "This issue was created automatically to prevent an unlucky number from being assigned.\n\n"
        "**This is a placeholder issue and will be deleted shortly.**"
    )
    labels: list[str] = Field(default_factory=lambda: [PLACEHOLDER_MARKER_LABEL, PLACEHOLDER_LABEL])

    @field_validator("labels")
    @classmethod
    def ensure_marker_label(cls, labels: list[str]) -> list[str]:
        """Placeholders must always carry the marker label so clearing can skip them."""
        if PLACEHOLDER_MARKER_LABEL not in labels:
            return [PLACEHOLDER_MARKER_LABEL, *labels]
        return labels


class ClearingConfig(BaseModel):
    """Pydantic model for how unlucky items are moved to a new number."""

    preserve_content: bool = True
    title_suffix: str = " (moved from unlucky number)"
    add_explanation_comment: bool = True
    explanation_comment: str = (
        "This issue was moved from #{original_number} to avoid an unlucky number.\n"
        "The original issue has been closed and this is the continuation."
    )


class SuperstitiousConfig(BaseModel):
    """Pydantic model for the whole configuration document."""

    unlucky_numbers: list[PositiveInt] = Field(default_factory=lambda: [7, 13, 66, 77, 666, 777, 1313, 1337])
    reservation_space: int = Field(default=5, ge=0)
    clearing_mode: bool = False
    deletion_mode: bool = False
    placeholder: PlaceholderConfig = Field(default_factory=PlaceholderConfig)
    clearing: ClearingConfig = Field(default_factory=ClearingConfig)

    @property
    def luck_set(self) -> frozenset[int]:
        """The unlucky numbers as an immutable set."""
        return frozenset(self.unlucky_numbers)
