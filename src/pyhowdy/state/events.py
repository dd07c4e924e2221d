"""Namespace identity and change events."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NamespaceKey(BaseModel):
    """The ``(application, board, isolated)`` triple naming one store."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    application: str
    board: str
    isolated: bool = True

    @field_validator("application", "board")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("namespace names must be non-empty")
        return name

    def __str__(self) -> str:
        scope = "isolated" if self.isolated else "shared"
        return f"{self.application}/{self.board} ({scope})"


class ChangeEvent(BaseModel):
    """Signal that a namespace changed.

    Carries no information about *what* changed; subscribers re-read the
    store. ``sequence`` increases by one per committed write.
    """

    model_config = ConfigDict(frozen=True)

    namespace: NamespaceKey
    sequence: int = Field(..., ge=1, description="Per-store commit counter")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
