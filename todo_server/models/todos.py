"""Task models shared by the store, the renderer and the routes."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ViewState(str, Enum):
    """Which tasks the list shows."""

    ALL = "ALL"
    INCOMPLETE = "INCOMPLETE"


class Task(BaseModel):
    """A single todo item."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Server generated identifier (uuid4)")
    text: str = Field(description="Task text as entered by the user")
    completed: bool = Field(default=False, description="Completion flag")
    created_at: datetime
    updated_at: datetime


class TaskCount(BaseModel):
    """Derived totals used by the empty-state message and the view toggle."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    incomplete: int = Field(ge=0)

    @model_validator(mode="after")
    def _incomplete_within_total(self) -> "TaskCount":
        if self.incomplete > self.total:
            raise ValueError("incomplete count cannot exceed total count")
        return self
