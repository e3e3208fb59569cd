"""Normalized state change events.

Vector applications on the store (hub pushes, startup pull) report the
devices that actually changed as these events.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ChangeSource(StrEnum):
    HUB = "hub"
    LOCAL = "local"
    PULL = "pull"


class StateChange(BaseModel):
    """A single device whose on/off value changed."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Device index")
    is_on: bool
    source: ChangeSource
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
