from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .constants import THEMES, TOOLS

MAX_HISTORY = 50


class LevelCalibration(BaseModel):
    x: float = 0.0
    y: float = 0.0


class UserPreferences(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    user_id: int
    theme: str = "light"
    last_used_tool: Optional[str] = "calculator"
    calculator_history: List[str] = Field(default_factory=list)
    level_calibration: LevelCalibration = Field(default_factory=LevelCalibration)
    created_at: datetime
    updated_at: datetime


class UserPreferencesUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    theme: Optional[str] = None
    last_used_tool: Optional[str] = None
    calculator_history: Optional[
        Annotated[List[str], Field(max_length=MAX_HISTORY)]
    ] = None
    level_calibration: Optional[LevelCalibration] = None

    @field_validator("theme")
    @classmethod
    def valid_theme(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in THEMES:
            raise ValueError(f"theme must be one of {sorted(THEMES)}")
        return v

    @field_validator("last_used_tool")
    @classmethod
    def valid_tool(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in TOOLS:
            raise ValueError(f"unknown tool '{v}'")
        return v
