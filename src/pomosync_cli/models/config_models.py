"""Configuration models for PomoSync CLI."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class TimerConfig(BaseModel):
    """Phase durations."""

    focus_minutes: int = Field(default=25, gt=0)
    break_minutes: int = Field(default=5, gt=0)
    tick_interval_seconds: float = Field(default=0.1, gt=0, le=1)


class SyncConfig(BaseModel):
    """Remote history sync configuration."""

    endpoint: str = Field(default="https://p2.hcraft.online/sync.php")
    timeout: float = Field(default=30, gt=0)
    code: str = Field(default="", description="Saved sync code")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("endpoint cannot be empty")
        return v.strip()


class UIConfig(BaseModel):
    """Presentation preferences; stored but not interpreted by the timer."""

    theme: Literal["auto", "light", "dark"] = Field(default="auto")
    background_opacity: float = Field(default=0.0, ge=0, le=1)


class AppConfig(BaseModel):
    """Main PomoSync configuration"""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
