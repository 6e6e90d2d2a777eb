"""
Configuration models.

Shape of ~/.config/neo/config.json. Every section has defaults so a
partial or missing file still produces a complete configuration.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

from pydantic import ConfigDict, Field, field_validator

from .base import NeoBaseModel

LogLevel = Literal["debug", "info", "warning", "error"]
BannerType = Literal["full", "compact", "none"]
ShellType = Literal["zsh", "bash", "fish"]
Theme = Literal["dark", "light", "auto"]


class ConfigBaseModel(NeoBaseModel):
    """Base model for config sections with relaxed strict mode for JSON loading."""

    model_config = ConfigDict(
        strict=False,  # Allow coercion from JSON types
        validate_assignment=True,
        extra="ignore",  # Ignore unknown fields in config files
        populate_by_name=True,
        use_enum_values=True,
        revalidate_instances="never",
    )


class AIConfig(ConfigBaseModel):
    """AI assistance section."""

    enabled: bool = True
    model: str | None = "claude-3-haiku-20240307"


class InstallationConfig(ConfigBaseModel):
    """Where and when neo was installed."""

    installed_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    version: str = "0.1.0"
    completions_path: str | None = None
    global_path: str | None = None


class PluginsConfig(ConfigBaseModel):
    """Plugin system section."""

    enabled: bool = True
    directory: str | None = None
    disabled: list[str] = Field(default_factory=list)

    @field_validator("disabled", mode="before")
    @classmethod
    def split_disabled(cls, v: Any) -> Any:
        """Accept a comma-separated string (handy for env vars)."""
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v


class LoggingConfig(ConfigBaseModel):
    """Diagnostic logging section."""

    level: LogLevel = "warning"
    console: bool = False
    file: bool = True


class AliasesConfig(ConfigBaseModel):
    n: bool = True


class PreferencesConfig(ConfigBaseModel):
    """User interface preferences."""

    aliases: AliasesConfig = Field(default_factory=AliasesConfig)
    banner: BannerType = "full"
    editor: str | None = None
    theme: Theme = "auto"


class ShellConfig(ConfigBaseModel):
    rc_file: str = str(Path.home() / ".zshrc")
    type: ShellType = "zsh"


class UpdatesConfig(ConfigBaseModel):
    last_checked_at: str | None = None
    latest_version: str | None = None


class UserConfig(ConfigBaseModel):
    email: str | None = None
    name: str | None = None


class NeoConfig(ConfigBaseModel):
    """Complete persisted configuration.

    Unknown top-level keys are kept so sections written by plugins
    survive a read/write cycle.
    """

    model_config = ConfigDict(
        strict=False,
        validate_assignment=True,
        extra="allow",
        populate_by_name=True,
        use_enum_values=True,
        revalidate_instances="never",
    )

    active_profile: str = "default"
    ai: AIConfig = Field(default_factory=AIConfig)
    auto_switch: dict[str, str] = Field(default_factory=dict)
    installation: InstallationConfig = Field(default_factory=InstallationConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    preferences: PreferencesConfig = Field(default_factory=PreferencesConfig)
    shell: ShellConfig = Field(default_factory=ShellConfig)
    updates: UpdatesConfig = Field(default_factory=UpdatesConfig)
    user: UserConfig = Field(default_factory=UserConfig)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict suitable for JSON serialization."""
        return self.model_dump(mode="json")
