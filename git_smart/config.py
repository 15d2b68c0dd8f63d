"""
Configuration handling for git_smart.

Defines the settings schema and provides methods for loading/saving
settings from YAML files.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError


# Settings file picked up from the working directory when present
DEFAULT_CONFIG_FILE = Path(".git-smart.yaml")

# Stash-pop failures that mean there was nothing left to restore
DEFAULT_BENIGN_STASH_POP_PHRASES = [
    "No stash found",
    "No stash entries found",
    "Did not need to pop stash",
]


class SyncSettings(BaseModel):
    """Settings for the branch sync workflow."""

    model_config = ConfigDict(extra="forbid")

    # Remote whose HEAD branch is the default branch
    remote: str = Field(
        default="origin", description="Git remote queried for the default branch"
    )
    # Skip the remote query entirely when set
    default_branch: str | None = Field(
        default=None,
        description="Default branch to sync with (detected from the remote when unset)",
    )
    git_executable: str = Field(
        default="git", description="Git executable used to run commands"
    )
    working_dir: Path | None = Field(
        default=None,
        description="Repository directory (defaults to the current directory)",
    )
    benign_stash_pop_phrases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BENIGN_STASH_POP_PHRASES),
        description="Stash-pop failure messages treated as success (case-insensitive)",
    )

    @field_validator("remote", "git_executable")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("default_branch")
    @classmethod
    def _blank_branch_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @classmethod
    def from_yaml(cls, path: Path) -> "SyncSettings":
        """Load settings from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        # An empty file means all defaults
        return cls.model_validate(data or {})

    def to_yaml(self, path: Path) -> None:
        """Save settings to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )


def load_settings(path: Path | None = None) -> SyncSettings:
    """
    Load settings, falling back to defaults.

    Args:
        path: Settings file to read. When None, the default file in the
            current directory is used if it exists.

    Returns:
        The loaded SyncSettings

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or does
            not match the settings schema
    """
    if path is None:
        if not DEFAULT_CONFIG_FILE.is_file():
            return SyncSettings()
        path = DEFAULT_CONFIG_FILE

    try:
        return SyncSettings.from_yaml(path)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e
