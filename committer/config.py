"""
Configuration module for the committer
Settings are read from an optional YAML file, then overridden by
COMMITTER_* environment variables (a .env file is honoured)
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator

from committer.exceptions import CommitterError
from committer.messages import DEFAULT_FIELDS, DEFAULT_WIDTH

logger = logging.getLogger(__name__)

APP_NAME = "nonguix-committer"
CONFIG_FILE_NAME = ".committer.yaml"
ENV_PREFIX = "COMMITTER_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CommitterConfig(BaseModel):
  """Settings for a committer run"""

  # Prefix of every commit summary
  channel: str = "nongnu"
  # Directory whose changes are committed, relative to the repository root
  subtree: str = "nongnu"
  context_lines: int = Field(1, ge=0, le=3)
  wrap_width: int = Field(DEFAULT_WIDTH, ge=40, le=100)
  # Pause between git invocations so index timestamps differ
  delay_seconds: float = Field(0.001, ge=0)
  tracked_fields: tuple[str, ...] = DEFAULT_FIELDS
  log_level: str = "INFO"
  repo_path: Path = Path(".")

  @field_validator("tracked_fields", mode="before")
  @classmethod
  def parse_tracked_fields(cls, v: Any) -> Any:
    """Accept "inputs, native-inputs" as well as a YAML list"""
    if isinstance(v, str):
      return tuple(name for name in v.replace(",", " ").split() if name)
    return v

  @field_validator("log_level")
  @classmethod
  def validate_log_level(cls, v: str) -> str:
    level = v.upper()
    if level not in LOG_LEVELS:
      raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got: {v}")
    return level


def find_config_file(repo_path: Path) -> Optional[Path]:
  """
  Locate the YAML settings file

  Looks at $COMMITTER_CONFIG, then .committer.yaml at the repository root,
  then config.yaml in the user config directory.
  """
  explicit = os.getenv(f"{ENV_PREFIX}CONFIG")
  if explicit:
    return Path(explicit)

  for candidate in (
    repo_path / CONFIG_FILE_NAME,
    Path(user_config_dir(APP_NAME)) / "config.yaml",
  ):
    if candidate.exists():
      return candidate
  return None


def read_config_file(config_path: Path) -> dict[str, Any]:
  """
  Parse a YAML settings file

  Raises:
      FileNotFoundError: If config file doesn't exist
      yaml.YAMLError: If YAML is malformed
      ValueError: If the document is not a mapping
  """
  if not config_path.exists():
    raise FileNotFoundError(f"Configuration file not found: {config_path}")

  with open(config_path, "r") as f:
    raw_config = yaml.safe_load(f)

  if raw_config is None:
    return {}
  if not isinstance(raw_config, dict):
    raise ValueError(f"Configuration file {config_path} must contain a mapping")

  # Allow YAML keys spelled with dashes, e.g. wrap-width
  return {str(key).replace("-", "_"): value for key, value in raw_config.items()}


def env_overrides() -> dict[str, str]:
  """Collect COMMITTER_<FIELD> environment variables"""
  overrides = {}
  for name in CommitterConfig.model_fields:
    value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
    if value is not None:
      overrides[name] = value
  return overrides


def load_config(repo_path: Optional[Path] = None) -> CommitterConfig:
  """
  Build the settings for a run

  Args:
      repo_path: Repository root used to find .committer.yaml (default: COMMITTER_REPO_PATH or ".")

  Returns:
      Validated CommitterConfig

  Raises:
      CommitterError: If the settings file or a variable is invalid
  """
  load_dotenv()
  overrides = env_overrides()
  repo_path = Path(overrides.get("repo_path", repo_path or "."))

  try:
    config_path = find_config_file(repo_path)
    file_settings = read_config_file(config_path) if config_path else {}
    if config_path:
      logger.debug(f"Loaded config from {config_path}")
    return CommitterConfig(**{"repo_path": repo_path, **file_settings, **overrides})
  except (OSError, ValueError, yaml.YAMLError) as e:
    # pydantic.ValidationError is a ValueError
    name = "CONFIG_INVALID" if isinstance(e, ValidationError) else "CONFIG_MALFORMED"
    raise CommitterError.from_exception(
      e, name, "config", context="Invalid configuration"
    ) from e
