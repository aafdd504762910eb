"""Workshop configuration with YAML support."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import Field

from workshop.schemas import BaseSchema


class WorkshopConfig(BaseSchema):
    """Settings for the SQL workshop sandbox."""

    # Only requests for this course reach the sandbox
    course: str = "sql"

    # Budget checked after each query completes
    timeout_ms: int = Field(default=500, ge=0)

    # Worker threads for concurrent runs
    max_workers: int = Field(default=4, ge=1)

    log_level: str = "INFO"


def load_config(yaml_path: str | Path) -> WorkshopConfig:
    """Load workshop configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        WorkshopConfig instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or has out-of-range values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not data or not isinstance(data, dict):
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

    try:
        return WorkshopConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {yaml_path}: {e}") from e


def save_config(config: WorkshopConfig, yaml_path: str | Path) -> None:
    """Save workshop configuration to YAML file.

    Args:
        config: WorkshopConfig to save
        yaml_path: Path where to save YAML file
    """
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.to_dict()

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
