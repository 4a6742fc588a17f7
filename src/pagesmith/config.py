"""Configuration loader with YAML and environment variable support.

Reads ~/.config/pagesmith/config.yaml when present and applies
PAGESMITH_* environment overrides on top. A missing file is not an error:
every setting has a default.

Environment variables:
- PAGESMITH_STORAGE_PAGE_PATH: Override storage.page_path
- PAGESMITH_STORAGE_EXPORT_NAME: Override storage.export_name
- PAGESMITH_EDITOR_TEMPLATE: Override editor.default_template
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pagesmith.models.config import Config
from pagesmith.utils.logging import get_logger

logger = get_logger(__name__)

def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. If None, uses ~/.config/pagesmith/config.yaml

    Returns:
        Validated Config object

    Raises:
        ValueError: If config file is invalid
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "pagesmith" / "config.yaml"

    if config_path.exists():
        with config_path.open() as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
        logger.debug("config_file_loaded", path=str(config_path))
    else:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping")

    data = _apply_env_overrides(data)

    return Config(**data)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration data.

    Environment variables use the format: PAGESMITH_SECTION_KEY
    For example: PAGESMITH_STORAGE_PAGE_PATH sets data['storage']['page_path']

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    if not data.get("storage"):
        data["storage"] = {}
    if not data.get("editor"):
        data["editor"] = {}

    if env_page_path := os.getenv("PAGESMITH_STORAGE_PAGE_PATH"):
        data["storage"]["page_path"] = env_page_path

    if env_export_name := os.getenv("PAGESMITH_STORAGE_EXPORT_NAME"):
        data["storage"]["export_name"] = env_export_name

    if env_template := os.getenv("PAGESMITH_EDITOR_TEMPLATE"):
        data["editor"]["default_template"] = env_template

    return data
