"""
Configuration for the cutlist reconciliation layer.

All settings centralized here. Override by creating a Config instance
with custom values, or load overrides from a YAML file.

Usage:
    from cutlist_reconcile.config import Config, default_config

    # Use defaults
    print(default_config.default_thickness_mm)  # 18.0

    # Override for a run
    my_config = Config(duplicates_require_same_ops=True)

    # Or from a file
    my_config = Config.from_yaml("reconcile.yaml")
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Union

import yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """
    Central configuration for the reconciliation components.

    All settings have defaults matching the intake UI behavior.
    Create a new instance to override any setting.
    """

    # === Duplicate detection ===
    default_thickness_mm: float = 18.0      # Used in the key when a part has none
    default_material_key: str = "default"   # Used in the key when material_id is empty
    duplicates_require_same_ops: bool = False  # Fold the encoded ops into the key

    # === Name suggestions ===
    suggestion_confidence: float = 0.85
    min_label_length: int = 2

    # === Shortcodes ===
    default_edgeband_code: str = "EB"
    edgeband_code_length: int = 4           # Chars of edgeband_id used as material code

    # === Logging ===
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Config":
        """
        Build a Config from a YAML mapping of overrides.

        Unknown keys are logged and ignored.

        Raises:
            ValueError: if the file does not hold a mapping
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in data.items():
            if key in known:
                overrides[key] = value
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, path)

        return cls(**overrides)


# Default configuration instance
default_config = Config()
