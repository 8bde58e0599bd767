"""
Config Loader

Loads editor configuration from a YAML file.
A missing file yields the defaults; environment variables override the
log level and the config path.
"""

import os
import yaml
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/editor.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CanvasConfig(BaseModel):
    """Area in which new nodes are placed"""
    width: float = Field(default=400, gt=0)
    height: float = Field(default=300, gt=0)


class EditorConfig(BaseModel):
    """Complete editor configuration"""
    min_nodes: int = Field(default=2, ge=1)
    cascade_delete: bool = True
    delete_keys: List[str] = Field(default_factory=lambda: ["Delete"])
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level: {value!r}. Must be one of: {list(LOG_LEVELS)}"
            )
        return level


class ConfigLoader:
    """
    Loads EditorConfig from YAML.

    Example usage:
        loader = ConfigLoader(Path("config/editor.yaml"))
        config = loader.load()

        # or, honoring EDITOR_CONFIG and LOG_LEVEL
        config = ConfigLoader.from_env().load()
    """

    def __init__(self, config_path: Path, log_level: Optional[str] = None):
        """
        Initialize loader with config file path.

        Args:
            config_path: YAML file to read
            log_level: Overrides log_level from the file when set
        """
        self.config_path = config_path
        self.log_level = log_level
        logger.info(f"Initialized ConfigLoader with config_path: {config_path}")

    @classmethod
    def from_env(cls) -> "ConfigLoader":
        """Create loader from EDITOR_CONFIG and LOG_LEVEL environment variables"""
        return cls(
            Path(os.getenv("EDITOR_CONFIG", DEFAULT_CONFIG_PATH)),
            log_level=os.getenv("LOG_LEVEL"),
        )

    def load(self) -> EditorConfig:
        """
        Load configuration, falling back to defaults when the file is absent.

        Returns:
            EditorConfig

        Raises:
            ValueError: If the file cannot be parsed or fails validation
        """
        raw = {}

        if self.config_path.exists():
            try:
                with open(self.config_path) as f:
                    raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.error(f"Failed to parse {self.config_path}: {e}")
                raise ValueError(f"Failed to parse {self.config_path}: {e}")

            if not isinstance(raw, dict):
                raise ValueError(
                    f"Invalid config in {self.config_path}: expected a mapping, "
                    f"got {type(raw).__name__}"
                )
        else:
            logger.info(f"No config file at {self.config_path}, using defaults")

        if self.log_level:
            raw["log_level"] = self.log_level

        try:
            config = EditorConfig(**raw)
        except ValidationError as e:
            logger.error(f"Invalid config in {self.config_path}: {e}")
            raise ValueError(f"Invalid config in {self.config_path}: {e}")

        logger.debug(f"Loaded config: {config}")
        return config
