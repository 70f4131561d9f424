"""
EngineConfig: immutable engine configuration.

Static configuration only (where the catalog lives, how chatty the logs are).
The drink itself is runtime state owned by DrinkBuilder.

Priority: environment variables > config file > defaults.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from drink_builder.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"

CATALOG_ENV_VAR = "DRINK_BUILDER_CATALOG"
LOG_LEVEL_ENV_VAR = "DRINK_BUILDER_LOG_LEVEL"


@dataclass(frozen=True)
class EngineConfig:
    """Complete immutable engine configuration.

    Attributes:
        catalog_path: JSON file with the reference catalog
        log_level: Level name for the drink_builder loggers
        verbose: Force DEBUG logging regardless of log_level
    """

    catalog_path: Path = DEFAULT_CATALOG_PATH
    log_level: str = "WARNING"
    verbose: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.log_level, str) or not isinstance(
            logging.getLevelName(self.log_level.upper()), int
        ):
            raise ValueError(f"log_level must be a logging level name, got {self.log_level}")

    @property
    def logging_level(self) -> int:
        if self.verbose:
            return logging.DEBUG
        return logging.getLevelName(self.log_level.upper())


def load_config(config_path: Optional[str] = None) -> EngineConfig:
    """
    Load configuration from a JSON file and environment variables.

    Args:
        config_path: Path to a JSON config file. Missing files are ignored.

    Returns:
        Immutable EngineConfig instance.
    """
    config_data = {}
    if config_path is not None and os.path.exists(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load config from %s: %s", config_path, e)

    catalog_path = os.environ.get(CATALOG_ENV_VAR) or config_data.get("catalog_path")
    log_level = os.environ.get(LOG_LEVEL_ENV_VAR) or config_data.get("log_level", "WARNING")

    return EngineConfig(
        catalog_path=Path(catalog_path) if catalog_path else DEFAULT_CATALOG_PATH,
        log_level=log_level,
        verbose=bool(config_data.get("verbose", False)),
    )
