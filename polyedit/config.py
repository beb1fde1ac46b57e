from pathlib import Path
from typing import Optional
from platformdirs import user_config_dir
from .core.config import Config, ConfigManager
import logging


logger = logging.getLogger(__name__)


CONFIG_DIR = Path(user_config_dir("polyedit"))
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Populated by initialize_managers(), so that importing this module does
# not touch the file system.
config_mgr: Optional[ConfigManager] = None
config: Optional[Config] = None


def initialize_managers(config_file: Path = CONFIG_FILE):
    """
    Loads the configuration. Safe to call multiple times (idempotent).
    """
    global config_mgr, config

    if config_mgr is not None:
        return

    logger.info(f"Initializing configuration from {config_file}")
    config_mgr = ConfigManager(config_file)
    config = config_mgr.config
    logger.info("Config loaded.")
