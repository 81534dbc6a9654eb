# src/app/config_loader.py
import os
from pathlib import Path

import yaml

CONFIG_PATH_ENV = "MCQ_RELAY_CONFIG"


def load_config(config_path: str = None) -> dict:
    """Charge la configuration YAML du relais (config.yaml par défaut, ou MCQ_RELAY_CONFIG)."""
    if config_path is None:
        config_path = os.getenv(CONFIG_PATH_ENV)

    if config_path is None:
        # config.yaml à côté de ce script (src/app)
        config_path = Path(__file__).parent / "config.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
