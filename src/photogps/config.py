# src/photogps/config.py
import json
import logging
from pathlib import Path
from typing import Dict, Any

from .constants import DEFAULT_GEO_PRECISION

# Configure logger
logger = logging.getLogger(__name__)

# Config paths
CONFIG_DIR = Path.home() / ".photogps"
CONFIG_FILE = CONFIG_DIR / "settings.json"

DEFAULT_CONFIG = {
    "last_input_dir": "",
    "output_dir": "",  # empty = write next to the photos
    "geo_precision": DEFAULT_GEO_PRECISION,
    "filter_extensions": True,
    "max_workers": None,
    "include_file_info": False,
    "reproject_gcj02": False,
    "export_excel": True,
    "export_csv": True,
    "export_geojson": True,
}

SETTING_KEYS = [key for key in DEFAULT_CONFIG if key != "last_input_dir"]


class ConfigManager:
    @staticmethod
    def load_config() -> Dict[str, Any]:
        """Load the configuration from the JSON file, or return the defaults."""
        if not CONFIG_FILE.exists():
            return DEFAULT_CONFIG.copy()

        try:
            with open(CONFIG_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
                # Merge with defaults to handle new keys
                config = DEFAULT_CONFIG.copy()
                config.update(data)
                return config
        except Exception as e:
            logger.warning(f"Could not load configuration: {e}")
            return DEFAULT_CONFIG.copy()

    @staticmethod
    def save_config(last_input_dir: str = "", **kwargs) -> None:
        """Save the full configuration to the JSON file."""
        current = ConfigManager.load_config()

        if last_input_dir:
            current["last_input_dir"] = str(last_input_dir)

        current.update(kwargs)
        ConfigManager._write(current)

    @staticmethod
    def update_settings(settings: Dict[str, Any]) -> None:
        """Update only processing settings (not the remembered folder)."""
        current = ConfigManager.load_config()
        for key in SETTING_KEYS:
            if key in settings:
                current[key] = settings[key]
        ConfigManager._write(current)

    @staticmethod
    def _write(config: Dict[str, Any]) -> None:
        try:
            CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
            with open(CONFIG_FILE, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=4)
        except Exception as e:
            logger.warning(f"Error saving configuration: {e}")
