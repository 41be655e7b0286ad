# lspbridge/config/loader.py
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Dict, Any

from pydantic import ValidationError
from loguru import logger

from .schema import BridgeConfig
from .paths import get_user_config_file

_cached_config: Optional[BridgeConfig] = None

def _read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Reads the raw JSON object from the user config file.

    A file that cannot be parsed (or whose root is not an object) is moved
    aside to `config.json.corrupted` and an empty dict is returned so that
    defaults are used.
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded_data = json.load(f)
        if not isinstance(loaded_data, dict):
            logger.error(f"User config file {config_path} does not contain a valid JSON object. Corrupted.")
            raise json.JSONDecodeError("Config root is not an object", "", 0)
        return loaded_data
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Failed to load or parse user config file {config_path}: {e}")
        try:
            backup_path = config_path.with_suffix(".json.corrupted")
            if backup_path.exists():
                backup_path.unlink(missing_ok=True)
            config_path.rename(backup_path)
            logger.info(f"Backed up corrupted config to: {backup_path}")
        except OSError as backup_err:
            logger.error(f"Failed to backup corrupted config: {backup_err}")
        return {}


def load_config() -> BridgeConfig:
    """
    Loads the bridge configuration from the user config file, falling back to
    defaults when the file is missing, corrupt or fails validation.
    """
    global _cached_config
    if _cached_config:
        return _cached_config

    config_path = get_user_config_file()
    loaded_data: Dict[str, Any] = {}
    config_source = "defaults"

    if config_path.exists():
        logger.info(f"Loading user configuration from: {config_path}")
        loaded_data = _read_config_file(config_path)
        config_source = "user file" if loaded_data else "defaults (user file corrupt)"
    else:
        logger.info("User config file not found. Using default settings.")

    try:
        config = BridgeConfig(**loaded_data)
        logger.info(f"Configuration loaded successfully from: {config_source}")
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        logger.warning("Falling back to default configuration.")
        config = BridgeConfig()

    _cached_config = config
    return config

def save_config(config: BridgeConfig) -> bool:
    """Saves the configuration using an atomic write via NamedTemporaryFile. Returns True on success."""
    config_path = get_user_config_file()
    logger.info(f"Saving configuration to: {config_path}")
    temp_file_path: Optional[Path] = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file lives in the target directory so os.replace stays atomic
        with tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            dir=config_path.parent,
            prefix=f".{config_path.name}_tmp",
            suffix=".json",
            delete=False
        ) as temp_f:
            temp_file_path = Path(temp_f.name)
            logger.debug(f"Writing config to temporary file: {temp_file_path}")
            temp_f.write(config.model_dump_json(indent=4))
            temp_f.flush()
            os.fsync(temp_f.fileno())

        os.replace(temp_file_path, config_path)
        temp_file_path = None
        logger.info("Configuration saved successfully.")
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Failed to save configuration to {config_path}: {e}")
        return False
    finally:
        if temp_file_path and temp_file_path.exists():
            logger.warning(f"Cleaning up leftover temporary config file: {temp_file_path}")
            try:
                temp_file_path.unlink()
            except OSError as unlink_err:
                logger.error(f"Failed to remove temporary config file {temp_file_path}: {unlink_err}")


def get_config() -> BridgeConfig:
    """Returns the cached configuration object, loading if necessary."""
    if _cached_config is None:
        return load_config()
    return _cached_config

def reset_config_cache() -> None:
    """Drops the cached configuration so the next get_config() reloads from disk."""
    global _cached_config
    _cached_config = None
