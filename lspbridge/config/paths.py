# lspbridge/config/paths.py
import os
from pathlib import Path

APP_DIR_NAME = ".lspbridge"
HOME_ENV_VAR = "LSPBRIDGE_HOME"

def get_app_home() -> Path:
    """Root directory for user config and logs. LSPBRIDGE_HOME overrides the default."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / APP_DIR_NAME

def get_user_config_file() -> Path:
    return get_app_home() / "config.json"

def get_user_log_dir() -> Path:
    log_dir = get_app_home() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir
