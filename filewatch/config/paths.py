"""
Application Paths - Centralized path definitions cho filewatch

Module nay dinh nghia cac duong dan va ten bien moi truong dung chung.
Tap trung o mot noi de tranh hardcode rai rac.

Du lieu cua thu vien (chi khi bat file logging) nam tai: ~/.filewatch/
- logs/      : Log files
"""

import os
from pathlib import Path


# =============================================================================
# Ten ung dung - Single source of truth cho naming
# =============================================================================
APP_NAME = "filewatch"

# =============================================================================
# Thu muc goc va thu muc con
# =============================================================================
APP_DIR = Path.home() / f".{APP_NAME}"
LOG_DIR = APP_DIR / "logs"

# =============================================================================
# Environment Variables
# =============================================================================
DEBUG_ENV_VAR = "FILEWATCH_DEBUG"
LOG_FILE_ENV_VAR = "FILEWATCH_LOG_FILE"
BUFFER_SIZE_ENV_VAR = "FILEWATCH_BUFFER_SIZE"
CANCEL_RETRY_ENV_VAR = "FILEWATCH_CANCEL_RETRY_INTERVAL"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


# Kiem tra debug mode va file logging tu environment variable
DEBUG_MODE = _env_flag(DEBUG_ENV_VAR)
LOG_TO_FILE = _env_flag(LOG_FILE_ENV_VAR)

