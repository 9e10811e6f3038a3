"""
Logging Configuration - Centralized logging setup

Cung cap logging nhat quan cho toan bo filewatch.
Mac dinh chi log ra console (stderr). Bat FILEWATCH_LOG_FILE=1 de ghi
them vao ~/.filewatch/logs/

File logging:
- Log rotation (max 5 files, 2MB each)
- Buffered writes (reduce disk I/O)
- INFO level for file (DEBUG only when needed)
"""

import logging
import logging.handlers
import sys
from typing import Optional

from filewatch.config.paths import APP_NAME, LOG_DIR, DEBUG_MODE, LOG_TO_FILE

# Logger singleton
_logger: Optional[logging.Logger] = None

# Log rotation config
MAX_LOG_SIZE = 2 * 1024 * 1024  # 2MB per file
MAX_LOG_FILES = 5  # Keep 5 backup files
BUFFER_CAPACITY = 100  # Buffer 100 log records before flush


def get_logger() -> logging.Logger:
    """
    Get hoac tao logger singleton.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    _logger = logging.getLogger(APP_NAME)
    _logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

    # Avoid duplicate handlers
    if _logger.handlers:
        return _logger

    # Console handler (INFO level, or DEBUG if debug mode)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)
    console_format = logging.Formatter("[%(levelname)s] %(message)s")
    console_handler.setFormatter(console_format)
    _logger.addHandler(console_handler)

    if not LOG_TO_FILE:
        return _logger

    # File handler with rotation (INFO level normally, DEBUG if debug mode)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        log_file = LOG_DIR / f"{APP_NAME}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=MAX_LOG_FILES,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

        file_format = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(threadName)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_format)

        # Wrap with MemoryHandler for buffered writes (reduces disk I/O)
        memory_handler = logging.handlers.MemoryHandler(
            capacity=BUFFER_CAPACITY,
            flushLevel=logging.ERROR,  # Flush immediately on ERROR
            target=file_handler,
        )
        memory_handler.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

        _logger.addHandler(memory_handler)

    except OSError as e:
        # Log to console if file logging fails
        _logger.warning(f"Could not create log file: {e}")

    return _logger


def flush_logs():
    """
    Flush buffered logs to disk.
    Goi truoc khi process exit de dam bao tat ca logs duoc ghi.
    """
    if _logger:
        for handler in _logger.handlers:
            handler.flush()


def set_debug_mode(enabled: bool):
    """
    Enable or disable debug mode at runtime.

    Args:
        enabled: True to enable DEBUG level logging
    """
    global DEBUG_MODE
    DEBUG_MODE = enabled

    logger = get_logger()
    new_level = logging.DEBUG if enabled else logging.INFO
    logger.setLevel(new_level)
    for handler in logger.handlers:
        handler.setLevel(new_level)


def log_error(message: str, exc: Optional[BaseException] = None):
    """Log error voi optional exception details"""
    logger = get_logger()
    if exc:
        logger.error(f"{message}: {exc}", exc_info=exc if DEBUG_MODE else None)
    else:
        logger.error(message)


def log_warning(message: str):
    """Log warning"""
    get_logger().warning(message)


def log_info(message: str):
    """Log info"""
    get_logger().info(message)


def log_debug(message: str):
    """Log debug - only written if DEBUG_MODE is enabled"""
    if DEBUG_MODE:
        get_logger().debug(message)
