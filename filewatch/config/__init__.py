"""
Config Package - Chua cac constants va cau hinh cua filewatch

Bao gom:
- paths: Duong dan va ten bien moi truong
- watch_settings: Typed settings cho Watcher
"""

from filewatch.config.watch_settings import (
    WatchSettings,
    DEFAULT_BUFFER_SIZE,
    load_watch_settings,
)

__all__ = [
    "WatchSettings",
    "DEFAULT_BUFFER_SIZE",
    "load_watch_settings",
]
