"""
File Watcher Package - Re-exports cac symbols chinh.

- FileWatcher, WatcherState (lifecycle)
- create_platform_source (chon native backend)
"""

from filewatch.services.file_watcher_pkg.service import FileWatcher, WatcherState
from filewatch.services.file_watcher_pkg.sources import create_platform_source

__all__ = [
    "FileWatcher",
    "WatcherState",
    "create_platform_source",
]
