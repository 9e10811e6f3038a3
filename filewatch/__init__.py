"""
filewatch - Theo doi thay doi cua mot file hoac mot thu muc.

Dung native change-notification cua OS (inotify tren Linux,
ReadDirectoryChangesW tren Windows) va goi callback bat dong bo
voi filename tuong doi + mot trong 5 loai Event.

Su dung:
    from filewatch import Event, Watcher

    def on_event(filename: str, event: Event) -> None:
        print(filename, event)

    with Watcher("src/", on_event):
        ...
"""

from filewatch.config.watch_settings import WatchSettings, load_watch_settings
from filewatch.services.file_watcher_pkg.service import FileWatcher, WatcherState
from filewatch.services.interfaces.file_watcher_service import (
    Event,
    IPlatformSource,
    QueueEntry,
    UnsupportedPlatformError,
    WatchTarget,
)

Watcher = FileWatcher

__all__ = [
    "Event",
    "FileWatcher",
    "IPlatformSource",
    "QueueEntry",
    "UnsupportedPlatformError",
    "WatchSettings",
    "WatchTarget",
    "Watcher",
    "WatcherState",
    "load_watch_settings",
]
