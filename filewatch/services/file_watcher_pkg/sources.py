"""
Chon IPlatformSource phu hop voi platform dang chay.

Import backend lazy: bindings cua watchdog cho inotify/winapi chi load
duoc tren dung OS cua no.
"""

import sys

from filewatch.config.watch_settings import WatchSettings
from filewatch.services.interfaces.file_watcher_service import (
    IPlatformSource,
    UnsupportedPlatformError,
)


def create_platform_source(settings: WatchSettings) -> IPlatformSource:
    """
    Tao native source cho platform hien tai (chua open).

    Args:
        settings: WatchSettings (dung buffer_size)

    Returns:
        InotifySource tren Linux, Win32Source tren Windows

    Raises:
        UnsupportedPlatformError: Neu platform khong co backend
    """
    if sys.platform == "win32":
        from filewatch.services.file_watcher_pkg.win32_source import Win32Source

        return Win32Source(buffer_size=settings.buffer_size)

    if sys.platform.startswith("linux"):
        from filewatch.services.file_watcher_pkg.inotify_source import InotifySource

        return InotifySource(buffer_size=settings.buffer_size)

    raise UnsupportedPlatformError(f"No native watch backend for platform {sys.platform!r}")
