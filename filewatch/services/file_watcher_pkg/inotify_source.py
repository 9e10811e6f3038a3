"""
Inotify Source - Native source cho Linux.

Dung ctypes bindings cua watchdog (inotify_init, inotify_add_watch,
inotify_rm_watch) thay vi tu khai bao lai libc.

inotify khong co lenh cancel cho mot read() dang block. De shutdown
khong phu thuoc vao event tiep theo, poll_blocking() cho bang poll()
tren ca inotify fd va mot wake pipe; interrupt() ghi vao pipe.
Dung poll() thay vi select() vi fd co the vuot FD_SETSIZE.
"""

import ctypes
import os
import select
from typing import Optional

from watchdog.observers.inotify_c import (
    InotifyConstants,
    inotify_add_watch,
    inotify_init,
    inotify_rm_watch,
)

from filewatch.config.watch_settings import DEFAULT_BUFFER_SIZE
from filewatch.core.event_normalizer import parse_inotify_events
from filewatch.core.logging_config import log_debug
from filewatch.services.interfaces.file_watcher_service import IPlatformSource


LISTEN_MASK = (
    InotifyConstants.IN_MODIFY
    | InotifyConstants.IN_CREATE
    | InotifyConstants.IN_DELETE
    | InotifyConstants.IN_MOVED_FROM
    | InotifyConstants.IN_MOVED_TO
)


def _last_os_error(path: Optional[str] = None) -> OSError:
    err = ctypes.get_errno()
    return OSError(err, os.strerror(err), path)


class InotifySource(IPlatformSource):
    """
    IPlatformSource dung Linux inotify.

    Attributes:
        _inotify_fd: inotify file descriptor (-1 khi chua open)
        _watch_descriptor: Watch descriptor cua thu muc (-1 khi da remove)
        _wake_read, _wake_write: Self-pipe de danh thuc poll()
        _poller: select.poll() tren ca 2 fd
    """

    supports_explicit_cancel = False
    record_parser = staticmethod(parse_inotify_events)

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self._buffer_size = buffer_size
        self._inotify_fd = -1
        self._watch_descriptor = -1
        self._wake_read = -1
        self._wake_write = -1
        self._poller = select.poll()

    def open(self, directory: str) -> None:
        fd = inotify_init()
        if fd < 0:
            raise _last_os_error()

        watch = inotify_add_watch(fd, os.fsencode(directory), LISTEN_MASK)
        if watch < 0:
            error = _last_os_error(directory)
            os.close(fd)
            raise error

        try:
            self._wake_read, self._wake_write = os.pipe()
        except OSError:
            os.close(fd)
            raise

        self._inotify_fd = fd
        self._watch_descriptor = watch
        self._poller.register(fd, select.POLLIN)
        self._poller.register(self._wake_read, select.POLLIN)
        log_debug(f"[Inotify] Watching: {directory}")

    def poll_blocking(self) -> Optional[bytes]:
        ready = {fd for fd, _ in self._poller.poll()}
        if self._wake_read in ready:
            return None
        return os.read(self._inotify_fd, self._buffer_size)

    def interrupt(self) -> None:
        # Bo dang ky truoc, roi danh thuc poll() qua pipe
        if self._watch_descriptor >= 0:
            if inotify_rm_watch(self._inotify_fd, self._watch_descriptor) < 0:
                # EINVAL neu watch da tu bi xoa (vd: thu muc bi xoa)
                log_debug(f"[Inotify] inotify_rm_watch failed: errno {ctypes.get_errno()}")
            self._watch_descriptor = -1
        os.write(self._wake_write, b"\0")

    def close(self) -> None:
        for fd in (self._inotify_fd, self._wake_read, self._wake_write):
            if fd >= 0:
                os.close(fd)
        self._inotify_fd = self._wake_read = self._wake_write = -1
        log_debug("[Inotify] Closed inotify descriptor")
