"""
Win32 Source - Native source cho Windows.

Dung winapi bindings cua watchdog: mo directory handle, goi
ReadDirectoryChangesW dong bo, va CancelIoEx de huy lenh doc dang
pending tu thread khac.
"""

import ctypes
import ctypes.wintypes
from typing import Optional

from watchdog.observers import winapi

from filewatch.config.watch_settings import DEFAULT_BUFFER_SIZE
from filewatch.core.event_normalizer import parse_notify_information
from filewatch.core.logging_config import log_debug, log_warning
from filewatch.services.interfaces.file_watcher_service import IPlatformSource


# Chi theo doi noi dung truc tiep cua thu muc
WATCH_SUBTREE = False


class Win32Source(IPlatformSource):
    """
    IPlatformSource dung ReadDirectoryChangesW.

    CancelIoEx chi huy lenh doc dang pending: neu interrupt() den truoc
    khi source thread kip goi ReadDirectoryChangesW, lenh cancel mat tac
    dung. Lifecycle controller gui lai interrupt() cho den khi thread thoat.

    Attributes:
        _handle: Directory handle (None khi chua open / da close)
        _buffer: Buffer nhan FILE_NOTIFY_INFORMATION records
    """

    supports_explicit_cancel = True
    record_parser = staticmethod(parse_notify_information)

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self._buffer_size = buffer_size
        self._handle = None
        self._buffer = None

    def open(self, directory: str) -> None:
        # CreateFileW errcheck raise WinError neu handle invalid
        self._handle = winapi.get_directory_handle(directory)
        self._buffer = ctypes.create_string_buffer(self._buffer_size)
        log_debug(f"[Win32] Watching: {directory}")

    def poll_blocking(self) -> Optional[bytes]:
        bytes_returned = ctypes.wintypes.DWORD()
        try:
            winapi.ReadDirectoryChangesW(
                self._handle,
                ctypes.byref(self._buffer),
                len(self._buffer),
                WATCH_SUBTREE,
                winapi.WATCHDOG_FILE_NOTIFY_FLAGS,
                ctypes.byref(bytes_returned),
                None,
                None,
            )
        except OSError as e:
            if e.winerror == winapi.ERROR_OPERATION_ABORTED:
                return None
            raise

        if bytes_returned.value == 0:
            log_warning("[Win32] Change buffer overflowed, events were dropped")
            return b""
        return self._buffer.raw[: bytes_returned.value]

    def interrupt(self) -> None:
        try:
            winapi.CancelIoEx(self._handle, None)
        except OSError as e:
            # ERROR_NOT_FOUND: chua co lenh doc nao dang pending
            log_debug(f"[Win32] CancelIoEx: {e}")

    def close(self) -> None:
        if self._handle is not None:
            winapi.CloseHandle(self._handle)
            self._handle = None
            log_debug("[Win32] Closed directory handle")
