"""
FileWatcher Service - Wiring va lifecycle management.

Class nay chi lam 1 viec: khoi tao cac dependencies
(WatchTarget, IPlatformSource, EventNormalizer, EventQueue, Dispatcher),
start 2 background threads va dung chung theo dung thu tu.

State machine: CONSTRUCTING -> RUNNING -> STOPPING -> STOPPED
"""

import enum
import os
import threading
from typing import Optional, Union

from filewatch.config.watch_settings import WatchSettings, load_watch_settings
from filewatch.core.event_normalizer import EventNormalizer
from filewatch.core.event_queue import EventQueue
from filewatch.core.logging_config import log_debug, log_error
from filewatch.core.path_resolver import resolve_watch_target
from filewatch.services.file_watcher_pkg.dispatcher import Dispatcher
from filewatch.services.file_watcher_pkg.sources import create_platform_source
from filewatch.services.interfaces.file_watcher_service import (
    IFileWatcherService,
    IPlatformSource,
    WatchCallback,
    WatchTarget,
)


class WatcherState(enum.Enum):
    CONSTRUCTING = "constructing"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class FileWatcher(IFileWatcherService):
    """
    Theo doi mot file hoac noi dung mot thu muc, goi callback bat dong bo.

    Wiring:
    - resolve_watch_target -> WatchTarget (file -> single-file mode)
    - IPlatformSource -> InotifySource / Win32Source (co the inject)
    - Source thread: poll_blocking -> EventNormalizer -> EventQueue
    - Dispatch thread: EventQueue.take_all -> callback(filename, event)

    Khoi tao that bai (path khong ton tai, khong dang ky duoc watch)
    raise OSError va khong start thread nao.

    Usage:
        def on_event(filename, event):
            print(filename, event)

        with FileWatcher("config/app.yaml", on_event):
            ...  # callback chay tren dispatch thread

    Attributes:
        _target: WatchTarget da resolve
        _source: Native source, chi source thread dung cho den khi shutdown
        _stop_event: Stop flag dung chung cho ca 2 threads
        _last_error: OSError da lam dung source loop (neu co)
    """

    def __init__(
        self,
        path: Union[str, "os.PathLike[str]"],
        callback: WatchCallback,
        *,
        settings: Optional[WatchSettings] = None,
        source: Optional[IPlatformSource] = None,
    ):
        """
        Resolve path, mo native source va start 2 background threads.

        Args:
            path: File hoac thu muc can theo doi
            callback: Ham (filename, event) -> None, goi tu dispatch thread
            settings: WatchSettings, mac dinh doc tu environment
            source: IPlatformSource chua open, mac dinh theo platform

        Raises:
            OSError: Neu khong resolve duoc path hoac khong mo duoc watch
        """
        self._state = WatcherState.CONSTRUCTING
        self._state_lock = threading.Lock()
        self._settings = settings or load_watch_settings()
        self._last_error: Optional[OSError] = None

        self._target = resolve_watch_target(path)
        self._source = source or create_platform_source(self._settings)
        self._source.open(self._target.resolved_directory)

        self._stop_event = threading.Event()
        self._source_finished = threading.Event()
        self._queue = EventQueue(self._stop_event)

        started = []
        try:
            self._normalizer = EventNormalizer(self._source.record_parser, self._target)
            self._dispatcher = Dispatcher(self._queue, callback, self._stop_event)

            prefix = self._settings.thread_name_prefix
            self._source_thread = threading.Thread(
                target=self._run_source, name=f"{prefix}-source", daemon=True
            )
            self._dispatch_thread = threading.Thread(
                target=self._dispatcher.run, name=f"{prefix}-dispatch", daemon=True
            )
            for thread in (self._dispatch_thread, self._source_thread):
                thread.start()
                started.append(thread)
        except BaseException:
            self._abort_start(started)
            raise

        self._state = WatcherState.RUNNING
        log_debug(f"[FileWatcher] Started watching: {self._target.original_path}")

    def _abort_start(self, started) -> None:
        """Dung cac thread da start va dong source khi khoi tao dang do."""
        self._stop_event.set()
        self._queue.wake_all()
        # Source thread start sau cung nen duoc dung truoc
        for thread in reversed(started):
            if thread is self._source_thread:
                self._source.interrupt()
                self._join_source_thread()
            else:
                thread.join()
        self._source.close()
        self._state = WatcherState.STOPPED

    def _run_source(self) -> None:
        """Entry point cua source thread."""
        try:
            while not self._stop_event.is_set():
                try:
                    raw = self._source.poll_blocking()
                except OSError as e:
                    if not self._stop_event.is_set():
                        self._last_error = e
                        log_error("[FileWatcher] Native read failed, source stopped", e)
                    break

                if raw is None:
                    continue

                entries = self._normalizer.parse(raw)
                if entries:
                    self._queue.append(entries)
        finally:
            log_debug("[FileWatcher] Source thread exiting")
            self._source_finished.set()

    def close(self) -> None:
        """
        Dung theo doi va giai phong native resource.

        Block cho den khi ca source thread va dispatch thread da thoat.
        Goi lan thu 2 tro di khong lam gi. Co the goi tu trong callback:
        khi do khong join dispatch thread, no tu thoat sau khi callback
        hien tai tra ve.
        """
        with self._state_lock:
            if self._state is not WatcherState.RUNNING:
                return
            self._state = WatcherState.STOPPING

        self._stop_event.set()
        self._source.interrupt()
        self._queue.wake_all()

        # Source thread phai thoat truoc khi dong native resource
        self._join_source_thread()
        if threading.current_thread() is not self._dispatch_thread:
            self._dispatch_thread.join()

        self._source.close()
        self._state = WatcherState.STOPPED
        log_debug(f"[FileWatcher] Stopped watching: {self._target.original_path}")

    def _join_source_thread(self) -> None:
        if not self._source.supports_explicit_cancel:
            self._source_thread.join()
            return

        # Cancel chi huy lenh doc dang pending -> gui lai cho den khi thread thoat
        while True:
            self._source_thread.join(self._settings.cancel_retry_interval)
            if not self._source_thread.is_alive():
                return
            self._source.interrupt()

    def is_running(self) -> bool:
        """Kiem tra watcher co dang chay khong."""
        return self._state is WatcherState.RUNNING

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def target(self) -> WatchTarget:
        """Lay WatchTarget da resolve luc khoi tao."""
        return self._target

    @property
    def last_error(self) -> Optional[OSError]:
        """OSError da lam dung source loop, None neu chua co."""
        return self._last_error

    @property
    def source_finished(self) -> bool:
        return self._source_finished.is_set()

    @property
    def dispatcher_finished(self) -> bool:
        return self._dispatcher.finished.is_set()

    def __enter__(self) -> "FileWatcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
