"""
Dispatcher - Thread duy nhat goi callback cua user.

Lay batch tu EventQueue va goi callback cho tung entry theo thu tu den.
Exception tu callback duoc log va bo qua de callback loi khong the
lam dung viec giao cac event sau do.
"""

import threading

from filewatch.core.event_queue import EventQueue
from filewatch.core.logging_config import log_debug, log_error
from filewatch.services.interfaces.file_watcher_service import WatchCallback


class Dispatcher:
    """
    Vong lap drain queue -> goi callback, chay tren dispatch thread.

    Attributes:
        _queue: EventQueue dung chung voi source thread
        _callback: Callback (filename, event) cua user
        _stop_event: Stop flag dung chung
        finished: Duoc set ngay truoc khi run() thoat
    """

    def __init__(
        self,
        queue: EventQueue,
        callback: WatchCallback,
        stop_event: threading.Event,
    ):
        self._queue = queue
        self._callback = callback
        self._stop_event = stop_event
        self.finished = threading.Event()

    def run(self) -> None:
        """Entry point cua dispatch thread."""
        try:
            while not self._stop_event.is_set():
                batch = self._queue.take_all()
                for entry in batch:
                    self._deliver(entry.filename, entry.event)
        finally:
            log_debug("[Dispatcher] Exiting")
            self.finished.set()

    def _deliver(self, filename, event) -> None:
        try:
            self._callback(filename, event)
        except Exception as e:
            log_error(f"[Dispatcher] Callback failed for {filename!r} ({event.value})", e)
