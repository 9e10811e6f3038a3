"""
Event Queue - Mailbox giua source thread va dispatch thread.

Source thread append theo batch, dispatch thread lay ra toan bo noi dung
trong mot lan swap. Callback duoc goi ngoai lock nen mot callback cham
khong chan source thread append tiep.
"""

import threading
from typing import Iterable, List

from filewatch.services.interfaces.file_watcher_service import QueueEntry


class EventQueue:
    """
    Queue FIFO co lock + condition, drain nguyen batch moi lan take_all().

    Attributes:
        _stop_event: Stop flag dung chung voi lifecycle controller
        _condition: Lock + wait/notify cho consumer
        _entries: Noi dung hien tai, theo thu tu den
    """

    def __init__(self, stop_event: threading.Event):
        self._stop_event = stop_event
        self._condition = threading.Condition()
        self._entries: List[QueueEntry] = []

    def append(self, entries: Iterable[QueueEntry]) -> None:
        """
        Them entries vao cuoi queue va danh thuc consumer.

        Args:
            entries: Cac QueueEntry theo thu tu den
        """
        with self._condition:
            self._entries.extend(entries)
            self._condition.notify_all()

    def take_all(self) -> List[QueueEntry]:
        """
        Block cho den khi queue co du lieu hoac stop, roi lay ra toan bo.

        Returns:
            Batch cac entries theo thu tu den (rong neu bi stop khi queue rong)
        """
        with self._condition:
            self._condition.wait_for(
                lambda: bool(self._entries) or self._stop_event.is_set()
            )
            batch, self._entries = self._entries, []
        return batch

    def wake_all(self) -> None:
        """Danh thuc moi consumer dang cho (dung khi shutdown)."""
        with self._condition:
            self._condition.notify_all()

    def __len__(self) -> int:
        with self._condition:
            return len(self._entries)
