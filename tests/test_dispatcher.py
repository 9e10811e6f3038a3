"""
Tests cho Dispatcher.

Coverage:
- Callback duoc goi theo thu tu den, tren dispatch thread
- Callback raise exception khong chan cac event truoc/sau
- finished duoc set khi thread thoat
"""

import threading
from unittest.mock import patch

from filewatch.core.event_queue import EventQueue
from filewatch.services.file_watcher_pkg.dispatcher import Dispatcher
from filewatch.services.interfaces.file_watcher_service import Event, QueueEntry


def _start(callback):
    stop = threading.Event()
    queue = EventQueue(stop)
    dispatcher = Dispatcher(queue, callback, stop)
    thread = threading.Thread(target=dispatcher.run, name="test-dispatch")
    thread.start()
    return stop, queue, dispatcher, thread


def _shutdown(stop, queue, thread):
    stop.set()
    queue.wake_all()
    thread.join(2.0)


class TestDispatcher:
    """Test vong lap dispatch."""

    def test_delivers_in_arrival_order(self, waiter):
        received = []
        stop, queue, _, thread = _start(lambda f, e: received.append((f, e)))

        queue.append([QueueEntry("a", Event.ADDED), QueueEntry("a", Event.MODIFIED)])
        queue.append([QueueEntry("b", Event.REMOVED)])

        assert waiter(lambda: len(received) == 3)
        _shutdown(stop, queue, thread)

        assert received == [
            ("a", Event.ADDED),
            ("a", Event.MODIFIED),
            ("b", Event.REMOVED),
        ]

    def test_callback_runs_on_dispatch_thread_only(self, waiter):
        thread_names = []
        stop, queue, _, thread = _start(
            lambda f, e: thread_names.append(threading.current_thread().name)
        )

        queue.append([QueueEntry(str(i), Event.MODIFIED) for i in range(10)])
        assert waiter(lambda: len(thread_names) == 10)
        _shutdown(stop, queue, thread)

        assert set(thread_names) == {"test-dispatch"}

    def test_failing_callback_does_not_block_delivery(self, waiter):
        received = []

        def callback(filename, event):
            if filename == "bad":
                raise RuntimeError("boom")
            received.append(filename)

        stop, queue, _, thread = _start(callback)

        with patch("filewatch.services.file_watcher_pkg.dispatcher.log_error") as mock_log:
            queue.append(
                [
                    QueueEntry("before", Event.ADDED),
                    QueueEntry("bad", Event.ADDED),
                    QueueEntry("after", Event.ADDED),
                ]
            )
            queue.append([QueueEntry("next-batch", Event.ADDED)])

            assert waiter(lambda: len(received) == 3)
            _shutdown(stop, queue, thread)

        assert received == ["before", "after", "next-batch"]
        assert thread.is_alive() is False
        mock_log.assert_called_once()

    def test_finished_flag_set_on_exit(self):
        stop, queue, dispatcher, thread = _start(lambda f, e: None)
        assert not dispatcher.finished.is_set()

        _shutdown(stop, queue, thread)

        assert not thread.is_alive()
        assert dispatcher.finished.is_set()
