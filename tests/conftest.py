"""Fixtures dung chung: fake native source va helpers tao raw buffers.

FakeSource thay the inotify/Win32 de test lifecycle va threading ma
khong phu thuoc vao OS hay timing cua filesystem that.
"""

import queue
import struct
import threading
import time

import pytest

from filewatch.core.event_normalizer import parse_inotify_events
from filewatch.services.interfaces.file_watcher_service import IPlatformSource

_STOP = object()


def inotify_record(name: str, mask: int, wd: int = 1, pad_to: int = 16) -> bytes:
    """Tao mot inotify_event record, name NUL-padded nhu kernel lam."""
    encoded = name.encode()
    if encoded:
        padded_len = (len(encoded) // pad_to + 1) * pad_to
        encoded = encoded.ljust(padded_len, b"\0")
    return struct.pack("iIII", wd, mask, 0, len(encoded)) + encoded


def notify_information_buffer(records) -> bytes:
    """Tao chuoi FILE_NOTIFY_INFORMATION tu list (action, name)."""
    chunks = []
    for action, name in records:
        encoded = name.encode("utf-16-le")
        # Records duoc align 4 bytes
        body = struct.pack("<II", action, len(encoded)) + encoded
        size = 4 + len(body)
        size += (-size) % 4
        chunks.append((body, size))

    out = b""
    for index, (body, size) in enumerate(chunks):
        next_offset = size if index < len(chunks) - 1 else 0
        record = struct.pack("<I", next_offset) + body
        out += record.ljust(size, b"\0")
    return out


class FakeSource(IPlatformSource):
    """
    IPlatformSource in-memory. Test day raw buffers qua push(),
    loi qua fail(); interrupt() lam poll_blocking() tra ve None.
    """

    record_parser = staticmethod(parse_inotify_events)

    def __init__(self, open_error=None):
        self._items = queue.Queue()
        self._open_error = open_error
        self.opened_directory = None
        self.interrupt_calls = 0
        self.close_calls = 0

    def open(self, directory):
        if self._open_error is not None:
            raise self._open_error
        self.opened_directory = directory

    def push(self, *records: bytes) -> None:
        self._items.put(b"".join(records))

    def fail(self, error: OSError) -> None:
        self._items.put(error)

    def poll_blocking(self):
        item = self._items.get()
        if item is _STOP:
            return None
        if isinstance(item, BaseException):
            raise item
        return item

    def interrupt(self):
        self.interrupt_calls += 1
        self._items.put(_STOP)

    def close(self):
        self.close_calls += 1


class LossyCancelSource(FakeSource):
    """
    Mo phong cancel primitive kieu CancelIoEx: interrupt() chi co tac dung
    khi dang co lenh doc pending, den som hon thi bi mat.
    """

    supports_explicit_cancel = True

    def __init__(self):
        super().__init__()
        self.read_gate = threading.Event()
        self.lost_interrupts = 0
        self._lock = threading.Lock()
        self._reading = False
        self._cancelled = threading.Event()

    def poll_blocking(self):
        self.read_gate.wait()
        with self._lock:
            self._reading = True
        self._cancelled.wait()
        with self._lock:
            self._reading = False
        return None

    def interrupt(self):
        with self._lock:
            self.interrupt_calls += 1
            if self._reading:
                self._cancelled.set()
            else:
                self.lost_interrupts += 1


def wait_until(predicate, timeout: float = 2.0, interval: float = 0.01) -> bool:
    """Poll predicate cho den khi True hoac het timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def make_fake_source():
    return FakeSource


@pytest.fixture
def lossy_cancel_source():
    return LossyCancelSource()


@pytest.fixture
def make_record():
    return inotify_record


@pytest.fixture
def make_notify_buffer():
    return notify_information_buffer


@pytest.fixture
def waiter():
    return wait_until
