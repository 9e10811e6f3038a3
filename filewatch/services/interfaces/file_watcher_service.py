"""
Interfaces cho File Watcher Service.

Dinh nghia contracts va data types dung chung cho:
- Event, QueueEntry, WatchTarget: Tu vung su kien va cau hinh watch
- IPlatformSource: Mo/doc/huy/dong native watch resource
- IFileWatcherService: Lifecycle cua mot watcher
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterator, NamedTuple, Optional, Tuple


class Event(enum.Enum):
    """Loai thay doi da duoc normalize, doc lap voi backend."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    RENAMED_OLD = "renamed_old"
    RENAMED_NEW = "renamed_new"


class QueueEntry(NamedTuple):
    """Mot su kien trong queue: (filename, event), theo thu tu den."""

    filename: str
    event: Event


@dataclass(frozen=True)
class WatchTarget:
    """
    Ket qua resolve path luc khoi tao watcher. Read-only sau khi tao.

    Attributes:
        original_path: Path do caller truyen vao
        resolved_directory: Thu muc thuc su duoc dang ky voi native facility
        filename_filter: Ten file can giu lai (chi co trong single-file mode)
        single_file_mode: True neu path tro toi mot regular file
    """

    original_path: str
    resolved_directory: str
    filename_filter: Optional[str]
    single_file_mode: bool


# Callback cua user: (filename, event) -> None
WatchCallback = Callable[[str, Event], None]

# Parser chuyen raw bytes cua mot backend thanh cac cap (filename, Event)
RecordParser = Callable[[bytes], Iterator[Tuple[str, Event]]]


class UnsupportedPlatformError(OSError):
    """Khong co native backend nao cho platform hien tai."""


class IPlatformSource(ABC):
    """
    Interface cho native change-notification source cua mot thu muc.

    Moi implementation so huu duy nhat mot native handle:
    open() dung 1 lan, close() dung 1 lan, sau khi source thread da thoat.

    Attributes:
        supports_explicit_cancel: True neu interrupt() la cancel primitive
            chi tac dung len mot lenh doc dang pending (can gui lai neu
            lenh doc chua bat dau). False neu interrupt() co hieu luc
            "dinh" cho moi lan poll sau do.
        record_parser: Ham parse raw buffer cua backend nay
    """

    supports_explicit_cancel: bool = False
    record_parser: RecordParser

    @abstractmethod
    def open(self, directory: str) -> None:
        """
        Dang ky theo doi thu muc voi native facility.

        Args:
            directory: Thu muc can theo doi

        Raises:
            OSError: Kem native error code neu khong dang ky duoc
        """
        ...

    @abstractmethod
    def poll_blocking(self) -> Optional[bytes]:
        """
        Block cho den khi co raw records hoac co yeu cau dung.

        Returns:
            Raw bytes cua mot hoac nhieu records, hoac None neu bi interrupt

        Raises:
            OSError: Neu chinh lenh cho/doc bi loi
        """
        ...

    @abstractmethod
    def interrupt(self) -> None:
        """Danh thuc poll_blocking() dang pending tu thread khac."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Giai phong native resource. Chi goi mot lan."""
        ...


class IFileWatcherService(ABC):
    """
    Interface cho dich vu theo doi mot file hoac mot thu muc.

    Moi implementation phai dam bao:
    - Khoi tao that bai -> raise, khong co thread nao duoc start
    - close() block cho den khi ca 2 background threads da thoat
    - Callback chi duoc goi tu mot thread, tuan tu
    """

    @abstractmethod
    def close(self) -> None:
        """Dung theo doi va giai phong native resource."""
        ...

    @abstractmethod
    def is_running(self) -> bool:
        """Kiem tra watcher co dang chay khong."""
        ...

    @property
    @abstractmethod
    def target(self) -> WatchTarget:
        """Lay WatchTarget da resolve luc khoi tao."""
        ...
