"""
Event Normalizer - Chuyen raw records cua native facility thanh Event.

Moi backend tra ve buffer theo format rieng:
- Win32 ReadDirectoryChangesW: chuoi FILE_NOTIFY_INFORMATION noi bang offset
- Linux inotify: day cac struct inotify_event lien tiep

Parser cua tung format chi lo viec decode; EventNormalizer ap dung
single-file filter chung cho ca 2.
"""

import os
import struct
from typing import Iterator, List, Tuple

from filewatch.core.logging_config import log_debug, log_warning
from filewatch.core.path_resolver import split_directory_and_file
from filewatch.services.interfaces.file_watcher_service import (
    Event,
    QueueEntry,
    RecordParser,
    WatchTarget,
)


# =============================================================================
# Win32 FILE_NOTIFY_INFORMATION
# =============================================================================
# NextEntryOffset, Action, FileNameLength (bytes), roi den FileName (UTF-16LE)
_NOTIFY_INFORMATION_HEADER = struct.Struct("<III")

FILE_ACTION_ADDED = 0x1
FILE_ACTION_REMOVED = 0x2
FILE_ACTION_MODIFIED = 0x3
FILE_ACTION_RENAMED_OLD_NAME = 0x4
FILE_ACTION_RENAMED_NEW_NAME = 0x5

WIN32_ACTION_MAPPING = {
    FILE_ACTION_ADDED: Event.ADDED,
    FILE_ACTION_REMOVED: Event.REMOVED,
    FILE_ACTION_MODIFIED: Event.MODIFIED,
    FILE_ACTION_RENAMED_OLD_NAME: Event.RENAMED_OLD,
    FILE_ACTION_RENAMED_NEW_NAME: Event.RENAMED_NEW,
}


def parse_notify_information(raw: bytes) -> Iterator[Tuple[str, Event]]:
    """
    Duyet chuoi FILE_NOTIFY_INFORMATION records.

    Ten file duoc decode theo FileNameLength, khong gia dinh NUL-terminated.
    NextEntryOffset == 0 ket thuc chuoi.

    Args:
        raw: Buffer tra ve tu ReadDirectoryChangesW

    Yields:
        (filename, Event) theo thu tu trong buffer
    """
    offset = 0
    header_size = _NOTIFY_INFORMATION_HEADER.size
    while offset + header_size <= len(raw):
        next_offset, action, name_length = _NOTIFY_INFORMATION_HEADER.unpack_from(
            raw, offset
        )
        name_start = offset + header_size
        name = raw[name_start : name_start + name_length].decode(
            "utf-16-le", errors="surrogatepass"
        )

        event = WIN32_ACTION_MAPPING.get(action)
        if event is None:
            log_debug(f"[Normalizer] Skipping unknown action {action:#x} for {name!r}")
        else:
            yield name, event

        if next_offset == 0:
            break
        offset += next_offset


# =============================================================================
# Linux inotify_event
# =============================================================================
# wd, mask, cookie, len, roi den name[len] (NUL-padded)
_INOTIFY_EVENT_HEADER = struct.Struct("iIII")

IN_MODIFY = 0x00000002
IN_MOVED_FROM = 0x00000040
IN_MOVED_TO = 0x00000080
IN_CREATE = 0x00000100
IN_DELETE = 0x00000200
IN_Q_OVERFLOW = 0x00004000

# Thu tu uu tien khi mot mask co nhieu bit. Rename khong duoc ghep cap:
# MOVED_FROM/MOVED_TO la mot cap removed/added doc lap.
INOTIFY_MASK_MAPPING = (
    (IN_CREATE, Event.ADDED),
    (IN_DELETE, Event.REMOVED),
    (IN_MODIFY, Event.MODIFIED),
    (IN_MOVED_FROM, Event.REMOVED),
    (IN_MOVED_TO, Event.ADDED),
)


def parse_inotify_events(raw: bytes) -> Iterator[Tuple[str, Event]]:
    """
    Duyet cac inotify_event records lien tiep trong buffer.

    Moi buoc tien header size + len. Record khong co ten (event cua
    chinh thu muc, IN_IGNORED, IN_Q_OVERFLOW) bi bo qua.

    Args:
        raw: Buffer doc tu inotify file descriptor

    Yields:
        (filename, Event) theo thu tu trong buffer
    """
    offset = 0
    header_size = _INOTIFY_EVENT_HEADER.size
    while offset + header_size <= len(raw):
        _wd, mask, _cookie, name_length = _INOTIFY_EVENT_HEADER.unpack_from(
            raw, offset
        )
        name_start = offset + header_size
        offset = name_start + name_length

        if name_length == 0:
            if mask & IN_Q_OVERFLOW:
                log_warning("[Normalizer] inotify queue overflowed, events were dropped")
            continue

        name = os.fsdecode(raw[name_start : name_start + name_length].rstrip(b"\0"))
        for flag, event in INOTIFY_MASK_MAPPING:
            if mask & flag:
                yield name, event
                break


class EventNormalizer:
    """
    Normalize raw buffer cua mot backend va ap dung single-file filter.

    Attributes:
        _parser: Ham parse format raw cua backend dang dung
        _target: WatchTarget quyet dinh co loc theo ten file hay khong
    """

    def __init__(self, parser: RecordParser, target: WatchTarget):
        self._parser = parser
        self._target = target

    def passes_filter(self, filename: str) -> bool:
        """
        Kiem tra filename co qua single-file filter khong.

        Args:
            filename: Ten file tuong doi so voi thu muc dang theo doi

        Returns:
            True neu khong o single-file mode, hoac ten file trung filter
        """
        if not self._target.single_file_mode:
            return True
        return split_directory_and_file(filename).filename == self._target.filename_filter

    def parse(self, raw: bytes) -> List[QueueEntry]:
        """
        Parse raw buffer thanh danh sach QueueEntry da loc, giu thu tu.

        Args:
            raw: Buffer tu IPlatformSource.poll_blocking()

        Returns:
            List QueueEntry (co the rong)
        """
        return [
            QueueEntry(filename, event)
            for filename, event in self._parser(raw)
            if self.passes_filter(filename)
        ]
