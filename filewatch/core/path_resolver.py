"""
Path Resolver - Tach path thanh thu muc + ten file va chon che do watch.

Native facilities chi theo doi duoc thu muc. Khi user muon theo doi
mot file, ta theo doi thu muc chua no va loc theo ten file.
"""

import os
import stat
import sys
from typing import NamedTuple, Tuple, Union

from filewatch.core.logging_config import log_debug
from filewatch.services.interfaces.file_watcher_service import WatchTarget

# Thu muc mac dinh khi path khong co separator (vd: "test.txt")
CURRENT_DIRECTORY = "./"

if sys.platform == "win32":
    DEFAULT_SEPARATORS: Tuple[str, ...] = ("\\", "/")
else:
    DEFAULT_SEPARATORS = ("/",)


class PathParts(NamedTuple):
    """Thu muc (giu separator cuoi) va ten file cua mot path."""

    directory: str
    filename: str


def split_directory_and_file(
    path: str, separators: Tuple[str, ...] = DEFAULT_SEPARATORS
) -> PathParts:
    """
    Tach path tai separator cuoi cung.

    Khong dung os.path.split vi can giu nguyen separator cuoi cua
    thu muc va tra ve "./" khi path khong co phan thu muc.

    Args:
        path: Path can tach
        separators: Cac ky tu duoc coi la separator

    Returns:
        PathParts(directory, filename)

    Examples:
        >>> split_directory_and_file("a.txt")
        PathParts(directory='./', filename='a.txt')
        >>> split_directory_and_file("a/b/c.txt")
        PathParts(directory='a/b/', filename='c.txt')
    """
    pivot = max(path.rfind(sep) for sep in separators) + 1
    directory = path[:pivot]
    return PathParts(directory or CURRENT_DIRECTORY, path[pivot:])


def resolve_watch_target(path: Union[str, "os.PathLike[str]"]) -> WatchTarget:
    """
    Resolve path cua user thanh WatchTarget.

    Regular file -> single-file mode, theo doi thu muc chua file.
    Con lai -> theo doi chinh path do nhu mot thu muc.

    Args:
        path: File hoac thu muc can theo doi

    Returns:
        WatchTarget da resolve

    Raises:
        OSError: Neu khong stat duoc path (khong ton tai, khong co quyen)
    """
    path_str = os.fspath(path)
    mode = os.stat(path_str).st_mode

    if stat.S_ISREG(mode):
        parts = split_directory_and_file(path_str)
        target = WatchTarget(
            original_path=path_str,
            resolved_directory=parts.directory,
            filename_filter=parts.filename,
            single_file_mode=True,
        )
    else:
        target = WatchTarget(
            original_path=path_str,
            resolved_directory=path_str,
            filename_filter=None,
            single_file_mode=False,
        )

    log_debug(f"[PathResolver] Resolved {path_str!r} -> {target}")
    return target
