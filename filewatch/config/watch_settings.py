"""
WatchSettings - Typed settings dataclass cho Watcher.

Gom cac tham so dieu chinh hanh vi cua native source va lifecycle
thay vi hardcode rai rac trong tung backend.

Modules:
- WatchSettings: Dataclass chua toan bo settings cua mot Watcher
- from_dict(): Tao WatchSettings tu dict (vd: doc tu file cau hinh cua app)
- to_dict(): Chuyen doi WatchSettings thanh dict
- load_watch_settings(): Doc overrides tu environment variables

Su dung:
    settings = load_watch_settings()
    watcher = Watcher("src/", on_event, settings=settings)
"""

import os
import typing
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from filewatch.config.paths import BUFFER_SIZE_ENV_VAR, CANCEL_RETRY_ENV_VAR


# === Default values cho settings ===
# 256 KiB, du cho vai nghin records moi lan doc
DEFAULT_BUFFER_SIZE = 256 * 1024
# Buffer nho hon muc nay khong chua noi mot record voi ten file dai toi da
MIN_BUFFER_SIZE = 4096
DEFAULT_CANCEL_RETRY_INTERVAL = 0.05


@dataclass(frozen=True)
class WatchSettings:
    """
    Typed settings cho mot Watcher instance.

    Moi field co default hop ly; chi can override khi co nhu cau dac biet.
    """

    # Kich thuoc buffer (bytes) cho moi lan blocking read tu native facility
    buffer_size: int = DEFAULT_BUFFER_SIZE
    # Khoang cach (giay) giua cac lan gui lai lenh cancel khi join source thread
    cancel_retry_interval: float = DEFAULT_CANCEL_RETRY_INTERVAL
    # Prefix cho ten 2 background threads
    thread_name_prefix: str = "filewatch"

    def __post_init__(self) -> None:
        if self.buffer_size < MIN_BUFFER_SIZE:
            raise ValueError(
                f"buffer_size must be at least {MIN_BUFFER_SIZE}, got {self.buffer_size}"
            )
        if self.cancel_retry_interval <= 0:
            raise ValueError(
                f"cancel_retry_interval must be positive, got {self.cancel_retry_interval}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WatchSettings":
        """
        Tao WatchSettings tu dict, chi lay cac keys trung voi field names.

        Value sai type hoac ngoai range bi bo qua va dung default thay the,
        khong raise loi.

        Args:
            data: Dict settings

        Returns:
            WatchSettings instance voi values tu dict, fallback ve defaults
        """
        hints = typing.get_type_hints(cls)
        defaults = cls()

        accepted: dict[str, Any] = {}
        for key, value in data.items():
            expected_type = hints.get(key)
            if expected_type is None:
                continue

            # Strict type check: reject bool khi expect int
            if isinstance(value, bool):
                continue
            # Cho phep int cho field float (vd: cancel_retry_interval=1)
            if expected_type is float and isinstance(value, int):
                value = float(value)
            if not isinstance(value, expected_type):
                continue

            # Validate tung field rieng, value ngoai range -> dung default
            try:
                cls(**{**defaults.to_dict(), key: value})
            except ValueError:
                continue
            accepted[key] = value

        return cls(**accepted)

    def to_dict(self) -> dict[str, Any]:
        """
        Chuyen doi WatchSettings thanh dict.

        Returns:
            Dict voi toan bo settings
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _read_env(name: str, cast: type) -> Optional[Any]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw)
    except ValueError:
        return None


def load_watch_settings(environ_overrides: bool = True) -> WatchSettings:
    """
    Load WatchSettings, ap dung overrides tu environment variables.

    Bien moi truong ho tro:
    - FILEWATCH_BUFFER_SIZE: int
    - FILEWATCH_CANCEL_RETRY_INTERVAL: float (giay)

    Gia tri khong parse duoc hoac khong hop le bi bo qua.

    Args:
        environ_overrides: False de bo qua environment (chi dung defaults)

    Returns:
        WatchSettings instance
    """
    if not environ_overrides:
        return WatchSettings()

    data: dict[str, Any] = {}
    buffer_size = _read_env(BUFFER_SIZE_ENV_VAR, int)
    if buffer_size is not None:
        data["buffer_size"] = buffer_size
    retry_interval = _read_env(CANCEL_RETRY_ENV_VAR, float)
    if retry_interval is not None:
        data["cancel_retry_interval"] = retry_interval

    return WatchSettings.from_dict(data)
