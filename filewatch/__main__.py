"""
CLI nho de theo doi mot path va in ra tung event.

    python -m filewatch path/to/dir_or_file [--debug]

Dung bang Ctrl+C.
"""

import argparse
import time

from filewatch.core.logging_config import flush_logs, log_info, set_debug_mode
from filewatch.services.file_watcher_pkg.service import FileWatcher
from filewatch.services.interfaces.file_watcher_service import Event


def _print_event(filename: str, event: Event) -> None:
    print(f"{event.value:<12} {filename}", flush=True)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="filewatch",
        description="Print changes to a file or to the contents of a directory",
    )
    parser.add_argument("path", help="file or directory to watch")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    if args.debug:
        set_debug_mode(True)

    try:
        watcher = FileWatcher(args.path, _print_event)
    except OSError as e:
        parser.exit(1, f"filewatch: cannot watch {args.path}: {e}\n")

    log_info(f"[CLI] Watching {watcher.target.original_path}, Ctrl+C to stop")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.close()
        flush_logs()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
