import os
import logging
from pathlib import Path
from typing import Iterator, List, Optional

from .. import config
from ..cancellation import CancellationFlag
from ..events import EventSink, SafeEventSink
from ..exceptions import ScanError


def is_hidden(name: str) -> bool:
    return name.startswith(config.HIDDEN_PREFIX)


def media_extension(name: str) -> Optional[str]:
    """Returns the lower-cased extension if it is on the allow-list."""
    _, dot, ext = name.rpartition('.')
    if not dot or not ext:
        return None
    ext = ext.lower()
    return ext if ext in config.MEDIA_EXTS else None


class MediaScanner:
    def __init__(self, stop_flag: CancellationFlag, events: Optional[EventSink] = None):
        self.stop_flag = stop_flag
        self.events = SafeEventSink(events)

    def scan(self, root: Path, path_queue: Optional[List[Path]] = None) -> List[Path]:
        """
        Walks `root` depth-first and appends every supported media file to
        `path_queue`, in the order the OS lists directory entries.

        Hidden entries are skipped, and so are their subtrees. Symlinked
        directories are not followed.

        Returns the queue, or an empty list if the stop flag was raised
        at any point during the walk.

        Raises:
            ScanError: a directory could not be read. The whole scan is
                       aborted rather than importing a partial tree.
        """
        if path_queue is None:
            path_queue = []

        # One entry iterator per open directory; the top is the one being expanded.
        stack: List[Iterator[os.DirEntry]] = []

        if self.stop_flag.is_set():
            return []
        stack.append(self._open_dir(Path(root), path_queue))

        while stack:
            if self.stop_flag.is_set():
                return []

            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            if is_hidden(entry.name):
                continue

            if entry.is_dir(follow_symlinks=False):
                if self.stop_flag.is_set():
                    return []
                stack.append(self._open_dir(Path(entry.path), path_queue))
            elif entry.is_file() and media_extension(entry.name):
                path = Path(entry.path)
                path_queue.append(path)
                self.events.log(f"Queued {path}")
                self.events.progress(maximum=len(path_queue))
                if self.stop_flag.is_set():
                    return []

        logging.info(f"Scan complete. Queued {len(path_queue)} files.")
        return path_queue

    def _open_dir(self, directory: Path, path_queue: List[Path]) -> Iterator[os.DirEntry]:
        self.events.progress(status=f"Scanning {directory}...", maximum=len(path_queue))
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            logging.error(f"Cannot read {directory}: {e}")
            raise ScanError(directory, e) from e
        return iter(entries)
