import shutil
import logging
from pathlib import Path
from typing import List, Optional

from ..cancellation import CancellationFlag
from ..events import EventSink, SafeEventSink
from ..exceptions import NameCollisionError, TemplateError
from ..metadata.extract import TimestampResolver
from ..models import ImportResult, MediaRecord
from ..scanning.filesystem import is_hidden
from .naming import FilenamePlanner


class FileImporter:
    def __init__(self,
                 stop_flag: CancellationFlag,
                 events: Optional[EventSink] = None,
                 resolver: Optional[TimestampResolver] = None,
                 planner: Optional[FilenamePlanner] = None):
        self.stop_flag = stop_flag
        self.events = SafeEventSink(events)
        self.resolver = resolver or TimestampResolver()
        self.planner = planner or FilenamePlanner()

    def import_files(self, path_queue: List[Path], destination: Path, template: str) -> ImportResult:
        """
        Copies every queued file into `destination` under its timestamp name.

        Files already present (same name, same size) are counted as skipped.
        Copy errors and exhausted collision suffixes are counted as failed and
        never stop the run. Files without a usable timestamp are dropped.

        Checks the stop flag before each file and returns the counts so far
        once it is set.
        """
        destination = Path(destination)
        result = ImportResult()
        total = len(path_queue)

        for i, path in enumerate(path_queue):
            if self.stop_flag.is_set():
                result.cancelled = True
                logging.warning(f"Import cancelled after {i} of {total} files.")
                break

            record = self._make_record(Path(path))
            if record is None:
                continue

            try:
                target = self.planner.plan(record.path, record.capture_datetime, template, destination, record.ext)
            except (NameCollisionError, TemplateError) as e:
                logging.error(f"Cannot name {record.path}: {e}")
                self.events.log(f"Failed {record.path}: {e}")
                result.failed += 1
                continue

            if target.already_present:
                self.events.log(f"Skipping {target.path}")
                result.skipped += 1
                continue

            self.events.progress(
                status=f"Copying {record.path} to {target.path}...",
                value=i,
                maximum=total,
            )

            try:
                target.path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(str(record.path), str(target.path))
            except OSError as e:
                logging.warning(f"Failed to copy {record.path} -> {target.path}: {e}")
                self._discard_partial(target.path)
                result.failed += 1
                continue

            result.imported += 1
            self.events.log(f"Copied {record.path} to {target.path}")

        self.events.progress(status="Finished", value=total, maximum=total)
        logging.info(
            f"Import finished: {result.imported} imported, {result.skipped} skipped, "
            f"{result.failed} failed{' (cancelled)' if result.cancelled else ''}."
        )
        return result

    def _make_record(self, path: Path) -> Optional[MediaRecord]:
        if is_hidden(path.name):
            return None

        ext = path.suffix[1:]
        if not ext:
            return None

        dt = self.resolver.resolve(path)
        if dt is None:
            logging.debug(f"No timestamp for {path}, dropping it.")
            return None

        return MediaRecord(path=path, ext=ext, capture_datetime=dt)

    def _discard_partial(self, path: Path):
        # The planner only hands out free names, so anything here is our own half-written copy.
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logging.debug(f"Could not remove partial copy {path}: {e}")
