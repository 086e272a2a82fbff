import logging
from pathlib import Path
from typing import Optional

from . import devices
from .cancellation import CancellationFlag
from .events import EventSink
from .models import ImportResult
from .organization.importer import FileImporter
from .organization.naming import preview_filename
from .scanning.filesystem import MediaScanner


class MediaImporterApp:
    """
    Entry point for hosts (the CLI, or any UI): start/stop an import and
    validate filename templates.

    `start` blocks for the whole run; call it from a worker thread and
    `stop` from anywhere else.
    """

    def __init__(self, events: Optional[EventSink] = None):
        self.events = events
        self.stop_flag = CancellationFlag()

    def start(self, source: Path, destination: Path, filename_template: str) -> ImportResult:
        """
        Scans `source` and imports the media found into `destination`.

        Raises:
            ScanError: part of the source tree could not be read.
        """
        self.stop_flag.reset()

        logging.info(f"Scanning {source}...")
        scanner = MediaScanner(self.stop_flag, self.events)
        found = scanner.scan(Path(source), [])

        if not found:
            return ImportResult(cancelled=self.stop_flag.is_set())

        logging.info(f"Importing {len(found)} files into {destination}...")
        importer = FileImporter(self.stop_flag, self.events)
        return importer.import_files(found, Path(destination), filename_template)

    def stop(self) -> bool:
        """Requests cancellation of the running import. No-op when idle."""
        self.stop_flag.set()
        return True

    def preview_filename_template(self, filename_template: str) -> str:
        return preview_filename(filename_template)

    def default_source(self) -> str:
        return devices.default_source()
