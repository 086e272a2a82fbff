"""
Progress and log notifications.

The scanner and importer report through an `EventSink`. Delivery is
fire-and-forget: wrap any sink in `SafeEventSink` and a failing observer
can never abort a run.
"""
import logging
from typing import List, Optional, Protocol

from tqdm import tqdm

from .models import ProgressEvent


class EventSink(Protocol):
    def progress(self, status: Optional[str], value: Optional[int], maximum: int) -> None:
        ...

    def log(self, message: str) -> None:
        ...


class LoggingEventSink:
    """Routes notifications into the logging module."""

    def progress(self, status: Optional[str], value: Optional[int], maximum: int) -> None:
        if status:
            logging.info(status)
        elif value is not None:
            logging.debug(f"Progress {value}/{maximum}")

    def log(self, message: str) -> None:
        logging.debug(message)


class TqdmEventSink:
    """
    Renders progress as a tqdm bar.

    `value=None` means "maximum grew" (scan phase), so only the total moves.
    Log messages go through `tqdm.write` to keep the bar intact.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.importing = False
        self.bar = tqdm(total=0, desc="Scanning", unit="file")

    def progress(self, status: Optional[str], value: Optional[int], maximum: int) -> None:
        if self.bar.total != maximum:
            self.bar.total = maximum
        if value is not None:
            if not self.importing:
                self.importing = True
                self.bar.set_description("Importing")
            self.bar.n = value
        if status and self.verbose:
            tqdm.write(status)
        self.bar.refresh()

    def log(self, message: str) -> None:
        if self.verbose:
            tqdm.write(message)

    def close(self):
        self.bar.close()


class RecordingEventSink:
    """Keeps every notification in memory. Handy for tests and embedding."""

    def __init__(self):
        self.events: List[ProgressEvent] = []
        self.messages: List[str] = []

    def progress(self, status: Optional[str], value: Optional[int], maximum: int) -> None:
        self.events.append(ProgressEvent(status, value, maximum))

    def log(self, message: str) -> None:
        self.messages.append(message)

    @property
    def statuses(self) -> List[str]:
        return [e.status for e in self.events if e.status]


class SafeEventSink:
    """Forwards to another sink and drops anything it raises."""

    def __init__(self, sink: Optional[EventSink] = None):
        self.sink = sink if sink is not None else LoggingEventSink()

    def progress(self, status: Optional[str] = None, value: Optional[int] = None, maximum: int = 0) -> None:
        try:
            self.sink.progress(status, value, maximum)
        except Exception as e:
            logging.debug(f"Progress notification dropped: {e}")

    def log(self, message: str) -> None:
        try:
            self.sink.log(message)
        except Exception as e:
            logging.debug(f"Log notification dropped: {e}")
