from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple


@dataclass
class MediaRecord:
    """
    A queued file on its way through one import iteration.
    """
    path: Path
    ext: str
    capture_datetime: datetime


@dataclass
class PlannedTarget:
    path: Path
    already_present: bool = False   # same-size file found at `path`


@dataclass
class ImportResult:
    """
    Counters accumulated over one import run.

    `skipped` only counts files already present at the destination.
    Files dropped for being hidden, unsupported or undated are in no bucket.
    """
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    cancelled: bool = False

    def as_tuple(self) -> Tuple[int, int]:
        return self.imported, self.skipped


@dataclass
class ProgressEvent:
    status: Optional[str]
    value: Optional[int]
    maximum: int
