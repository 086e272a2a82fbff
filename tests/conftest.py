import os
import pytest
from datetime import datetime
from media_importer.cancellation import CancellationFlag
from media_importer.events import RecordingEventSink

@pytest.fixture
def stop_flag():
    """A fresh, unset cancellation flag."""
    return CancellationFlag()

@pytest.fixture
def sink():
    """Collects progress/log notifications for assertions."""
    return RecordingEventSink()

@pytest.fixture
def make_media():
    """Writes a file with a fixed modification time (well in the past, so it wins over creation time)."""
    def _make(path, data=b"imagedata", when=datetime(2024, 1, 2, 10, 0, 0)):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        ts = when.timestamp()
        os.utime(path, (ts, ts))
        return path
    return _make
