import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Tuple

import exifread
from pymediainfo import MediaInfo

from .. import config


class TimestampResolver:
    """
    Best-effort capture time for a single file.

    Strategies, in order:
      - Embedded EXIF `DateTimeOriginal` via 'exifread'.
      - Container dates via 'pymediainfo' (videos only).
      - The earlier of the filesystem creation and modification times.

    Every strategy swallows its own failures; `resolve` never raises.
    """

    def resolve(self, path: Path) -> Optional[datetime]:
        dt = self.get_exif_datetime(path)
        if dt is None and path.suffix[1:].lower() in config.VIDEO_EXTS:
            dt = self.get_video_datetime(path)
        if dt is None:
            dt = self.get_file_datetime(path)
        return dt

    def get_exif_datetime(self, path: Path) -> Optional[datetime]:
        try:
            with path.open('rb') as f:
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")
            return None

        if config.CAPTURE_DATE_TAG not in tags:
            return None
        return parse_capture_date(str(tags[config.CAPTURE_DATE_TAG]))

    def get_video_datetime(self, path: Path) -> Optional[datetime]:
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            logging.debug(f"MediaInfo failed for {path}: {e}")
            return None

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.VIDEO_DATE_FIELDS:
                val = getattr(track, field, None)
                if val:
                    dt = parse_container_date(str(val))
                    if dt:
                        return dt
        return None

    def get_file_datetime(self, path: Path) -> Optional[datetime]:
        try:
            created, modified = file_times(path)
        except OSError as e:
            logging.debug(f"Cannot stat {path}: {e}")
            return None

        # Copies often bump mtime past the real creation time, or the reverse.
        ts = modified if created is None else min(created, modified)
        return datetime.fromtimestamp(ts)


def file_times(path: Path) -> Tuple[Optional[float], float]:
    """(creation, modification) epoch seconds. Creation is None where the platform has none."""
    st = path.stat()
    return getattr(st, 'st_birthtime', None), st.st_mtime


def parse_capture_date(value: str) -> Optional[datetime]:
    """Parses "YYYY:MM:DD HH:MM:SS" (EXIF) or "YYYY-MM-DD HH:MM:SS" into a naive datetime."""
    value = value.strip()
    value = value[:10].replace(':', '-') + value[10:]
    try:
        return datetime.strptime(value, config.CAPTURE_DATE_LAYOUT)
    except ValueError:
        return None


def parse_container_date(value: str) -> Optional[datetime]:
    """
    Parses MediaInfo dates such as "2023-01-01 12:00:00 UTC" or
    "UTC 2023-01-01 12:00:00". UTC stamps are converted to local time.
    """
    is_utc = "UTC" in value
    clean = value.replace("UTC", "").strip()
    if "." in clean:
        clean = clean.split(".")[0]

    dt = parse_capture_date(clean)
    if dt is None:
        try:
            dt = datetime.fromisoformat(clean)
        except ValueError:
            return None

    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    if is_utc:
        return dt.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    return dt
