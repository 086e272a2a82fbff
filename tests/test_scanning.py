import os
import pytest
from pathlib import Path
from media_importer.scanning.filesystem import MediaScanner, media_extension, is_hidden
from media_importer.exceptions import ScanError


def build_tree(root: Path):
    (root / "a.jpg").write_bytes(b"a")
    (root / "B.JPEG").write_bytes(b"b")
    (root / "notes.txt").write_text("skip")
    (root / "noext").write_bytes(b"x")
    (root / ".hidden.jpg").write_bytes(b"h")

    sub = root / "trip" / "day1"
    sub.mkdir(parents=True)
    (sub / "clip.MOV").write_bytes(b"m")
    (sub / "scan.tif").write_bytes(b"t")
    (root / "trip" / "raw.cr2").write_bytes(b"r")

    hidden_dir = root / ".thumbnails"
    hidden_dir.mkdir()
    (hidden_dir / "thumb.jpg").write_bytes(b"t")

    # A directory named like a media file is still a directory
    (root / "album.jpg").mkdir()
    (root / "album.jpg" / "inner.png").write_bytes(b"p")


@pytest.mark.parametrize(
    "name,expected",
    [
        ("photo.jpg", "jpg"),
        ("photo.JPG", "jpg"),
        ("clip.Mp4", "mp4"),
        ("movie.wmv", "wmv"),
        ("scan.TIFF", "tiff"),
        ("raw.cr2", None),
        ("archive.tar.gz", None),
        ("noext", None),
        ("trailingdot.", None),
    ],
)
def test_media_extension(name, expected):
    assert media_extension(name) == expected


def test_is_hidden():
    assert is_hidden(".DS_Store")
    assert is_hidden("._IMG_0001.JPG")
    assert not is_hidden("IMG_0001.JPG")


def test_scan_finds_exactly_supported_visible_files(tmp_path, stop_flag, sink):
    build_tree(tmp_path)

    found = MediaScanner(stop_flag, sink).scan(tmp_path, [])

    assert set(found) == {
        tmp_path / "a.jpg",
        tmp_path / "B.JPEG",
        tmp_path / "trip" / "day1" / "clip.MOV",
        tmp_path / "trip" / "day1" / "scan.tif",
        tmp_path / "album.jpg" / "inner.png",
    }
    assert len(found) == 5
    assert all(p.is_file() for p in found)


def test_scan_is_depth_first(tmp_path, stop_flag):
    d1 = tmp_path / "d1"
    d2 = d1 / "d2"
    d2.mkdir(parents=True)
    (d1 / "x1.jpg").write_bytes(b"1")
    (d1 / "x2.jpg").write_bytes(b"2")
    (d2 / "y.jpg").write_bytes(b"3")
    (tmp_path / "z.jpg").write_bytes(b"4")
    (tmp_path / "w.jpg").write_bytes(b"5")

    found = MediaScanner(stop_flag).scan(tmp_path)

    # Everything under d1 is emitted as one contiguous block
    idx = [i for i, p in enumerate(found) if d1 in p.parents]
    assert len(idx) == 3
    assert idx == list(range(idx[0], idx[0] + 3))


def test_scan_appends_to_given_queue(tmp_path, stop_flag):
    (tmp_path / "a.jpg").write_bytes(b"a")
    queue = [Path("/already/there.jpg")]

    found = MediaScanner(stop_flag).scan(tmp_path, queue)

    assert found is queue
    assert found == [Path("/already/there.jpg"), tmp_path / "a.jpg"]


def test_scan_emits_notifications(tmp_path, stop_flag, sink):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "a.jpg").write_bytes(b"a")

    MediaScanner(stop_flag, sink).scan(tmp_path, [])

    assert f"Scanning {tmp_path}..." in sink.statuses
    assert f"Scanning {tmp_path / 'sub'}..." in sink.statuses
    assert sink.messages == [f"Queued {tmp_path / 'sub' / 'a.jpg'}"]
    assert sink.events[-1].maximum == 1
    assert sink.events[-1].value is None


def test_scan_returns_empty_when_cancelled_before_start(tmp_path, stop_flag, sink):
    (tmp_path / "a.jpg").write_bytes(b"a")
    stop_flag.set()

    assert MediaScanner(stop_flag, sink).scan(tmp_path, []) == []
    assert sink.events == []


def test_scan_stops_right_after_cancel(tmp_path, stop_flag):
    for i in range(20):
        (tmp_path / f"{i:02d}.jpg").write_bytes(b"x")

    class StopOnFirstQueued:
        def __init__(self):
            self.queued = 0

        def progress(self, status, value, maximum):
            pass

        def log(self, message):
            self.queued += 1
            stop_flag.set()

    observer = StopOnFirstQueued()
    queue = []
    found = MediaScanner(stop_flag, observer).scan(tmp_path, queue)

    assert found == []
    assert observer.queued == 1
    assert len(queue) == 1


def test_scan_missing_root_raises(tmp_path, stop_flag):
    with pytest.raises(ScanError) as exc:
        MediaScanner(stop_flag).scan(tmp_path / "missing", [])
    assert exc.value.path == tmp_path / "missing"


def test_scan_unreadable_subdir_aborts_whole_scan(monkeypatch, tmp_path, stop_flag):
    good = tmp_path / "good"
    bad = tmp_path / "bad"
    good.mkdir()
    bad.mkdir()
    (good / "a.jpg").write_bytes(b"a")
    (bad / "b.jpg").write_bytes(b"b")

    real_scandir = os.scandir

    def fake_scandir(path):
        if Path(path) == bad:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    import media_importer.scanning.filesystem as fs_module
    monkeypatch.setattr(fs_module.os, "scandir", fake_scandir)

    with pytest.raises(ScanError) as exc:
        MediaScanner(stop_flag).scan(tmp_path, [])
    assert exc.value.path == bad
    assert isinstance(exc.value.cause, PermissionError)


def test_scan_handles_deep_trees(tmp_path, stop_flag):
    current = tmp_path
    for i in range(60):
        current = current / f"d{i}"
    current.mkdir(parents=True)
    (current / "deep.jpg").write_bytes(b"d")

    assert MediaScanner(stop_flag).scan(tmp_path) == [current / "deep.jpg"]


def test_scan_does_not_follow_directory_symlinks(tmp_path, stop_flag):
    real = tmp_path / "real"
    real.mkdir()
    (real / "a.jpg").write_bytes(b"a")
    try:
        (real / "loop").symlink_to(tmp_path, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")

    assert MediaScanner(stop_flag).scan(tmp_path) == [real / "a.jpg"]
