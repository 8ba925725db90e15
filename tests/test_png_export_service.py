"""Tests for memopad.services.png_export_service"""

import errno
import io
import re
from pathlib import Path

import pytest
from PyQt6.QtCore import QCoreApplication
from PyQt6.QtGui import QImage

from memopad.core.pen_style import PenStyle
from memopad.services.png_export_service import (
    EncodeFailure,
    IoFailure,
    PngExportService,
    PngExportTask,
    StorageUnavailable,
    create_unique_image_path,
    encode_png,
    export_snapshot,
    flatten_snapshot,
    prepare_export_dir,
    write_new_png,
    write_png,
)
from memopad.services import png_export_service

FILENAME_PATTERN = re.compile(r"image-\d+\.png")


@pytest.fixture
def drawn_surface(surface, tracker):
    surface.set_background_color(0xFFFF0000)
    surface.set_pen_style(PenStyle(color=0xFF0000FF, width=6.0))
    tracker.start((5, 5))
    tracker.extend((25, 25))
    surface.commit_stroke(tracker.finish((45, 45)))
    return surface


def test_flatten_snapshot_is_opaque(drawn_surface):
    image = flatten_snapshot(drawn_surface.snapshot())

    assert image.format() == QImage.Format.Format_ARGB32
    assert image.pixel(0, 0) == 0xFFFF0000
    assert image.pixel(25, 25) == 0xFF0000FF


def test_encode_empty_image_fails():
    with pytest.raises(EncodeFailure):
        encode_png(QImage())


def test_encode_writes_png_signature(drawn_surface):
    data = encode_png(flatten_snapshot(drawn_surface.snapshot()))

    assert data.startswith(b"\x89PNG\r\n\x1a\n")


def test_prepare_export_dir_creates_missing_dirs(tmp_path):
    target = tmp_path / "a" / "MemoPad"

    assert prepare_export_dir(target) == target
    assert target.is_dir()


def test_prepare_export_dir_rejects_file(tmp_path):
    blocker = tmp_path / "MemoPad"
    blocker.write_text("not a dir")

    with pytest.raises(StorageUnavailable):
        prepare_export_dir(blocker)


def test_prepare_export_dir_below_file_fails(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    with pytest.raises(StorageUnavailable):
        prepare_export_dir(blocker / "MemoPad")


def test_unique_path_uses_timestamp(tmp_path):
    path = create_unique_image_path(tmp_path, clock=lambda: 1234)

    assert path == tmp_path / "image-1234.png"


def test_unique_path_retries_after_collision(tmp_path):
    (tmp_path / "image-1000.png").write_bytes(b"")
    stamps = iter([1000, 1000, 1001])
    sleeps = []

    path = create_unique_image_path(tmp_path, clock=lambda: next(stamps), sleep=sleeps.append)

    assert path.name == "image-1001.png"
    assert len(sleeps) == 2


def test_unique_path_falls_back_to_suffix(tmp_path):
    (tmp_path / "image-5.png").write_bytes(b"")
    sleeps = []

    path = create_unique_image_path(
        tmp_path, clock=lambda: 5, sleep=sleeps.append, max_attempts=3
    )

    assert re.fullmatch(r"image-5-[0-9a-f]{8}\.png", path.name)
    assert not path.exists()
    assert len(sleeps) == 2


def test_write_png_into_missing_dir_fails(tmp_path):
    with pytest.raises(IoFailure):
        write_png(tmp_path / "missing" / "image-1.png", b"data")


class FailingFile(io.BytesIO):
    """Binary file whose write or close fails like a full disk."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on

    def write(self, data):
        if self.fail_on == "write":
            raise OSError(errno.ENOSPC, "No space left on device")
        return super().write(data)

    def close(self):
        if self.fail_on == "close":
            self.fail_on = None
            raise OSError(errno.EIO, "Input/output error")
        super().close()


@pytest.mark.parametrize("fail_on", ["write", "close"])
def test_write_png_reports_write_and_close_errors(monkeypatch, tmp_path, fail_on):
    monkeypatch.setattr(
        png_export_service, "open", lambda path, mode: FailingFile(fail_on), raising=False
    )

    with pytest.raises(IoFailure, match="Could not write"):
        write_png(tmp_path / "image-1.png", b"data")


def test_write_png_never_overwrites(tmp_path):
    existing = tmp_path / "image-1.png"
    existing.write_bytes(b"other writer")

    with pytest.raises(FileExistsError):
        write_png(existing, b"data")

    assert existing.read_bytes() == b"other writer"


def test_name_taken_before_open_is_retried(monkeypatch, tmp_path):
    taken = tmp_path / "image-7.png"
    taken.write_bytes(b"other writer")
    names = iter([taken, tmp_path / "image-8.png"])
    monkeypatch.setattr(
        png_export_service, "create_unique_image_path", lambda directory: next(names)
    )

    path = write_new_png(tmp_path, b"data")

    assert path == tmp_path / "image-8.png"
    assert path.read_bytes() == b"data"
    assert taken.read_bytes() == b"other writer"


def test_no_free_name_is_io_failure(monkeypatch, tmp_path):
    taken = tmp_path / "image-7.png"
    taken.write_bytes(b"")
    monkeypatch.setattr(png_export_service, "create_unique_image_path", lambda directory: taken)
    monkeypatch.setattr(png_export_service.Config, "EXPORT_MAX_NAME_ATTEMPTS", 3)

    with pytest.raises(IoFailure):
        write_new_png(tmp_path, b"data")


def test_export_snapshot_writes_file(drawn_surface, tmp_path):
    result = export_snapshot(drawn_surface.snapshot(), tmp_path / "MemoPad")

    assert result.ok
    assert result.path.parent == tmp_path / "MemoPad"
    assert FILENAME_PATTERN.fullmatch(result.path.name)
    assert result.path.read_bytes() == result.data
    assert result.uri.startswith("file://")

    decoded = QImage(str(result.path))
    assert decoded.pixel(25, 25) == 0xFF0000FF
    assert decoded.pixel(45, 5) == 0xFFFF0000


def test_export_snapshot_reports_storage_failure(drawn_surface, tmp_path):
    blocker = tmp_path / "MemoPad"
    blocker.write_text("")

    result = export_snapshot(drawn_surface.snapshot(), blocker)

    assert not result.ok
    assert isinstance(result.error, StorageUnavailable)
    assert result.error.kind == "StorageUnavailable"
    assert result.path is None


def test_export_snapshot_reports_encode_failure(tracker, tmp_path):
    from memopad.core.compositing_surface import CompositingSurface

    result = export_snapshot(CompositingSurface(tracker).snapshot(), tmp_path)

    assert isinstance(result.error, EncodeFailure)
    assert list(tmp_path.iterdir()) == []


def test_export_uses_snapshot_not_live_state(drawn_surface, tmp_path):
    snapshot = drawn_surface.snapshot()
    drawn_surface.clear()
    drawn_surface.set_background_color(0xFF00FF00)

    result = export_snapshot(snapshot, tmp_path)

    decoded = QImage.fromData(result.data, "PNG")
    assert decoded.pixel(25, 25) == 0xFF0000FF
    assert decoded.pixel(45, 5) == 0xFFFF0000


def test_export_task_emits_complete(drawn_surface, tmp_path):
    task = PngExportTask(drawn_surface.snapshot(), tmp_path)
    completed = []
    task.signals.export_complete.connect(completed.append)

    task.run()

    assert len(completed) == 1
    assert FILENAME_PATTERN.fullmatch(Path(completed[0]).name)


def test_export_task_emits_failure(drawn_surface, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    task = PngExportTask(drawn_surface.snapshot(), blocker)
    failures = []
    task.signals.export_failed.connect(lambda kind, message: failures.append(kind))

    task.run()

    assert failures == ["StorageUnavailable"]


def test_service_exports_in_background(drawn_surface, tmp_path):
    service = PngExportService(base_dir=tmp_path)
    finished = []
    service.export_finished.connect(finished.append)

    service.export_async(drawn_surface.snapshot())
    assert service.wait_for_done(5000)
    for _ in range(10):
        QCoreApplication.processEvents()
        if finished:
            break

    assert len(finished) == 1
    assert service.pending_count == 0
    assert len(list(tmp_path.glob("image-*.png"))) == 1


def test_service_export_sync(drawn_surface, tmp_path):
    service = PngExportService(base_dir=tmp_path)

    result = service.export_sync(drawn_surface.snapshot())

    assert result.ok
    assert result.path.exists()
