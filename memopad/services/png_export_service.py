"""
PNG Export Service - Flatten the drawing and write it as a PNG file

Exports always work on a SurfaceSnapshot taken on the UI thread, so a stroke
committed while an export is running cannot race with the flatten/encode
step.

Files are written to {export_dir}/image-<unixMillis>.png.
"""

import logging
import threading
import time
import uuid as uuid_lib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Set, TYPE_CHECKING

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, QBuffer, QIODevice, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import QImage, QPainter

from ..config import Config

if TYPE_CHECKING:
    from ..core.compositing_surface import SurfaceSnapshot

logger = logging.getLogger(__name__)


# ==================== Errors ====================

class ExportFailure(Exception):
    """Base class for recoverable export failures."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class StorageUnavailable(ExportFailure):
    """Export directory cannot be created or is not a directory."""


class IoFailure(ExportFailure):
    """Output file cannot be opened, written or closed."""


class EncodeFailure(ExportFailure):
    """Raster could not be encoded as PNG."""


@dataclass(frozen=True)
class ExportResult:
    """Outcome of an export. Exactly one of (path or data) / error is set."""
    path: Optional[Path] = None
    data: Optional[bytes] = None
    error: Optional[ExportFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def uri(self) -> Optional[str]:
        return self.path.resolve().as_uri() if self.path else None


# ==================== Raster ====================

def flatten_snapshot(snapshot: 'SurfaceSnapshot') -> QImage:
    """
    Composite the committed layer over the background color.

    Args:
        snapshot: Copy of the surface state

    Returns:
        New ARGB32 image the size of the committed layer in device pixels

    Raises:
        EncodeFailure: If the snapshot holds no layer
    """
    layer = snapshot.layer
    if layer is None or layer.isNull():
        raise EncodeFailure("Nothing to export: surface has no size")

    image = QImage(layer.size(), QImage.Format.Format_ARGB32)
    image.setDevicePixelRatio(snapshot.device_pixel_ratio)
    image.fill(snapshot.background)

    painter = QPainter(image)
    try:
        painter.drawImage(QRectF(QPointF(0, 0), image.deviceIndependentSize()), layer)
    finally:
        painter.end()
    return image


def encode_png(image: QImage, quality: int = Config.PNG_QUALITY) -> bytes:
    """
    Encode an image as PNG bytes.

    Raises:
        EncodeFailure: If Qt reports the encoding failed
    """
    if image.isNull():
        raise EncodeFailure("Cannot encode an empty image")

    buffer = QBuffer()
    try:
        if not buffer.open(QIODevice.OpenModeFlag.WriteOnly):
            raise EncodeFailure("Could not open encode buffer")
        if not image.save(buffer, "PNG", quality):
            raise EncodeFailure(
                f"PNG encoding failed for {image.width()}x{image.height()} image"
            )
        return bytes(buffer.data().data())
    finally:
        buffer.close()


# ==================== Files ====================

_timestamp_lock = threading.Lock()
_last_timestamp_ms = 0


def _timestamp_ms() -> int:
    """Wall clock in milliseconds, never lower than a previous call."""
    global _last_timestamp_ms
    with _timestamp_lock:
        now = int(time.time() * 1000)
        _last_timestamp_ms = max(_last_timestamp_ms, now)
        return _last_timestamp_ms


def prepare_export_dir(base_dir: Path) -> Path:
    """
    Make sure the export directory exists.

    Raises:
        StorageUnavailable: If it cannot be created or is not a directory
    """
    base_dir = Path(base_dir)
    if not base_dir.exists():
        try:
            base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Could not create {base_dir}: {e}") from e

    if not base_dir.is_dir():
        raise StorageUnavailable(f"Not a directory: {base_dir}")
    return base_dir


def create_unique_image_path(
    base_dir: Path,
    extension: str = Config.EXPORT_EXTENSION,
    clock: Optional[Callable[[], int]] = None,
    sleep: Optional[Callable[[float], None]] = None,
    max_attempts: int = Config.EXPORT_MAX_NAME_ATTEMPTS
) -> Path:
    """
    Generate a file path that does not exist yet.

    Format: image-<unixMillis>.<extension>. On collision waits
    EXPORT_RETRY_DELAY_MS and takes a fresh timestamp. After max_attempts
    collisions a random suffix is appended.

    Args:
        base_dir: Directory for the file
        extension: File extension without dot
        clock: Millisecond timestamp source
        sleep: Sleep function (seconds)
        max_attempts: Timestamp attempts before falling back

    Returns:
        Path that did not exist at the time of the check
    """
    clock = clock or _timestamp_ms
    sleep = sleep or time.sleep
    prefix = Config.EXPORT_FILENAME_PREFIX

    millis = 0
    for attempt in range(max_attempts):
        if attempt:
            sleep(Config.EXPORT_RETRY_DELAY_MS / 1000.0)
        millis = clock()
        path = base_dir / f"{prefix}{millis}.{extension}"
        if not path.exists():
            return path

    logger.warning(f"Filename collisions after {max_attempts} attempts in {base_dir}")
    while True:
        path = base_dir / f"{prefix}{millis}-{uuid_lib.uuid4().hex[:8]}.{extension}"
        if not path.exists():
            return path


def write_png(path: Path, data: bytes):
    """
    Write encoded PNG data to a new file at path.

    The file is created exclusively, so an existing file is never
    overwritten. A partially written file is left in place on failure.

    Raises:
        FileExistsError: If path already exists
        IoFailure: If the file cannot be opened, written or closed
    """
    try:
        f = open(path, 'xb')
    except FileExistsError:
        raise
    except OSError as e:
        raise IoFailure(f"Could not open {path}: {e}") from e

    try:
        with f:
            f.write(data)
    except OSError as e:
        raise IoFailure(f"Could not write {path}: {e}") from e


def write_new_png(directory: Path, data: bytes) -> Path:
    """
    Write data under a fresh image-<unixMillis>.png name in directory.

    A name taken between the existence check and the open counts as a
    collision and a new name is generated.

    Returns:
        Path of the written file

    Raises:
        IoFailure: If the file cannot be written or no free name was found
    """
    for _ in range(Config.EXPORT_MAX_NAME_ATTEMPTS):
        path = create_unique_image_path(directory)
        try:
            write_png(path, data)
            return path
        except FileExistsError:
            logger.debug(f"{path.name} was created by another writer, retrying")

    raise IoFailure(f"No free file name in {directory}")


def export_snapshot(
    snapshot: 'SurfaceSnapshot',
    base_dir: Optional[Path] = None
) -> ExportResult:
    """
    Flatten, encode and write a snapshot as a new PNG file.

    Args:
        snapshot: Copy of the surface state
        base_dir: Export directory (Config.get_export_dir() if None)

    Returns:
        ExportResult with the written path, or the classified failure
    """
    if base_dir is None:
        base_dir = Config.get_export_dir()

    try:
        directory = prepare_export_dir(base_dir)
        data = encode_png(flatten_snapshot(snapshot))
        path = write_new_png(directory, data)
    except ExportFailure as e:
        logger.error(f"Export failed ({e.kind}): {e}")
        return ExportResult(error=e)

    logger.info(f"Exported drawing to {path} ({len(data)} bytes)")
    return ExportResult(path=path, data=data)


def encode_snapshot(snapshot: 'SurfaceSnapshot') -> ExportResult:
    """Flatten and encode a snapshot without writing a file."""
    try:
        data = encode_png(flatten_snapshot(snapshot))
    except ExportFailure as e:
        logger.error(f"Encoding failed ({e.kind}): {e}")
        return ExportResult(error=e)
    return ExportResult(data=data)


# ==================== Background export ====================

class PngExportSignals(QObject):
    """Signals for PngExportTask"""

    export_complete = pyqtSignal(str)  # file path
    export_failed = pyqtSignal(str, str)  # error kind, error message


class PngExportTask(QRunnable):
    """
    Background task writing one snapshot to disk

    Usage:
        task = PngExportTask(surface.snapshot(), export_dir)
        task.signals.export_complete.connect(on_saved)
        threadpool.start(task)
    """

    def __init__(self, snapshot: 'SurfaceSnapshot', base_dir: Optional[Path] = None):
        super().__init__()
        self.snapshot = snapshot
        self.base_dir = base_dir
        self.signals = PngExportSignals()
        self.start_time = time.time()

    def run(self):
        """Execute export task"""
        result = export_snapshot(self.snapshot, self.base_dir)
        elapsed_ms = (time.time() - self.start_time) * 1000
        logger.debug(f"Export task finished in {elapsed_ms:.1f} ms")

        if result.ok:
            self.signals.export_complete.emit(str(result.path))
        else:
            self.signals.export_failed.emit(result.error.kind, str(result.error))


class PngExportService(QObject):
    """
    Runs PNG exports off the UI thread

    Usage:
        service = PngExportService()
        service.export_finished.connect(on_saved)
        service.export_async(surface.snapshot())
    """

    # Signals
    export_finished = pyqtSignal(str)  # file path
    export_failed = pyqtSignal(str, str)  # error kind, error message

    def __init__(self, base_dir: Optional[Path] = None, parent=None):
        super().__init__(parent)
        self._base_dir = base_dir
        self._tasks: Set[PngExportTask] = set()

        self.thread_pool = QThreadPool()
        self.thread_pool.setMaxThreadCount(Config.EXPORT_THREAD_COUNT)

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    @property
    def base_dir(self) -> Path:
        return self._base_dir if self._base_dir is not None else Config.get_export_dir()

    def export_sync(self, snapshot: 'SurfaceSnapshot') -> ExportResult:
        """Export on the calling thread."""
        return export_snapshot(snapshot, self.base_dir)

    def export_async(self, snapshot: 'SurfaceSnapshot') -> PngExportTask:
        """Queue an export; the result arrives through this service's signals."""
        task = PngExportTask(snapshot, self.base_dir)
        task.signals.export_complete.connect(lambda path: self._on_export_complete(task, path))
        task.signals.export_failed.connect(lambda kind, message: self._on_export_failed(task, kind, message))

        # Keep the task (and its signals object) alive until a result arrives
        self._tasks.add(task)
        self.thread_pool.start(task)
        return task

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until queued exports finish."""
        return self.thread_pool.waitForDone(msecs)

    def _on_export_complete(self, task: PngExportTask, path: str):
        self._tasks.discard(task)
        self.export_finished.emit(path)

    def _on_export_failed(self, task: PngExportTask, kind: str, message: str):
        self._tasks.discard(task)
        self.export_failed.emit(kind, message)


__all__ = [
    'ExportFailure',
    'StorageUnavailable',
    'IoFailure',
    'EncodeFailure',
    'ExportResult',
    'flatten_snapshot',
    'encode_png',
    'prepare_export_dir',
    'create_unique_image_path',
    'write_png',
    'write_new_png',
    'export_snapshot',
    'encode_snapshot',
    'PngExportSignals',
    'PngExportTask',
    'PngExportService',
]
