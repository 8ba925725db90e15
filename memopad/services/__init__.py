"""Services for MemoPad"""

from .png_export_service import (
    ExportFailure,
    StorageUnavailable,
    IoFailure,
    EncodeFailure,
    ExportResult,
    PngExportService,
)

__all__ = [
    'ExportFailure',
    'StorageUnavailable',
    'IoFailure',
    'EncodeFailure',
    'ExportResult',
    'PngExportService',
]
