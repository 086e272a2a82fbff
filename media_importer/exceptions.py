"""
Custom exception hierarchy for the media importer.

Per-file problems (bad metadata, a failed copy) are absorbed by the import
loop; only the types below ever reach a caller.
"""


class MediaImporterError(Exception):
    """Base exception for all media importer errors."""
    pass


class ScanError(MediaImporterError):
    """Raised when a directory in the source tree cannot be read."""

    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read directory {path}: {cause}")


class TemplateError(MediaImporterError):
    """Raised when a filename template cannot be applied."""
    pass


class NameCollisionError(MediaImporterError):
    """Raised when no free destination name is left for a file."""
    pass


class DeviceError(MediaImporterError):
    """Raised when no disk can be suggested as an import source."""
    pass
