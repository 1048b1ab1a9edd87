"""Media discovery, classification and upload ingestion."""

from .cache import MediaCache, MediaFile
from .classify import EXTENSION_TO_MIME, MediaKind, classify_name, content_type_for
from .library import AssetLibrary, DirectoryLibrary, EmptyLibrary
from .multipart import MultipartError, NoFilePartError, extract_file_part
from .uploads import InvalidFilenameError, UploadStore

__all__ = [
    "EXTENSION_TO_MIME",
    "AssetLibrary",
    "DirectoryLibrary",
    "EmptyLibrary",
    "InvalidFilenameError",
    "MediaCache",
    "MediaFile",
    "MediaKind",
    "MultipartError",
    "NoFilePartError",
    "UploadStore",
    "classify_name",
    "content_type_for",
    "extract_file_part",
]
