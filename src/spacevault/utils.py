"""Path and filename utilities, file-type classification, icons."""

from __future__ import annotations

import posixpath
from pathlib import PurePosixPath

# =============================================================================
# File Type Classification
# =============================================================================

EXTENSION_TYPES = {
    ".pdf": "pdf",
    ".doc": "doc", ".docx": "docx",
    ".xls": "xls", ".xlsx": "xlsx",
    ".ppt": "ppt", ".pptx": "pptx",
    ".jpg": "image", ".jpeg": "image", ".png": "image", ".gif": "image",
    ".mp4": "video", ".avi": "video",
    ".mp3": "audio", ".wav": "audio",
}

FILE_ICONS = {
    "note": "\U0001f4dd",
    "pdf": "\U0001f4c4", "doc": "\U0001f4c4", "docx": "\U0001f4c4",
    "xls": "\U0001f4ca", "xlsx": "\U0001f4ca",
    "ppt": "\U0001f4ca", "pptx": "\U0001f4ca",
    "image": "\U0001f5bc\ufe0f",
    "video": "\U0001f3a5",
    "audio": "\U0001f3b5",
    "folder": "\U0001f4c1",
    "default": "\U0001f4c4",
}

# Reserved filenames (Windows compatibility)
RESERVED_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    "COM1", "COM2", "COM3", "COM4", "COM5", "COM6", "COM7", "COM8", "COM9",
    "LPT1", "LPT2", "LPT3", "LPT4", "LPT5", "LPT6", "LPT7", "LPT8", "LPT9",
}

MAX_NAME_LENGTH = 255


def file_extension(file_name: str) -> str:
    """Lower-cased extension including the dot, or ``""``.

    Examples:
        file_extension("Report.PDF") -> ".pdf"
        file_extension("archive.tar.gz") -> ".gz"
        file_extension("Makefile") -> ""
        file_extension(".env") -> ""
    """
    return PurePosixPath(file_name.strip()).suffix.lower()


def file_type_for(file_name: str) -> str:
    """Coarse type name (``pdf``, ``image``, ...) from the extension."""
    return EXTENSION_TYPES.get(file_extension(file_name), "default")


def icon_for(file_type: str) -> str:
    return FILE_ICONS.get(file_type, FILE_ICONS["default"])


# =============================================================================
# Validation
# =============================================================================


def validate_file_name(name: str) -> tuple[bool, str]:
    """Validate a display file name.

    Returns:
        (is_valid, error_message) - error_message is empty if valid
    """
    if not name or not name.strip():
        return False, "File name is required"

    if "\x00" in name:
        return False, "File name contains null bytes"

    for ch in name:
        code = ord(ch)
        if 0x01 <= code <= 0x1F:
            return False, f"File name contains control character: 0x{code:02x}"

    if len(name) > MAX_NAME_LENGTH:
        return False, f"File name too long (max {MAX_NAME_LENGTH} characters)"

    base_name = name.strip().upper().split(".")[0]
    if base_name in RESERVED_NAMES:
        return False, f"Reserved filename: {name}"

    return True, ""


# =============================================================================
# Path Utilities
# =============================================================================


def normalize_path(path: str) -> str:
    """Normalize a relative storage path.

    - Strips surrounding whitespace and leading slashes
    - Resolves ``.`` and ``..`` references
    - Removes double slashes

    Examples:
        normalize_path("/abc.pdf") -> "abc.pdf"
        normalize_path("a//b/../c.txt") -> "a/c.txt"
        normalize_path("") -> ""
    """
    path = path.strip().replace("\\", "/").lstrip("/")
    if not path:
        return ""
    normalized = posixpath.normpath(path)
    return "" if normalized == "." else normalized
