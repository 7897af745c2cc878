"""Storage key derivation for uploaded objects.

Keys are organised by scope and content family::

    workplaces/{workplace}/users/{user}/files/documents/{random}.pdf
    workplaces/{workplace}/groups/{group}/files/images/{random}.png
    users/{user}/avatar/{random}.jpg
    workplaces/{workplace}/branding/{random}.svg

The random component is a 128-bit UUID and is the only collision-avoidance
mechanism.
"""

from __future__ import annotations

import uuid
from enum import Enum

from spacevault.exceptions import ValidationError
from spacevault.utils import file_extension


class FileCategory(str, Enum):
    """Upload category; avatar and logo uploads get dedicated folders."""

    AVATAR = "avatar"
    LOGO = "logo"
    DOCUMENT = "document"
    PRIVATE = "private"


def parse_category(category: str | FileCategory | None) -> FileCategory | None:
    """Coerce a caller-supplied category, rejecting unknown values."""
    if category is None or isinstance(category, FileCategory):
        return category
    try:
        return FileCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in FileCategory)
        raise ValidationError(
            f"Invalid category: {category!r}. Must be one of: {allowed}.",
            field="category",
        ) from None


def content_family(mime_type: str) -> str | None:
    """Subfolder for a MIME type: images, videos, audio, documents, or None."""
    mime = mime_type.lower()
    if mime.startswith("image/"):
        return "images"
    if mime.startswith("video/"):
        return "videos"
    if mime.startswith("audio/"):
        return "audio"
    if mime == "application/pdf" or "document" in mime or "text" in mime:
        return "documents"
    return None


def scope_folder(
    user_id: str,
    workplace_id: str,
    group_id: str,
    *,
    is_private: bool,
    explicit_group: bool = False,
    category: FileCategory | None = None,
) -> str:
    """Folder for an upload, before the content-family subfolder."""
    if category is FileCategory.AVATAR:
        if explicit_group:
            return f"workplaces/{workplace_id}/groups/{group_id}/avatar"
        return f"users/{user_id}/avatar"
    if category is FileCategory.LOGO:
        return f"workplaces/{workplace_id}/branding"
    if is_private or category is FileCategory.PRIVATE:
        return f"workplaces/{workplace_id}/users/{user_id}/files"
    return f"workplaces/{workplace_id}/groups/{group_id}/files"


def unique_file_name(file_name: str) -> str:
    """Random 128-bit name keeping the original extension."""
    return f"{uuid.uuid4().hex}{file_extension(file_name)}"


def build_storage_key(
    file_name: str,
    mime_type: str,
    user_id: str,
    workplace_id: str,
    group_id: str,
    *,
    is_private: bool,
    explicit_group: bool = False,
    category: FileCategory | None = None,
) -> str:
    """Derive the object key for a new upload."""
    folder = scope_folder(
        user_id,
        workplace_id,
        group_id,
        is_private=is_private,
        explicit_group=explicit_group,
        category=category,
    )
    if category not in (FileCategory.AVATAR, FileCategory.LOGO):
        family = content_family(mime_type)
        if family:
            folder = f"{folder}/{family}"
    return f"{folder}/{unique_file_name(file_name)}"
