"""Tests for storage key derivation."""

from __future__ import annotations

import re

import pytest

from spacevault.exceptions import ValidationError
from spacevault.storage.keys import (
    FileCategory,
    build_storage_key,
    content_family,
    parse_category,
    unique_file_name,
)

HEX_NAME = r"[0-9a-f]{32}"


def _key(file_name="report.pdf", mime="application/pdf", **kwargs):
    kwargs.setdefault("is_private", False)
    return build_storage_key(file_name, mime, "U1", "W1", "G1", **kwargs)


# ---------------------------------------------------------------------------
# content_family
# ---------------------------------------------------------------------------


class TestContentFamily:
    @pytest.mark.parametrize(
        ("mime", "family"),
        [
            ("image/png", "images"),
            ("video/mp4", "videos"),
            ("audio/mpeg", "audio"),
            ("application/pdf", "documents"),
            ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "documents"),
            ("text/plain", "documents"),
            ("application/zip", None),
            ("IMAGE/JPEG", "images"),
        ],
    )
    def test_family(self, mime, family):
        assert content_family(mime) == family


# ---------------------------------------------------------------------------
# build_storage_key
# ---------------------------------------------------------------------------


class TestBuildStorageKey:
    def test_private_scope(self):
        key = _key(is_private=True)
        assert re.fullmatch(rf"workplaces/W1/users/U1/files/documents/{HEX_NAME}\.pdf", key)

    def test_group_scope(self):
        key = _key("photo.PNG", "image/png")
        assert re.fullmatch(rf"workplaces/W1/groups/G1/files/images/{HEX_NAME}\.png", key)

    def test_no_family_subfolder(self):
        key = _key("bundle.zip", "application/zip")
        assert re.fullmatch(rf"workplaces/W1/groups/G1/files/{HEX_NAME}\.zip", key)

    def test_avatar_without_group(self):
        key = _key("me.jpg", "image/jpeg", category=FileCategory.AVATAR)
        assert re.fullmatch(rf"users/U1/avatar/{HEX_NAME}\.jpg", key)

    def test_avatar_with_explicit_group(self):
        key = _key("team.jpg", "image/jpeg", category=FileCategory.AVATAR, explicit_group=True)
        assert re.fullmatch(rf"workplaces/W1/groups/G1/avatar/{HEX_NAME}\.jpg", key)

    def test_logo(self):
        key = _key("logo.svg", "image/svg+xml", category=FileCategory.LOGO)
        assert re.fullmatch(rf"workplaces/W1/branding/{HEX_NAME}\.svg", key)

    def test_private_category_forces_user_scope(self):
        key = _key(category=FileCategory.PRIVATE)
        assert key.startswith("workplaces/W1/users/U1/files/documents/")

    def test_no_extension(self):
        key = _key("README", "text/plain")
        assert re.fullmatch(rf"workplaces/W1/groups/G1/files/documents/{HEX_NAME}", key)

    def test_keys_do_not_collide(self):
        keys = {_key() for _ in range(1000)}
        assert len(keys) == 1000

    def test_unique_file_name_keeps_extension(self):
        assert re.fullmatch(rf"{HEX_NAME}\.pdf", unique_file_name("Q3 Report.PDF"))


# ---------------------------------------------------------------------------
# Categories and key parsing
# ---------------------------------------------------------------------------


class TestParseCategory:
    def test_none_and_enum_pass_through(self):
        assert parse_category(None) is None
        assert parse_category(FileCategory.LOGO) is FileCategory.LOGO

    def test_string(self):
        assert parse_category("avatar") is FileCategory.AVATAR

    def test_invalid(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_category("banner")
        assert exc_info.value.field == "category"
