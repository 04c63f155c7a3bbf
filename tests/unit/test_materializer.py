"""
Unit tests for extension resolution, path derivation and file writes.
"""
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from puttr.core.errors import StorageError
from puttr.services import UploadMaterializer, derive_path, resolve_extension, store
from puttr.services.materializer import CONTENT_TYPE_EXTENSIONS


class TestResolveExtension:
    """Tests for the content-type taxonomy lookup."""

    @pytest.mark.parametrize("content_type,expected", [
        ("text/plain", "txt"),
        ("application/json", "json"),
        ("text/html", "html"),
        ("image/png", "png"),
        ("image/jpeg", "jpg"),
        ("application/pdf", "pdf"),
        ("image/svg+xml", "svg"),
        ("application/octet-stream", "bin"),
    ])
    def test_known_types(self, content_type, expected):
        assert resolve_extension(content_type) == expected

    def test_case_and_parameters_ignored(self):
        assert resolve_extension("APPLICATION/JSON; charset=utf-8") == "json"
        assert resolve_extension("Text/CSV;header=present") == "csv"

    def test_surrounding_whitespace_ignored(self):
        assert resolve_extension("  text/markdown  ; charset=utf-8") == "md"

    def test_form_types_map_to_txt(self):
        assert resolve_extension("multipart/form-data; boundary=xyz") == "txt"
        assert resolve_extension("application/x-www-form-urlencoded") == "txt"

    @pytest.mark.parametrize("content_type", [
        None,
        "",
        "   ",
        ";",
        "application/x-unknown",
        "not a mime type",
        "text/plain/extra",
    ])
    def test_unknown_types_default_to_txt(self, content_type):
        assert resolve_extension(content_type) == "txt"

    def test_every_mapping_is_non_empty(self):
        for media_type, extension in CONTENT_TYPE_EXTENSIONS.items():
            assert media_type == media_type.lower()
            assert extension
            assert resolve_extension(media_type.upper()) == extension


class TestDerivePath:
    """Tests for storage path layout."""

    def test_layout(self, start_time):
        path = derive_path("/srv/uploads", "abc123", start_time, "json")

        assert path == Path(
            "/srv/uploads/2024-03/data-2024-03-07T14:05:09Z-abc123.json"
        )

    def test_deterministic(self, start_time):
        first = derive_path("/srv/uploads", "abc123", start_time, "json")
        second = derive_path("/srv/uploads", "abc123", start_time, "json")

        assert first == second

    def test_month_zero_padded(self):
        now = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        path = derive_path("root", "t", now, "txt")

        assert path.parent.name == "2025-01"
        assert path.name == "data-2025-01-02T03:04:05Z-t.txt"

    def test_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        now = datetime(2024, 1, 1, 1, 30, 0, tzinfo=tz)

        path = derive_path("root", "t", now, "txt")

        assert path.parent.name == "2023-12"
        assert path.name == "data-2023-12-31T23:30:00Z-t.txt"

    def test_names_sort_chronologically(self, start_time):
        times = [start_time + timedelta(seconds=s) for s in (0, 9, 10, 3600)]
        names = [derive_path("r", "t", t, "txt").name for t in times]

        assert names == sorted(names)

    def test_distinct_tokens_distinct_paths(self, start_time):
        a = derive_path("r", "aaaa", start_time, "txt")
        b = derive_path("r", "bbbb", start_time, "txt")

        assert a != b


class TestStore:
    """Tests for the file write."""

    def test_creates_directories_and_writes(self, tmp_path):
        path = tmp_path / "a" / "b" / "file.txt"

        written = store(path, "hello world")

        assert written == 11
        assert path.read_bytes() == b"hello world"

    def test_writes_bytes_verbatim(self, tmp_path):
        path = tmp_path / "file.bin"
        payload = bytes(range(256))

        store(path, payload)

        assert path.read_bytes() == payload

    def test_existing_directory_ok(self, tmp_path):
        (tmp_path / "month").mkdir()
        path = tmp_path / "month" / "file.txt"

        store(path, "x")

        assert path.read_text() == "x"

    def test_overwrites_same_path(self, tmp_path):
        path = tmp_path / "file.txt"

        store(path, "first, longer payload")
        store(path, "second")

        assert path.read_text() == "second"

    def test_directory_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(StorageError) as exc_info:
            store(blocker / "2024-03" / "file.txt", "x")

        assert "directory" in exc_info.value.reason

    def test_file_failure_raises(self, tmp_path):
        path = tmp_path / "existing-dir"
        path.mkdir()

        with pytest.raises(StorageError) as exc_info:
            store(path, "x")

        assert exc_info.value.path == str(path)
        assert "file" in exc_info.value.reason


class TestUploadMaterializer:
    """Tests for the async orchestrator."""

    @pytest.mark.asyncio
    async def test_materialize(self, tmp_path, clock):
        materializer = UploadMaterializer(tmp_path, clock=clock)

        record = await materializer.materialize(
            "abc123", "{\"a\": 1}", "application/json; charset=utf-8"
        )

        assert record.path == tmp_path / "2024-03" / "data-2024-03-07T14:05:09Z-abc123.json"
        assert record.size == 8
        assert record.extension == "json"
        assert record.path.read_text() == "{\"a\": 1}"

    @pytest.mark.asyncio
    async def test_materialize_propagates_storage_error(self, tmp_path, clock):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        materializer = UploadMaterializer(blocker, clock=clock)

        with pytest.raises(StorageError):
            await materializer.materialize("abc123", "x", "text/plain")

    def test_is_writable(self, tmp_path):
        assert UploadMaterializer(tmp_path / "new").is_writable()

    def test_not_writable_when_root_is_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        assert not UploadMaterializer(blocker).is_writable()
