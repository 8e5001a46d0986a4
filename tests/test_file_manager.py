import os
import tempfile

import pytest

from benefits_portal.utils.file_manager import (
    delete_stored_file,
    generate_stored_filename,
    save_file_bytes,
    stored_file_path,
)


def test_generated_name_keeps_extension():
    name = generate_stored_filename("Benefits Guide.PDF")
    assert name.endswith(".pdf")
    assert "Benefits" not in name
    assert generate_stored_filename("plan.txt") != generate_stored_filename("plan.txt")


def test_save_file_bytes_creates_file_and_returns_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        upload_dir = os.path.join(tmpdir, "uploads")

        filename = save_file_bytes(b"hello", "sample.txt", upload_dir)

        local_path = os.path.join(upload_dir, filename)
        assert os.path.exists(local_path)
        with open(local_path, "rb") as f:
            assert f.read() == b"hello"


def test_save_file_bytes_requires_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError):
            save_file_bytes(b"hello", "", tmpdir)


def test_stored_file_path_strips_directories():
    assert stored_file_path("../../etc/passwd", "/srv/uploads") == os.path.join("/srv/uploads", "passwd")


def test_delete_stored_file_removes_existing_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        filename = save_file_bytes(b"content", "to_delete.txt", tmpdir)

        assert delete_stored_file(filename, tmpdir) is True
        assert not os.path.exists(os.path.join(tmpdir, filename))


def test_delete_stored_file_missing_file_is_not_an_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert delete_stored_file("missing.txt", tmpdir) is False
        assert delete_stored_file("", tmpdir) is False
