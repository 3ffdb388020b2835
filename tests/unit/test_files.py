"""Unit tests for localca.utils.files module."""

import os
from pathlib import Path

import pytest

from localca.services.ca_errors import ArtifactNotFoundError, ArtifactWriteError
from localca.utils.files import (
    expand_path,
    read_bytes,
    remove_files,
    require_files,
    write_bytes,
)


class TestReadBytes:
    """Tests for read_bytes function."""

    def test_read_existing_file(self, tmp_path):
        """Should read bytes from an existing file."""
        test_file = tmp_path / "test.txt"
        test_file.write_bytes(b"Hello, World!")

        assert read_bytes(test_file) == b"Hello, World!"

    def test_read_with_string_path(self, tmp_path):
        """Should accept string paths."""
        test_file = tmp_path / "test.txt"
        test_file.write_bytes(b"content")

        assert read_bytes(str(test_file)) == b"content"

    def test_read_nonexistent_file_raises(self, tmp_path):
        """Should raise ArtifactNotFoundError when the file doesn't exist."""
        with pytest.raises(ArtifactNotFoundError) as exc_info:
            read_bytes(tmp_path / "nonexistent.txt")
        assert "nonexistent.txt" in str(exc_info.value)

    def test_read_directory_raises(self, tmp_path):
        with pytest.raises(ArtifactNotFoundError):
            read_bytes(tmp_path)


class TestRequireFiles:
    """Tests for require_files function."""

    def test_all_present(self, tmp_path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.write_bytes(b"")
        b.write_bytes(b"")

        assert require_files(a, str(b)) == [a, b]

    def test_names_every_missing_file(self, tmp_path):
        present = tmp_path / "present"
        present.write_bytes(b"")

        with pytest.raises(ArtifactNotFoundError) as exc_info:
            require_files(present, tmp_path / "one", tmp_path / "two")

        message = str(exc_info.value)
        assert "one" in message and "two" in message
        assert "present" not in message


class TestWriteBytes:
    """Tests for write_bytes function."""

    def test_write_to_new_file(self, tmp_path):
        """Should create and write to a new file."""
        test_file = tmp_path / "test.txt"

        result = write_bytes(test_file, b"Hello, World!")

        assert result == test_file
        assert test_file.read_bytes() == b"Hello, World!"

    def test_write_sets_permissions(self, tmp_path):
        """Should set file permissions to 0o600 by default."""
        test_file = tmp_path / "test.txt"

        write_bytes(test_file, b"content")

        assert os.stat(test_file).st_mode & 0o777 == 0o600

    def test_write_with_custom_permissions(self, tmp_path):
        """Should respect custom permission mode."""
        test_file = tmp_path / "test.txt"

        write_bytes(test_file, b"content", mode=0o644)

        assert os.stat(test_file).st_mode & 0o777 == 0o644

    def test_write_without_overwrite_fails(self, tmp_path):
        """Should refuse when the file exists and overwrite=False."""
        test_file = tmp_path / "test.txt"
        test_file.write_bytes(b"original")

        with pytest.raises(ArtifactWriteError):
            write_bytes(test_file, b"new content", overwrite=False)

        # File should remain unchanged
        assert test_file.read_bytes() == b"original"

    def test_write_with_overwrite(self, tmp_path):
        """Should overwrite existing file when overwrite=True."""
        test_file = tmp_path / "test.txt"
        test_file.write_bytes(b"original")

        write_bytes(test_file, b"new content", overwrite=True)

        assert test_file.read_bytes() == b"new content"

    def test_write_creates_parent_dirs(self, tmp_path):
        """Should create parent directories when create_dirs=True."""
        test_file = tmp_path / "subdir1" / "subdir2" / "test.txt"

        write_bytes(test_file, b"content", create_dirs=True)

        assert test_file.read_bytes() == b"content"

    def test_write_without_create_dirs_fails(self, tmp_path):
        """Should raise when parent directory doesn't exist and create_dirs=False."""
        test_file = tmp_path / "nonexistent" / "test.txt"

        with pytest.raises(ArtifactWriteError):
            write_bytes(test_file, b"content", create_dirs=False)

    def test_atomic_write_leaves_no_temp_files(self, tmp_path):
        test_file = tmp_path / "test.txt"

        write_bytes(test_file, b"content")

        assert [p.name for p in tmp_path.iterdir()] == ["test.txt"]

    def test_write_non_atomic(self, tmp_path):
        """Should write directly when atomic=False."""
        test_file = tmp_path / "test.txt"

        write_bytes(test_file, b"content", atomic=False)

        assert test_file.read_bytes() == b"content"

    def test_write_with_string_path(self, tmp_path):
        """Should accept string paths."""
        test_file = str(tmp_path / "test.txt")

        result = write_bytes(test_file, b"content")

        assert isinstance(result, Path)
        assert Path(test_file).exists()


class TestHelpers:
    """Tests for expand_path and remove_files."""

    def test_expand_user(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_path("~/keys.txt") == tmp_path / "keys.txt"

    def test_remove_files_ignores_missing(self, tmp_path):
        present = tmp_path / "present"
        present.write_bytes(b"")

        remove_files([present, tmp_path / "absent"])

        assert not present.exists()
