"""Unit tests for scratch file handling."""

import pytest

from disk_harvester.utils.scratch import scratch_file


class TestScratchFile:
    """Tests for scratch_file()."""

    def test_file_exists_inside_block(self, tmp_path):
        """Should create an empty file with the requested suffix."""
        with scratch_file(suffix=".json", directory=tmp_path) as path:
            assert path.exists()
            assert path.suffix == ".json"
            assert path.read_bytes() == b""

    def test_removed_after_block(self, tmp_path):
        """Should remove the file when the block exits normally."""
        with scratch_file(directory=tmp_path) as path:
            path.write_text("data")

        assert not path.exists()

    def test_removed_after_exception(self, tmp_path):
        """Should remove the file when the block raises."""
        with pytest.raises(RuntimeError):
            with scratch_file(directory=tmp_path) as path:
                raise RuntimeError("upload failed")

        assert not path.exists()

    def test_already_removed_is_ignored(self, tmp_path):
        """Should tolerate the caller deleting the file."""
        with scratch_file(directory=tmp_path) as path:
            path.unlink()

        assert not path.exists()
