"""Unit tests for resource_cache."""

import shutil
import tempfile
from pathlib import Path

import pytest

from datablog.workspace import resource_cache
from datablog.workspace.resource_cache import ResourceKey


def test_resource_key_local_path():
    """Resources are cached under a directory named after their dataset."""
    res = ResourceKey("spc", "day1otlk_20240501_1300-shp.zip")
    assert res.get_local_path() == Path("spc") / "day1otlk_20240501_1300-shp.zip"
    assert repr(res) == "Resource(spc/day1otlk_20240501_1300-shp.zip)"


class TestLocalFileCache:
    """Unit tests for the LocalFileCache class."""

    def setup_method(self):
        """Prepares temporary directory for storing cache contents."""
        self.test_dir = tempfile.mkdtemp()
        self.cache = resource_cache.LocalFileCache(Path(self.test_dir))

    def teardown_method(self):
        """Deletes content of the temporary directories."""
        shutil.rmtree(self.test_dir)

    def test_add_single_resource(self):
        """Adding resource has expected effect on later get() and contains() calls."""
        res = ResourceKey("cpc", "file.txt")
        assert not self.cache.contains(res)
        self.cache.add(res, b"blah")
        assert self.cache.contains(res)
        assert self.cache.get(res) == b"blah"
        assert (Path(self.test_dir) / "cpc" / "file.txt").read_bytes() == b"blah"

    def test_get_missing_resource_fails(self):
        """Getting a resource that was never added raises KeyError."""
        with pytest.raises(KeyError):
            self.cache.get(ResourceKey("cpc", "nonexistent.txt"))

    def test_that_two_cache_objects_share_storage(self):
        """Two LocalFileCache instances with the same path share the object storage."""
        second_cache = resource_cache.LocalFileCache(Path(self.test_dir))
        res = ResourceKey("dataset", "file.txt")
        assert not self.cache.contains(res)
        assert not second_cache.contains(res)
        self.cache.add(res, b"testContents")
        assert self.cache.contains(res)
        assert second_cache.contains(res)
        assert second_cache.get(res) == b"testContents"

    def test_deletion(self):
        """Deleting resources has expected effect on later get() / contains() calls."""
        res = ResourceKey("a", "c")
        assert not self.cache.contains(res)
        self.cache.add(res, b"sampleContents")
        assert self.cache.contains(res)
        self.cache.delete(res)
        assert not self.cache.contains(res)

    def test_read_only_add_and_delete_do_nothing(self):
        """Test that in read_only mode, add() and delete() calls are ignored."""
        res = ResourceKey("a", "c")
        ro_cache = resource_cache.LocalFileCache(Path(self.test_dir), read_only=True)
        assert ro_cache.is_read_only()

        ro_cache.add(res, b"sample")
        assert not ro_cache.contains(res)

        # Use read-write cache to insert resource
        self.cache.add(res, b"sample")
        assert not self.cache.is_read_only()
        assert ro_cache.contains(res)

        # Deleting via ro cache should not happen
        ro_cache.delete(res)
        assert ro_cache.contains(res)
