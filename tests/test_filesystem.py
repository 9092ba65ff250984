"""Tests for real-path resolution backends."""

import errno
import os

import pytest

from vfile import File, FileSystem, LocalFileSystem, MemoryFileSystem
from vfile.filesystem import MAX_SYMLINK_DEPTH


@pytest.fixture
def fs():
    fs = MemoryFileSystem()
    fs.add_file("/src/app.py")
    fs.add_dir("/build")
    return fs


class TestLocalFileSystem:
    def test_is_a_filesystem(self):
        """Test that LocalFileSystem satisfies the protocol."""
        assert isinstance(LocalFileSystem(), FileSystem)

    def test_resolves_symlink(self, tmp_path):
        """Test resolving a symlink on disk."""
        target = tmp_path / "target.txt"
        target.write_text("a")
        (tmp_path / "link.txt").symlink_to(target)

        resolved = LocalFileSystem().realpath(str(tmp_path / "link.txt"))
        assert resolved == os.path.realpath(target)

    def test_missing_raises(self, tmp_path):
        """Test that a missing path raises OSError."""
        with pytest.raises(OSError):
            LocalFileSystem().realpath(str(tmp_path / "missing"))


class TestMemoryFileSystem:
    """Test the in-memory tree."""

    def test_is_a_filesystem(self, fs):
        """Test that MemoryFileSystem satisfies the protocol."""
        assert isinstance(fs, FileSystem)

    def test_parents_created(self, fs):
        """Test that adding a file creates its parent directories."""
        assert "/src" in fs.dirs
        assert fs.exists("/src")

    def test_plain_paths(self, fs):
        """Test resolving paths without links."""
        assert fs.realpath("/src/app.py") == "/src/app.py"
        assert fs.realpath("/") == "/"
        assert fs.realpath("/src/../build") == "/build"

    def test_absolute_link(self, fs):
        """Test a link with an absolute target."""
        fs.add_symlink("/app.py", "/src/app.py")
        assert fs.realpath("/app.py") == "/src/app.py"

    def test_relative_link(self, fs):
        """Test a link with a relative target."""
        fs.add_symlink("/build/app.py", "../src/app.py")
        assert fs.realpath("/build/app.py") == "/src/app.py"

    def test_link_to_directory(self, fs):
        """Test a link in the middle of a path."""
        fs.add_symlink("/current", "/src")
        assert fs.realpath("/current/app.py") == "/src/app.py"

    def test_chained_links(self, fs):
        """Test a link pointing at another link."""
        fs.add_symlink("/a", "/b")
        fs.add_symlink("/b", "/src/app.py")
        assert fs.realpath("/a") == "/src/app.py"

    def test_missing(self, fs):
        """Test that a missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            fs.realpath("/src/missing.py")
        assert not fs.exists("/src/missing.py")

    def test_dangling_link(self, fs):
        """Test that a link to nothing raises FileNotFoundError."""
        fs.add_symlink("/broken", "/nowhere")
        with pytest.raises(FileNotFoundError):
            fs.realpath("/broken")

    def test_loop(self, fs):
        """Test that a link loop raises ELOOP."""
        fs.add_symlink("/a", "/b")
        fs.add_symlink("/b", "/a")
        with pytest.raises(OSError) as info:
            fs.realpath("/a")
        assert info.value.errno == errno.ELOOP

    def test_deep_chain_within_limit(self, fs):
        """Test that a chain at the depth limit still resolves."""
        for i in range(MAX_SYMLINK_DEPTH - 1):
            fs.add_symlink(f"/l{i}", f"/l{i + 1}")
        fs.add_symlink(f"/l{MAX_SYMLINK_DEPTH - 1}", "/src/app.py")
        assert fs.realpath("/l0") == "/src/app.py"


class TestFileRealpath:
    """Test File.realpath with a configured filesystem."""

    def test_resolves_through_filesystem(self, fs):
        """Test File.realpath with a configured MemoryFileSystem."""
        fs.add_symlink("/app.py", "/src/app.py")
        VirtualFile = File.create(filesystem=fs)
        file = VirtualFile(cwd="/", path="app.py")
        assert file.realpath == "/src/app.py"

    def test_missing_is_none(self, fs):
        """Test that a missing file has no realpath."""
        VirtualFile = File.create(filesystem=fs)
        assert VirtualFile(path="/nope.py").realpath is None

    def test_loop_is_none(self, fs):
        """Test that a link loop gives no realpath."""
        fs.add_symlink("/a", "/a")
        VirtualFile = File.create(filesystem=fs)
        assert VirtualFile(path="/a").realpath is None
