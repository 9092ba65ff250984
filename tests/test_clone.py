"""Tests for File.clone() and the copy module hooks."""

import copy
import io
import os
from types import SimpleNamespace

from vfile import DirentType, File, Stat, cloneable


class TestCloneContents:
    """Test how contents are carried over to clones."""

    def test_copies_buffer(self):
        """Test that buffer contents are copied."""
        file = File(cwd="/", base="/test/", path="/test/test.coffee", contents=b"test")
        copied = file.clone()

        assert copied is not file
        assert copied.cwd == file.cwd
        assert copied.base == file.base
        assert copied.path == file.path
        assert copied.contents == b"test"
        assert copied.contents is not file.contents

    def test_copied_bytearray_is_independent(self):
        """Test that a cloned bytearray can be mutated independently."""
        file = File(contents=bytearray(b"test"))
        copied = file.clone()
        copied.contents[0] = ord("b")
        assert file.contents == bytearray(b"test")

    def test_shares_buffer_without_contents(self):
        """Test that contents=False shares the buffer."""
        file = File(contents=b"test")
        assert file.clone(contents=False).contents is file.contents

    def test_clones_cloneable_stream(self):
        """Test that a cloneable stream is cloned and both read all bytes."""
        CloneableFile = File.create(cloneable)
        file = CloneableFile(path="/a.txt", contents=io.BytesIO(b"wadup"))
        copied = file.clone()

        assert copied.contents is not file.contents
        assert copied.is_stream()
        assert copied.contents.read() == b"wadup"
        assert file.contents.read() == b"wadup"

    def test_shares_stream_without_cloner(self):
        """Test that a plain File shares its stream."""
        file = File(contents=io.BytesIO(b"wadup"))
        assert file.clone().contents is file.contents

    def test_shares_stream_without_contents(self):
        """Test that contents=False shares a cloneable stream."""
        CloneableFile = File.create(cloneable)
        file = CloneableFile(contents=io.BytesIO(b"wadup"))
        assert file.clone(contents=False).contents is file.contents

    def test_null_contents(self):
        """Test cloning null contents."""
        file = File(path="/a.txt")
        assert file.clone().contents is None


class TestCloneState:
    """Test that clones do not share mutable state with the original."""

    def test_history_is_copied(self):
        """Test that history is copied, not shared."""
        file = File(cwd="/", path="/test/test.coffee")
        file.path = "/test/test.js"
        copied = file.clone()

        assert copied.history == ["/test/test.coffee", "/test/test.js"]
        assert copied.history is not file.history

        copied.path = "/test/test.es6"
        assert file.history == ["/test/test.coffee", "/test/test.js"]

    def test_stat_is_copied(self):
        """Test that stat is copied and keeps its type."""
        file = File(stat=Stat(size=3))
        copied = file.clone()

        assert copied.stat == file.stat
        assert copied.stat is not file.stat
        assert type(copied.stat) is Stat

    def test_stat_checks_survive(self):
        """Test that stat type checks still work on the clone."""
        file = File(contents=None, stat=SimpleNamespace(is_directory=lambda: True))
        assert file.clone().is_directory() is True

    def test_os_stat_is_copied(self):
        """Test cloning a file with an os.stat result."""
        file = File(path=__file__, stat=os.stat(__file__))
        copied = file.clone()
        assert copied.stat == file.stat
        assert copied.is_file() is True

    def test_base_is_kept(self):
        """Test that an explicit base is copied."""
        file = File(cwd="/", base="/test", path="/test/a.js")
        copied = file.clone()
        assert copied.base == "/test"
        assert copied.relative == "a.js"

    def test_base_keeps_tracking_cwd(self):
        """Test that an unset base still follows cwd on the clone."""
        file = File(cwd="/work", path="/work/a.js")
        copied = file.clone()
        copied.cwd = "/other"
        assert copied.base == "/other"

    def test_symlink_name_and_type(self):
        """Test that symlink, name and dirent_type are copied."""
        file = File(
            path="/link", symlink="/target", name="link", dirent_type=DirentType.SYMLINK
        )
        copied = file.clone()
        assert copied.symlink == "/target"
        assert copied.name == "link"
        assert copied.dirent_type is DirentType.SYMLINK
        assert copied.is_symbolic() is True

    def test_record_checks_survive(self, tmp_path):
        """Test that a DirEntry record still answers type checks."""
        (tmp_path / "a.txt").write_text("a")
        file = File(next(os.scandir(tmp_path)))
        assert file.clone().is_file() is True


class TestCloneCustomFields:
    def test_deep_copies_custom_fields(self):
        """Test that fields are deep copied by default."""
        file = File(path="/a.txt", meta={"tags": ["a"]})
        copied = file.clone()

        assert copied.meta == {"tags": ["a"]}
        assert copied.meta is not file.meta
        copied.meta["tags"].append("b")
        assert file.meta == {"tags": ["a"]}

    def test_shallow_shares_custom_fields(self):
        """Test that deep=False shares field values."""
        file = File(path="/a.txt", meta={"tags": ["a"]})
        copied = file.clone(deep=False)
        assert copied.meta is file.meta

    def test_self_reference(self):
        """Test that a field pointing at the file points at the clone."""
        file = File(path="/a.txt")
        file.me = file
        copied = file.clone()
        assert copied.me is copied

    def test_does_not_copy_class_members(self):
        """Test that constructor arguments do not leak into custom fields."""
        file = File(path="/a.txt")
        copied = file.clone()
        assert copied._custom == {}


class TestCloneClass:
    """Test that clones keep their class and its config."""

    def test_subclass(self):
        """Test that clones keep their subclass."""
        class ExtendedFile(File):
            def describe(self):
                return f"{self.basename}!"

        file = ExtendedFile(path="/a.txt", tag="x")
        copied = file.clone()

        assert type(copied) is ExtendedFile
        assert copied.describe() == "a.txt!"
        assert copied.tag == "x"

    def test_created_class(self):
        """Test that clones keep a class made by File.create()."""
        CloneableFile = File.create(cloneable)
        copied = CloneableFile(path="/a.txt").clone()
        assert type(copied) is CloneableFile
        assert copied.config.cloneable is cloneable


class TestCopyModule:
    def test_copy(self):
        """Test copy.copy() shares field values."""
        file = File(path="/a.txt", contents=b"data", meta=[1])
        copied = copy.copy(file)
        assert copied.path == "/a.txt"
        assert copied.contents == b"data"
        assert copied.meta is file.meta

    def test_deepcopy(self):
        """Test copy.deepcopy() copies field values."""
        file = File(path="/a.txt", meta=[1])
        copied = copy.deepcopy(file)
        assert copied.meta == [1]
        assert copied.meta is not file.meta

    def test_deepcopy_cycle(self):
        """Test copy.deepcopy() with a self-referencing field."""
        file = File(path="/a.txt")
        file.me = file
        copied = copy.deepcopy(file)
        assert copied.me is copied

    def test_deepcopy_inside_container(self):
        """Test that a file copied twice in one deepcopy is copied once."""
        file = File(path="/a.txt")
        pair = copy.deepcopy([file, file])
        assert pair[0] is pair[1]
        assert pair[0] is not file
