# Tests for download resolution and delete.
# Created: 2026-10-19

import pytest

from filedrop.storage.errors import ForbiddenPathError, NotFoundError
from filedrop.storage.operations import delete_entry, resolve_download
from filedrop.storage.tree import EntryKind, build_tree


@pytest.fixture
def root(tmp_path):
    root = tmp_path / "uploads"
    (root / "docs" / "sub").mkdir(parents=True)
    (root / "docs" / "a.txt").write_text("a")
    (root / "docs" / "sub" / "b.txt").write_text("b")
    (root / "top.txt").write_text("t")
    (tmp_path / "secret.txt").write_text("secret")
    return root


class TestResolveDownload:
    def test_nested_file(self, root):
        assert resolve_download(root, "docs/sub/b.txt").read_text() == "b"

    def test_missing_file(self, root):
        with pytest.raises(NotFoundError):
            resolve_download(root, "docs/nope.txt")

    def test_directory_is_not_downloadable(self, root):
        with pytest.raises(NotFoundError):
            resolve_download(root, "docs")

    def test_traversal_is_forbidden(self, root):
        with pytest.raises(ForbiddenPathError):
            resolve_download(root, "../secret.txt")

    def test_root_is_forbidden(self, root):
        with pytest.raises(ForbiddenPathError):
            resolve_download(root, "")


class TestDeleteEntry:
    def test_delete_file(self, root):
        assert delete_entry(root, "top.txt") is EntryKind.FILE
        assert not (root / "top.txt").exists()
        assert (root / "docs").exists()

    def test_delete_directory_is_recursive(self, root):
        assert delete_entry(root, "docs") is EntryKind.DIRECTORY
        assert [e.relative_path for e in build_tree(root)] == ["top.txt"]

    def test_delete_missing(self, root):
        with pytest.raises(NotFoundError):
            delete_entry(root, "nope")

    def test_traversal_is_forbidden(self, root, tmp_path):
        with pytest.raises(ForbiddenPathError):
            delete_entry(root, "docs/../../secret.txt")
        assert (tmp_path / "secret.txt").exists()

    @pytest.mark.parametrize("relative", ["", ".", "docs/.."])
    def test_root_cannot_be_deleted(self, root, relative):
        with pytest.raises(ForbiddenPathError):
            delete_entry(root, relative)
        assert root.exists()


class TestDeleteSymlinks:
    def test_file_link_removes_only_the_link(self, root):
        (root / "real.txt").write_text("real")
        (root / "link.txt").symlink_to(root / "real.txt")

        assert delete_entry(root, "link.txt") is EntryKind.FILE

        assert not (root / "link.txt").is_symlink()
        assert (root / "real.txt").read_text() == "real"

    def test_directory_link_keeps_the_real_directory(self, root):
        (root / "alias").symlink_to(root / "docs", target_is_directory=True)

        delete_entry(root, "alias")

        assert not (root / "alias").is_symlink()
        assert (root / "docs" / "sub" / "b.txt").read_text() == "b"

    def test_dangling_link_is_removed(self, root):
        (root / "gone.txt").symlink_to(root / "missing.txt")
        delete_entry(root, "gone.txt")
        assert not (root / "gone.txt").is_symlink()

    def test_link_through_parent_segments(self, root):
        (root / "link.txt").symlink_to(root / "top.txt")
        delete_entry(root, "docs/../link.txt")
        assert not (root / "link.txt").is_symlink()
        assert (root / "top.txt").exists()

    def test_download_still_follows_inner_link(self, root):
        (root / "link.txt").symlink_to(root / "top.txt")
        assert resolve_download(root, "link.txt").read_text() == "t"
