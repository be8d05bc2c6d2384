"""Tests for directory traversal."""

from pathlib import Path, PureWindowsPath

import pytest

from src.coordination.exceptions import LockingIOError, PathResolutionError
from src.coordination.walker import canonical_path, iter_file_visits


def rel_paths(visits) -> set[str]:
    return {v.rel_path for v in visits}


class TestIterFileVisits:
    """Test the lazy file walk."""
    
    def test_recursive_visits_nested_files(self, make_tree):
        repo = make_tree("a.txt", "sub/b.txt", "sub/deeper/c.txt")
        
        visits = list(iter_file_visits(repo, repo, recursive=True))
        
        assert rel_paths(visits) == {"a.txt", "sub/b.txt", "sub/deeper/c.txt"}
        assert all(not v.is_dir for v in visits)
        assert all(v.abs_path.is_file() for v in visits)
    
    def test_non_recursive_skips_subdirectories(self, make_tree):
        repo = make_tree("a.txt", "sub/b.txt")
        
        visits = list(iter_file_visits(repo, repo, recursive=False))
        
        assert rel_paths(visits) == {"a.txt"}
    
    def test_subtree_paths_are_repo_relative(self, make_tree):
        repo = make_tree("top.txt", "art/x/layers.psd", "art/y.psd")
        
        visits = list(iter_file_visits(repo / "art", repo, recursive=True))
        
        assert rel_paths(visits) == {"art/x/layers.psd", "art/y.psd"}
    
    def test_paths_use_forward_slashes(self, make_tree):
        repo = make_tree("one/two/three/file.bin")
        
        (visit,) = iter_file_visits(repo, repo)
        
        assert visit.rel_path == "one/two/three/file.bin"
        assert "\\" not in visit.rel_path
    
    def test_git_directory_is_skipped(self, make_tree):
        repo = make_tree("a.psd", ".git/objects/blob.psd", ".git/HEAD")
        
        assert rel_paths(iter_file_visits(repo, repo)) == {"a.psd"}
    
    def test_symlinked_directories_not_followed(self, make_tree, tmp_path_factory):
        repo = make_tree("a.txt")
        outside = tmp_path_factory.mktemp("outside")
        (outside / "hidden.psd").write_text("x")
        try:
            (repo / "link").symlink_to(outside, target_is_directory=True)
        except OSError:
            pytest.skip("symlinks not supported")
        
        assert "link/hidden.psd" not in rel_paths(iter_file_visits(repo, repo))
    
    def test_symlinked_files_skipped(self, make_tree, tmp_path_factory):
        """File links, dangling or pointing outside the tree, are not yielded."""
        repo = make_tree("a.psd")
        outside = tmp_path_factory.mktemp("outside")
        (outside / "victim.psd").write_text("x")
        try:
            (repo / "link.psd").symlink_to(outside / "victim.psd")
            (repo / "gone.psd").symlink_to(repo / "missing.psd")
        except OSError:
            pytest.skip("symlinks not supported")
        
        assert rel_paths(iter_file_visits(repo, repo)) == {"a.psd"}
    
    def test_missing_directory_raises_on_iteration(self, tmp_path):
        walk = iter_file_visits(tmp_path / "missing", tmp_path)
        
        with pytest.raises(LockingIOError) as exc_info:
            next(walk)
        
        assert exc_info.value.context["path"] == str(tmp_path / "missing")
        assert isinstance(exc_info.value, OSError)
    
    def test_deep_tree_does_not_recurse(self, tmp_path):
        """Depth is bounded by the explicit stack, not the interpreter."""
        current = tmp_path
        for i in range(200):
            current = current / f"d{i}"
        current.mkdir(parents=True)
        (current / "leaf.bin").write_text("x")
        
        (visit,) = iter_file_visits(tmp_path, tmp_path)
        
        assert visit.rel_path.endswith("d199/leaf.bin")


class TestCanonicalPath:
    """Test repo-relative path canonicalization."""
    
    def test_relative_to_root(self, tmp_path):
        assert canonical_path(tmp_path / "a" / "b.txt", tmp_path) == "a/b.txt"
    
    def test_root_itself(self, tmp_path):
        assert canonical_path(tmp_path, tmp_path) == ""
    
    def test_outside_repo_raises(self, tmp_path):
        with pytest.raises(PathResolutionError):
            canonical_path(Path("/somewhere/else"), tmp_path)
    
    def test_windows_separators(self):
        path = PureWindowsPath("C:\\repo\\art\\layers.psd")
        
        assert canonical_path(path, PureWindowsPath("C:\\repo")) == "art/layers.psd"
