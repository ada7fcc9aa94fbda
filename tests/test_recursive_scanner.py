"""Tests for node_modules discovery and result assembly."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from nmsweep.recursive_scanner import (
    ScanError,
    check_root,
    contains_multiple_targets,
    display_name_for,
    find_matching_directories,
    scan_node_modules,
)


def make_target(base: Path, *parts: str, files: dict = None) -> Path:
    """Create base/parts.../node_modules with the given {name: size} files."""
    target = base.joinpath(*parts, "node_modules")
    target.mkdir(parents=True, exist_ok=True)
    for name, size in (files or {}).items():
        file_path = target / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(b"x" * size)
    return target


class TestContainsMultipleTargets:
    def test_single_occurrence(self):
        assert not contains_multiple_targets("/home/me/app/node_modules")

    def test_nested_occurrence(self):
        assert contains_multiple_targets("/app/node_modules/dep/node_modules")

    def test_counts_substrings_in_other_segments(self):
        assert contains_multiple_targets("/my_node_modules_backup/node_modules")

    def test_custom_pattern(self):
        assert contains_multiple_targets("/a/.venv/b/.venv", ".venv")


class TestFindMatchingDirectories:
    def test_finds_single_match(self, tmp_path):
        target = make_target(tmp_path, "project")

        assert list(find_matching_directories(tmp_path)) == [target]

    def test_finds_directly_under_root(self, tmp_path):
        target = make_target(tmp_path)

        assert list(find_matching_directories(tmp_path)) == [target]

    def test_finds_several_projects(self, tmp_path):
        for project in ["project1", "project2", "project3"]:
            make_target(tmp_path, project)

        assert len(list(find_matching_directories(tmp_path))) == 3

    def test_skips_nested_copies(self, tmp_path):
        outer = make_target(tmp_path, "project")
        (outer / "dep" / "node_modules").mkdir(parents=True)

        assert list(find_matching_directories(tmp_path)) == [outer]

    def test_depth_three_is_included(self, tmp_path):
        target = make_target(tmp_path, "a", "b")

        assert list(find_matching_directories(tmp_path)) == [target]

    def test_depth_four_is_excluded(self, tmp_path):
        make_target(tmp_path, "a", "b", "c")

        assert list(find_matching_directories(tmp_path)) == []

    def test_custom_max_depth(self, tmp_path):
        target = make_target(tmp_path, "a", "b", "c")

        assert list(find_matching_directories(tmp_path, max_depth=4)) == [target]

    def test_custom_min_depth(self, tmp_path):
        make_target(tmp_path)
        deeper = make_target(tmp_path, "project")

        assert list(find_matching_directories(tmp_path, min_depth=2)) == [deeper]

    def test_ignores_files_with_target_name(self, tmp_path):
        (tmp_path / "project").mkdir()
        (tmp_path / "project" / "node_modules").write_text("not a directory")

        assert list(find_matching_directories(tmp_path)) == []

    def test_substring_in_parent_excludes_match(self, tmp_path):
        make_target(tmp_path, "old_node_modules_copy")

        assert list(find_matching_directories(tmp_path)) == []

    def test_other_names_ignored(self, tmp_path):
        (tmp_path / "project" / "vendor").mkdir(parents=True)
        (tmp_path / "project" / "node_module").mkdir(parents=True)

        assert list(find_matching_directories(tmp_path)) == []

    def test_unreadable_subdirectory_skipped(self, tmp_path):
        def walk_with_denied_dir(top, onerror=None, **kwargs):
            yield str(top), ["locked", "open"], []
            onerror(PermissionError(13, "Permission denied", str(top / "locked")))
            yield str(top / "open"), ["node_modules"], []
            yield str(top / "open" / "node_modules"), [], []

        with patch("nmsweep.recursive_scanner.os.walk", side_effect=walk_with_denied_dir):
            results = list(find_matching_directories(tmp_path))

        assert results == [tmp_path / "open" / "node_modules"]

    def test_unreadable_subdirectory_during_scan(self, tmp_path):
        def walk_with_error(top, onerror=None, **kwargs):
            onerror(PermissionError(13, "Permission denied", str(top / "locked")))
            yield str(top), ["locked", "open"], []
            yield str(top / "open"), ["node_modules"], []

        with patch("nmsweep.recursive_scanner.os.walk", side_effect=walk_with_error):
            result = scan_node_modules(tmp_path, False)

        assert [m.display_name for m in result.matches] == [".../open"]


class TestCheckRoot:
    def test_accepts_directory(self, tmp_path):
        check_root(tmp_path)

    def test_missing_root(self, tmp_path):
        with pytest.raises(ScanError, match="Cannot read directory"):
            check_root(tmp_path / "missing")

    def test_file_root(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        with pytest.raises(ScanError):
            check_root(file_path)


class TestDisplayNameFor:
    def test_uses_parent_name(self, tmp_path):
        path = tmp_path / "projects" / "web" / "node_modules"
        assert display_name_for(path, tmp_path) == ".../web"

    def test_parent_is_root(self, tmp_path):
        path = tmp_path / "node_modules"
        assert display_name_for(path, tmp_path) == f".../{tmp_path.name}"

    def test_filesystem_root_parent(self):
        assert display_name_for(Path("/node_modules"), Path("/")) == "node_modules"

    def test_path_outside_root(self, tmp_path):
        with pytest.raises(ScanError):
            display_name_for(Path("/elsewhere/node_modules"), tmp_path)


class TestScan:
    def test_nested_scenario_with_sizes(self, tmp_path):
        outer = make_target(tmp_path, "a", files={"one.js": 500, "two.js": 700})
        make_target(outer, "dep", files={"three.js": 100})

        result = scan_node_modules(tmp_path, True)

        assert len(result.matches) == 1
        match = result.matches[0]
        assert match.absolute_path == str(outer)
        assert match.display_name == ".../a"
        # nested copy is not reported but its bytes belong to the outer one
        assert match.size_bytes == 1400
        assert result.total_bytes == 1400

    def test_nested_scenario_without_sizes(self, tmp_path):
        outer = make_target(tmp_path, "a", files={"one.js": 500, "two.js": 700})
        make_target(outer, "dep", files={"three.js": 100})

        result = scan_node_modules(tmp_path, False)

        assert len(result.matches) == 1
        assert result.matches[0].size_bytes == 0
        assert result.matches[0].size_display == "0.00 MB"
        assert result.total_size_display == "0.00 MB"

    def test_empty_match_dropped_when_sizing(self, tmp_path):
        make_target(tmp_path, "empty")
        (make_target(tmp_path, "only_dirs") / "pkg" / "lib").mkdir(parents=True)
        make_target(tmp_path, "full", files={"index.js": 10})

        result = scan_node_modules(tmp_path, True)

        assert [m.display_name for m in result.matches] == [".../full"]

    def test_empty_match_kept_without_sizing(self, tmp_path):
        make_target(tmp_path, "empty")
        make_target(tmp_path, "full", files={"index.js": 10})

        result = scan_node_modules(tmp_path, False)

        assert sorted(m.display_name for m in result.matches) == [".../empty", ".../full"]

    def test_sorted_largest_first(self, tmp_path):
        make_target(tmp_path, "small", files={"a": 100})
        make_target(tmp_path, "large", files={"a": 5000})
        make_target(tmp_path, "medium", files={"a": 1000})

        result = scan_node_modules(tmp_path, True)

        assert [m.size_bytes for m in result.matches] == [5000, 1000, 100]

    def test_total_is_sum_of_matches(self, tmp_path):
        make_target(tmp_path, "one", files={"a.bin": 1024 * 1024})
        make_target(tmp_path, "two", files={"a.bin": 2 * 1024 * 1024})

        result = scan_node_modules(tmp_path, True)

        assert result.total_size_display == "3.00 MB"
        assert result.total_bytes == sum(m.size_bytes for m in result.matches)

    def test_accepts_string_root(self, tmp_path):
        make_target(tmp_path, "project", files={"a": 1})

        result = scan_node_modules(str(tmp_path), True)

        assert len(result.matches) == 1

    def test_scanning_twice_gives_same_result(self, tmp_path):
        make_target(tmp_path, "one", files={"a": 300})
        make_target(tmp_path, "two", files={"a": 200})

        assert scan_node_modules(tmp_path, True) == scan_node_modules(tmp_path, True)

    def test_no_matches(self, tmp_path):
        (tmp_path / "project" / "src").mkdir(parents=True)

        result = scan_node_modules(tmp_path, True)

        assert result.matches == []
        assert result.total_size_display == "0.00 MB"

    def test_unreadable_root(self, tmp_path):
        with pytest.raises(ScanError):
            scan_node_modules(tmp_path / "missing", True)

    def test_progress_callback(self, tmp_path):
        target = make_target(tmp_path, "project", files={"a": 42})
        make_target(tmp_path, "empty")
        callback = MagicMock()

        scan_node_modules(tmp_path, True, progress_callback=callback)

        callback.assert_called_once_with(str(target), 42)
