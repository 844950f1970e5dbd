"""Tests for the bundle exclusion policy."""

import pytest

from app_publisher.core.exclusion import is_excluded_file_name, should_exclude, split_segments


class TestExcludedDirectories:
    """Whole-segment directory exclusion."""

    @pytest.mark.parametrize(
        "path",
        [
            "node_modules",
            ".git",
            "dist",
            ".next",
            "__pycache__",
        ],
    )
    def test_directory_itself(self, path):
        assert should_exclude(path, True)

    @pytest.mark.parametrize(
        "path",
        [
            "node_modules/react/index.js",
            "packages/web/node_modules/lodash/lodash.js",
            ".git/HEAD",
            "build/main.js",
            ".vscode/settings.json",
        ],
    )
    def test_files_below_excluded_directory(self, path):
        assert should_exclude(path, False)

    def test_backslash_separators(self):
        assert should_exclude("src\\node_modules\\x\\index.js", False)
        assert should_exclude(".git\\config", False)

    @pytest.mark.parametrize(
        "path",
        [
            "git-utils.ts",
            "src/node-modules-utils.ts",
            "src/distribution/index.js",
            "builder/app.js",
            "my.git/readme.md",
        ],
    )
    def test_substring_matches_are_kept(self, path):
        assert not should_exclude(path, False)


class TestExcludedFiles:
    """Basename pattern exclusion."""

    @pytest.mark.parametrize(
        "path",
        [
            ".env",
            ".env.local",
            "config/.env.production",
            "certs/server.pem",
            "id.key",
            ".DS_Store",
            "Thumbs.db",
            "package-lock.json",
            "yarn.lock",
            "npm-debug.log",
            "logs/server.log",
            "index.html.swp",
            ".npmrc",
        ],
    )
    def test_excluded(self, path):
        assert should_exclude(path, False)

    @pytest.mark.parametrize(
        "path",
        [
            "index.html",
            "src/app.js",
            "environment.ts",
            "keyboard.js",
            "package.json",
            "docs/logging.md",
        ],
    )
    def test_kept(self, path):
        assert not should_exclude(path, False)

    def test_file_patterns_do_not_apply_to_directories(self):
        assert not should_exclude("logs/app.log", True)
        assert is_excluded_file_name("app.log")

    def test_empty_path_is_kept(self):
        assert not should_exclude("", True)


def test_split_segments_handles_mixed_separators():
    assert split_segments("a\\b/c//d") == ["a", "b", "c", "d"]
