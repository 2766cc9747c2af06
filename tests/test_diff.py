"""Tests for gitscribe.git.diff module."""

import pytest

from gitscribe.git.diff import (
    UnifiedDiff,
    filter_diff,
    filter_sections,
    glob_to_regex,
    parse_unified_diff,
    section_path,
)


class TestSectionPath:
    """Tests for section_path function."""

    def test_plain_header(self):
        """Test extracting the path from a plain header."""
        assert section_path("diff --git a/src/main.go b/src/main.go") == "src/main.go"

    def test_rename_uses_new_path(self):
        """Test that the b/ side is used for renames."""
        assert section_path("diff --git a/old/name.py b/new/name.py") == "new/name.py"

    def test_quoted_path(self):
        """Test that C-quoted paths are unquoted."""
        assert section_path('diff --git "a/my file.txt" "b/my file.txt"') == "my file.txt"

    def test_not_a_header(self):
        """Test that other lines yield None."""
        assert section_path("+++ b/src/main.go") is None


class TestParseUnifiedDiff:
    """Tests for parse_unified_diff function."""

    def test_splits_into_sections_in_order(self, sample_diff):
        """Test that every file becomes a section, in order."""
        diff = parse_unified_diff(sample_diff)
        assert diff.paths == ["README.md", "src/main.go", "dist/bundle.js"]

    def test_render_reproduces_input(self, sample_diff):
        """Test that rendering gives back the original text."""
        assert parse_unified_diff(sample_diff).render() == sample_diff

    def test_preamble_kept(self):
        """Test that text before the first header is preserved."""
        text = "warning: something\ndiff --git a/x b/x\n+1\n"
        diff = parse_unified_diff(text)
        assert diff.preamble == "warning: something\n"
        assert diff.paths == ["x"]
        assert diff.render() == text

    def test_empty(self):
        """Test that an empty diff has no sections."""
        assert parse_unified_diff("") == UnifiedDiff()

    def test_content_line_starting_like_header_inside_hunk(self):
        """Test that only line-initial headers split sections."""
        text = "diff --git a/a.txt b/a.txt\n+ diff --git a/b b/b\n"
        assert parse_unified_diff(text).paths == ["a.txt"]


class TestGlobToRegex:
    """Tests for glob_to_regex function."""

    def test_star_suffix(self):
        """Test that *.md matches only names ending in .md."""
        regex = glob_to_regex("*.md")
        assert regex.match("README.md")
        assert not regex.match("README.md.bak")

    def test_directory_prefix_is_anchored(self):
        """Test that dist/* matches from the start of the path only."""
        regex = glob_to_regex("dist/*")
        assert regex.match("dist/bundle.js")
        assert not regex.match("other/dist/x")

    def test_dot_is_literal(self):
        """Test that dots are not regex wildcards."""
        assert not glob_to_regex("go.sum").match("goXsum")

    def test_question_mark(self):
        """Test that ? matches exactly one character."""
        regex = glob_to_regex("file?.txt")
        assert regex.match("file1.txt")
        assert not regex.match("file12.txt")

    def test_regex_metacharacters_are_literal(self):
        """Test that other regex syntax in a glob is escaped."""
        regex = glob_to_regex("a+(b).txt")
        assert regex.match("a+(b).txt")
        assert not regex.match("aa(b).txt")

    def test_brackets_are_literal(self):
        """Test that [...] is matched literally, not as a character class."""
        regex = glob_to_regex("log[1].txt")
        assert regex.match("log[1].txt")
        assert not regex.match("log1.txt")

    def test_compilation_is_deterministic(self):
        """Test that the same glob yields the same regex."""
        assert glob_to_regex("*.lock").pattern == glob_to_regex("*.lock").pattern


class TestFilterDiff:
    """Tests for filter_diff and filter_sections."""

    def test_no_patterns_is_identity(self, sample_diff):
        """Test that an empty pattern list returns the diff unchanged."""
        assert filter_diff(sample_diff, []) is sample_diff

    def test_drops_matching_sections(self, sample_diff):
        """Test that only src/main.go survives *.md and dist/*."""
        filtered = filter_diff(sample_diff, ["*.md", "dist/*"])
        assert parse_unified_diff(filtered).paths == ["src/main.go"]
        assert "i < len(items)" in filtered
        assert "README" not in filtered

    def test_non_matching_sections_untouched(self, sample_diff):
        """Test that surviving sections are byte-for-byte identical."""
        original = parse_unified_diff(sample_diff)
        filtered = filter_sections(original, ["*.md"])
        assert filtered.sections == original.sections[1:]

    def test_all_sections_removed(self, sample_diff):
        """Test filtering everything away leaves an empty diff."""
        assert filter_diff(sample_diff, ["*"]).strip() == ""

    def test_pattern_matching_nothing(self, sample_diff):
        """Test that a pattern matching no file changes nothing."""
        assert filter_diff(sample_diff, ["*.lock"]) == sample_diff

    @pytest.mark.parametrize("patterns", [["*.md", "*.md"], ["*.md", "README*"]])
    def test_section_matched_by_several_patterns_removed_once(self, sample_diff, patterns):
        """Test that overlapping patterns still drop the section once."""
        assert parse_unified_diff(filter_diff(sample_diff, patterns)).paths == [
            "src/main.go",
            "dist/bundle.js",
        ]
