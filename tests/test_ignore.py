# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for ignore patterns."""

from copilot_zipper.ignore import IgnoreFiles, compile_pattern, parse_rules


class TestIgnoreFiles:
    """Tests for IgnoreFiles."""

    def test_exact_path_match(self):
        """Test that a file is excluded by its exact path."""
        ignore = IgnoreFiles("the-dir/the-path")
        assert ignore.file_should_be_ignored("the-dir/the-path") is True

    def test_exact_directory_excludes_contents(self):
        """Test that a directory path excludes everything below it."""
        ignore = IgnoreFiles("dir1/dir2")
        assert ignore.file_should_be_ignored("dir1/dir2/the-file") is True
        assert ignore.file_should_be_ignored("dir1/dir2/dir3/the-file") is True
        assert ignore.file_should_be_ignored("dir1/other") is False

    def test_bare_name_matches_anywhere(self):
        """Test that a bare name matches as a segment anywhere in the path."""
        ignore = IgnoreFiles("dir1")
        assert ignore.file_should_be_ignored("dir1") is True
        assert ignore.file_should_be_ignored("dir2/dir1") is True
        assert ignore.file_should_be_ignored("dir3/dir2/dir1") is True
        assert ignore.file_should_be_ignored("dir3/dir1/dir2") is True
        assert ignore.file_should_be_ignored("x/dir1/y") is True

    def test_bare_name_does_not_match_partial_segment(self):
        """Test that a bare name does not match inside another name."""
        ignore = IgnoreFiles("dir1")
        assert ignore.file_should_be_ignored("dir10") is False
        assert ignore.file_should_be_ignored("a/mydir1/b") is False

    def test_star_pattern(self):
        """Test that a star matches within one segment."""
        ignore = IgnoreFiles("dir1/*.so")
        assert ignore.file_should_be_ignored("dir1/file1.so") is True
        assert ignore.file_should_be_ignored("dir1/file2.cc") is False
        assert ignore.file_should_be_ignored("dir1/sub/file1.so") is False

    def test_double_star_pattern(self):
        """Test that a double star spans any number of segments."""
        ignore = IgnoreFiles("dir1/**/*.so")
        assert ignore.file_should_be_ignored("dir1/dir2/dir3/file1.so") is True
        assert ignore.file_should_be_ignored("dir1/a/b/file.so") is True
        assert ignore.file_should_be_ignored("dir1/file.so") is True
        assert ignore.file_should_be_ignored("different-dir/dir2/file.so") is False
        assert ignore.file_should_be_ignored("other/file.so") is False

    def test_trailing_double_star(self):
        """Test that a trailing double star matches everything below."""
        ignore = IgnoreFiles("build/**")
        assert ignore.file_should_be_ignored("build/a") is True
        assert ignore.file_should_be_ignored("build/a/b/c.o") is True
        assert ignore.file_should_be_ignored("src/build.py") is False

    def test_explicit_include(self):
        """Test that a negated rule re-includes a path."""
        ignore = IgnoreFiles("\nnode_modules/*\n!node_modules/common\n")
        assert ignore.file_should_be_ignored("node_modules/something-else") is True
        assert ignore.file_should_be_ignored("node_modules/common") is False

    def test_rules_applied_top_to_bottom(self):
        """Test that the last matching rule decides."""
        ignore = IgnoreFiles("\nstuff/*\n!stuff/*.c\nstuff/exclude.c")
        assert ignore.file_should_be_ignored("stuff/something.txt") is True
        assert ignore.file_should_be_ignored("stuff/exclude.c") is True
        assert ignore.file_should_be_ignored("stuff/include.c") is False

    def test_rule_order_reversed(self):
        """Test that swapping exclude and include swaps the outcome."""
        assert IgnoreFiles("*.log\n!*.log").file_should_be_ignored("app.log") is False
        assert IgnoreFiles("!*.log\n*.log").file_should_be_ignored("app.log") is True

    def test_unmatched_path_not_ignored(self):
        """Test that a path matching no rule is kept."""
        ignore = IgnoreFiles("*.tmp")
        assert ignore.file_should_be_ignored("src/main.py") is False

    def test_vcs_directories_ignored_by_default(self):
        """Test that VCS metadata is ignored without any rule."""
        ignore = IgnoreFiles("")
        assert ignore.file_should_be_ignored(".git/objects") is True
        assert ignore.file_should_be_ignored(".svn") is True
        assert ignore.file_should_be_ignored("sub/.hg/store") is True

    def test_vcs_default_can_be_reincluded(self):
        """Test that a negated rule overrides a default."""
        ignore = IgnoreFiles("!.git")
        assert ignore.file_should_be_ignored(".git/objects") is False
        assert ignore.file_should_be_ignored(".svn") is True

    def test_path_normalization(self):
        """Test that leading ./ and backslashes are normalized."""
        ignore = IgnoreFiles("dir1/*.so")
        assert ignore.file_should_be_ignored("./dir1/a.so") is True
        assert ignore.file_should_be_ignored("dir1\\a.so") is True

    def test_leading_slash_matches_root_only(self):
        """Test that an anchored name only matches at the top of the tree."""
        ignore = IgnoreFiles("/build")
        assert ignore.file_should_be_ignored("build") is True
        assert ignore.file_should_be_ignored("build/out.o") is True
        assert ignore.file_should_be_ignored("src/build") is False
        assert ignore.file_should_be_ignored("src/build/out.o") is False
        assert ignore.file_should_be_ignored("buildx") is False

    def test_anchored_nested_path(self):
        """Test that an anchored path does not match deeper copies of itself."""
        ignore = IgnoreFiles("/docs/api")
        assert ignore.file_should_be_ignored("docs/api/index.html") is True
        assert ignore.file_should_be_ignored("vendor/docs/api/index.html") is False

    def test_anchored_reinclude(self):
        """Test that an anchored negation only re-includes the root entry."""
        ignore = IgnoreFiles("vendor\n!/vendor")
        assert ignore.file_should_be_ignored("vendor/lib.py") is False
        assert ignore.file_should_be_ignored("src/vendor/lib.py") is True

    def test_from_file_excludes_extra_defaults(self, tmp_path):
        """Test that extra default patterns are applied when loading a file."""
        pattern_file = tmp_path / ".zipperignore"
        pattern_file.write_text("*.pyc\n")

        ignore = IgnoreFiles.from_file(str(pattern_file), (".git", ".zipperignore"))

        assert ignore.file_should_be_ignored(".zipperignore") is True
        assert ignore.file_should_be_ignored("mod.pyc") is True
        assert IgnoreFiles.from_file(str(tmp_path / "missing"), ("x",)).file_should_be_ignored("x") is True

    def test_from_file(self, tmp_path):
        """Test loading rules from a file."""
        pattern_file = tmp_path / ".zipperignore"
        pattern_file.write_text("*.pyc\n")

        ignore = IgnoreFiles.from_file(str(pattern_file))

        assert ignore.file_should_be_ignored("pkg/mod.pyc") is False
        assert ignore.file_should_be_ignored("mod.pyc") is True

    def test_from_missing_file(self, tmp_path):
        """Test that a missing file yields the defaults only."""
        ignore = IgnoreFiles.from_file(str(tmp_path / "missing"))
        assert ignore.file_should_be_ignored(".git") is True
        assert ignore.file_should_be_ignored("anything") is False


class TestParseRules:
    """Tests for pattern parsing."""

    def test_blank_lines_skipped(self):
        """Test that blank and whitespace lines produce no rule."""
        rules = parse_rules("\n  \na\n\nb\n")
        assert [rule.pattern for rule in rules] == ["a", "b"]

    def test_negation_parsed(self):
        """Test that a leading ! marks the rule as negated."""
        rules = parse_rules("!keep\ndrop")
        assert rules[0].pattern == "keep"
        assert rules[0].negated is True
        assert rules[1].negated is False

    def test_leading_slash_anchors_rule(self):
        """Test that a leading slash is recorded as an anchor and stripped."""
        rules = parse_rules("/build/\nbuild/\n!/keep\n")
        assert rules[0].pattern == "build"
        assert rules[0].anchored is True
        assert rules[1].pattern == "build"
        assert rules[1].anchored is False
        assert rules[2].negated is True
        assert rules[2].anchored is True

    def test_special_characters_are_literal(self):
        """Test that regex metacharacters in patterns match literally."""
        regex = compile_pattern("a+b/[x].txt")
        assert regex.match("a+b/[x].txt")
        assert not regex.match("aab/x.txt")
