import pytest

from treeclip import IGNORE_FILENAME
from treeclip.core import ConfigFileError, PatternSyntaxError, build_matcher

from conftest import make_tree


def test_no_rules_excludes_nothing(tmp_path):
    make_tree(tmp_path, {"a.txt": "", "src/main.py": ""})
    matcher = build_matcher(tmp_path)
    assert not matcher.is_excluded(tmp_path)
    assert not matcher.is_excluded(tmp_path / "a.txt")
    assert not matcher.is_excluded(tmp_path / "src")
    assert not matcher.is_excluded(tmp_path / "src" / "main.py")


def test_ignore_file_rules(tmp_path):
    make_tree(tmp_path, {IGNORE_FILENAME: "node_modules\n", "node_modules/x.js": "", "temp1.txt": ""})
    matcher = build_matcher(tmp_path)
    assert matcher.is_excluded(tmp_path / "node_modules")
    assert not matcher.is_excluded(tmp_path / "temp1.txt")
    assert not matcher.is_excluded(tmp_path)


def test_ignore_file_excludes_itself(tmp_path):
    make_tree(tmp_path, {IGNORE_FILENAME: "*.log\n"})
    matcher = build_matcher(tmp_path)
    assert matcher.is_excluded(tmp_path / IGNORE_FILENAME)


def test_cli_patterns(tmp_path):
    (tmp_path / "target").mkdir()
    (tmp_path / "src").mkdir()
    matcher = build_matcher(tmp_path, ["target"])
    assert matcher.is_excluded(tmp_path / "target")
    assert not matcher.is_excluded(tmp_path / "src")


def test_ignore_file_and_cli_patterns_combine(tmp_path):
    make_tree(tmp_path, {IGNORE_FILENAME: "node_modules"})
    for name in ("node_modules", "target", "src"):
        (tmp_path / name).mkdir()
    matcher = build_matcher(tmp_path, ["target"])
    assert matcher.is_excluded(tmp_path / "node_modules")
    assert matcher.is_excluded(tmp_path / "target")
    assert not matcher.is_excluded(tmp_path / "src")


def test_cli_negation_overrides_ignore_file(tmp_path):
    make_tree(tmp_path, {IGNORE_FILENAME: "*.log\n"})
    matcher = build_matcher(tmp_path, ["!keep.log"])
    assert matcher.is_excluded("debug.log", is_dir=False)
    assert not matcher.is_excluded("keep.log", is_dir=False)


def test_last_matching_rule_wins(tmp_path):
    matcher = build_matcher(tmp_path, ["a.txt", "!a.txt", "a.txt"])
    assert matcher.is_excluded("a.txt", is_dir=False)
    matcher = build_matcher(tmp_path, ["a.txt", "!a.txt"])
    assert not matcher.is_excluded("a.txt", is_dir=False)


def test_directory_only_pattern(tmp_path):
    matcher = build_matcher(tmp_path, ["build/"])
    assert matcher.is_excluded("build", is_dir=True)
    assert not matcher.is_excluded("build", is_dir=False)
    assert matcher.is_excluded("pkg/build", is_dir=True)


def test_is_dir_is_detected_when_not_given(tmp_path):
    (tmp_path / "build").mkdir()
    (tmp_path / "other").write_text("")
    matcher = build_matcher(tmp_path, ["build/", "other/"])
    assert matcher.is_excluded(tmp_path / "build")
    assert not matcher.is_excluded(tmp_path / "other")


def test_comments_and_blank_lines_are_ignored(tmp_path):
    make_tree(tmp_path, {IGNORE_FILENAME: "# generated files\n\n*.pyc\n"})
    matcher = build_matcher(tmp_path)
    assert matcher.is_excluded("mod.pyc", is_dir=False)
    assert not matcher.is_excluded("mod.py", is_dir=False)


def test_anchored_pattern(tmp_path):
    matcher = build_matcher(tmp_path, ["/docs"])
    assert matcher.is_excluded("docs", is_dir=True)
    assert not matcher.is_excluded("pkg/docs", is_dir=True)


def test_invalid_pattern_raises(tmp_path):
    with pytest.raises(PatternSyntaxError):
        build_matcher(tmp_path, ["!"])


def test_config_file_patterns(tmp_path):
    config = tmp_path / "extra.txt"
    config.write_text("# comment\n*.tmp\n\n", encoding="utf-8")
    matcher = build_matcher(tmp_path, extra_patterns_file=config)
    assert matcher.is_excluded("scratch.tmp", is_dir=False)
    assert not matcher.is_excluded("scratch.txt", is_dir=False)


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(ConfigFileError):
        build_matcher(tmp_path, extra_patterns_file=tmp_path / "nope.txt")


def test_cli_patterns_come_after_config_file(tmp_path):
    config = tmp_path / "extra.txt"
    config.write_text("*.tmp\n", encoding="utf-8")
    matcher = build_matcher(tmp_path, ["!keep.tmp"], extra_patterns_file=config)
    assert not matcher.is_excluded("keep.tmp", is_dir=False)
