import pytest

from dir2prompt.exclusion_rules.git_rules import GitIgnoreExclusionRules


@pytest.fixture
def gitignore(tmp_path):
    path = tmp_path / ".gitignore"
    path.write_text("*.txt\n!important.txt\nsubdir/\n*.py[cod]\n**/__pycache__/\n")
    return path


@pytest.mark.parametrize(
    "path,expected",
    [
        ("file.txt", True),
        ("important.txt", False),
        ("file.py", False),
        ("subdir/", True),
        ("subdir/file.py", True),
        ("nested/subdir/", True),
        ("another_dir/file.txt", True),
        ("file.pyc", True),
        ("__pycache__/", True),
        ("lib/__pycache__/", True),
        ("lib/", False),
    ],
)
def test_gitignore_exclusion_rules(gitignore, path, expected):
    rules = GitIgnoreExclusionRules(gitignore)
    assert rules.exclude(path) == expected, f"Failed for path: {path}"


def test_empty_rules_exclude_nothing(tmp_path):
    empty = tmp_path / "empty"
    empty.write_text("")
    rules = GitIgnoreExclusionRules(empty)
    assert not rules.exclude("any_file.txt")
    assert not GitIgnoreExclusionRules().exclude("any_file.txt")


def test_missing_rules_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        GitIgnoreExclusionRules(tmp_path / "nonexistent")


def test_multiple_rules_files_apply_in_order(tmp_path):
    first = tmp_path / "first"
    first.write_text("*.log\n")
    second = tmp_path / "second"
    second.write_text("!keep.log\n")
    rules = GitIgnoreExclusionRules([first, second])
    assert rules.exclude("debug.log")
    assert not rules.exclude("keep.log")


def test_add_rule_mixed_with_files(gitignore):
    rules = GitIgnoreExclusionRules()
    rules.add_rule("*.md")
    rules.load_rules(gitignore)
    rules.add_rule("!file.txt")
    assert rules.exclude("README.md")
    assert rules.exclude("other.txt")
    assert not rules.exclude("file.txt")


def test_directory_pattern_needs_trailing_slash():
    rules = GitIgnoreExclusionRules()
    rules.add_rule("build/")
    assert rules.exclude("build/")
    assert not rules.exclude("build")


def test_rules_added_after_matching_take_effect():
    rules = GitIgnoreExclusionRules()
    assert not rules.exclude("debug.log")
    rules.add_rule("*.log")
    assert rules.exclude("debug.log")
    rules.add_rule("!debug.log")
    assert not rules.exclude("debug.log")
    assert rules.patterns == ["*.log", "!debug.log"]
