"""Unit tests for the CLI main module."""

import argparse
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from dir2prompt.cli.main import format_counts, main, run_session
from dir2prompt.exceptions import ClipboardUnavailableError, WatcherError, WatcherStartError
from dir2prompt.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dir2prompt.file_system_tree.file_system_tree import FileSystemTree
from dir2prompt.prompt_renderer import FileIssue, PromptRenderer
from dir2prompt.session.session import Outcome, new_session


@pytest.fixture(autouse=True)
def no_signal_handlers():
    with patch("dir2prompt.cli.main.setup_signal_handling"):
        yield


@pytest.fixture
def finished(project):
    """Build a finished session for a given outcome and document."""

    def build(outcome=Outcome.SUBMITTED, document="<user_request>\nDOC\n</user_request>", errors=()):
        session = new_session(FileSystemTree(project), PromptRenderer())
        return replace(session, outcome=outcome, document=document, errors=list(errors))

    return build


def run_main(argv, session=None):
    """Run main() with the interactive session replaced by a finished one."""
    with patch("sys.argv", ["dir2prompt"] + argv), patch("dir2prompt.cli.main.run_session", return_value=session) as rs:
        main()
    return rs


def test_format_counts():
    counts = {"files": 2, "lines": 10, "characters": 120, "tokens": None}
    assert format_counts(counts) == "Files: 2\nLines: 10\nCharacters: 120"
    counts["tokens"] = 30
    assert format_counts(counts) == "Files: 2\nLines: 10\nTokens: 30\nCharacters: 120"


def test_print_writes_document_to_stdout(project, finished, capfd):
    run_main(["-p", project], finished())
    assert capfd.readouterr().out == "<user_request>\nDOC\n</user_request>"


def test_output_writes_document_to_file(project, finished, tmp_path):
    target = tmp_path / "prompt.txt"
    run_main(["-o", str(target), project], finished())
    assert target.read_text() == "<user_request>\nDOC\n</user_request>"


def test_default_copies_to_clipboard(project, finished, capfd):
    with patch("dir2prompt.cli.main.copy_to_clipboard") as mock_copy:
        run_main([project], finished())
    mock_copy.assert_called_once_with("<user_request>\nDOC\n</user_request>")
    captured = capfd.readouterr()
    assert captured.out == ""
    assert "copied to clipboard" in captured.err


def test_clipboard_fallback_to_stdout(project, finished, capfd):
    with patch("dir2prompt.cli.main.copy_to_clipboard", side_effect=ClipboardUnavailableError("no xclip")):
        run_main([project], finished())
    captured = capfd.readouterr()
    assert captured.out == "<user_request>\nDOC\n</user_request>"
    assert "Warning: Clipboard is not available: no xclip" in captured.err


def test_quit_delivers_nothing(project, finished, capfd):
    with patch("dir2prompt.cli.main.copy_to_clipboard") as mock_copy:
        run_main(["-s", project], finished(outcome=Outcome.QUIT, document=None))
    mock_copy.assert_not_called()
    captured = capfd.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_session_receives_configuration(project, finished):
    rs = run_main(
        ["-p", "-f", "json", "-r", "--encoding", "latin-1", "--encoding-errors", "strict", project], finished()
    )
    args, rules, renderer = rs.call_args.args
    assert isinstance(rules, GitIgnoreExclusionRules)
    assert renderer.encoding == "latin-1"
    assert renderer.errors == "strict"
    assert renderer.relative_paths
    assert type(renderer.output_strategy).__name__ == "JSONOutputStrategy"


def test_verbose_prints_warnings(project, finished, capfd):
    session = finished(errors=["Cannot read directory /p/secret: Permission denied"])
    with patch("dir2prompt.cli.main.PromptRenderer") as mock_renderer_class:
        mock_renderer_class.return_value.issues = [FileIssue("/p/img.png", "binary content")]
        run_main(["-p", "-v", project], session)
    err = capfd.readouterr().err
    assert "Warning: Cannot read directory /p/secret: Permission denied" in err
    assert "Warning: /p/img.png: binary content" in err


def test_warnings_are_quiet_without_verbose(project, finished, capfd):
    run_main(["-p", project], finished(errors=["something"]))
    assert "Warning" not in capfd.readouterr().err


def test_summary(project, finished, capfd):
    run_main(["-p", "-s", project], finished(document="one\ntwo\n"))
    err = capfd.readouterr().err
    assert "Files: 0" in err
    assert "Lines: 2" in err
    assert "Characters: 8" in err
    assert "Tokens" not in err


def test_tokenizer_unavailable_fails_before_session(project, capfd):
    with (
        patch("sys.argv", ["dir2prompt", "-t", "gpt-4", project]),
        patch("importlib.util.find_spec", return_value=None),
        patch("dir2prompt.cli.main.run_session") as rs,
    ):
        with pytest.raises(SystemExit) as excinfo:
            main()
    rs.assert_not_called()
    assert excinfo.value.code == 1
    assert "Error: Tokenizer (tiktoken) is not installed" in capfd.readouterr().err


def test_invalid_encoding_is_an_error(project, capfd):
    with pytest.raises(SystemExit) as excinfo:
        run_main(["--encoding", "no-such-codec", project])
    assert excinfo.value.code == 1
    assert "Error: Encoding 'no-such-codec' is not available" in capfd.readouterr().err


def test_watcher_start_failure_is_fatal(project, capfd):
    watcher = MagicMock()
    watcher.start.side_effect = WatcherStartError("inotify instance limit reached")
    with patch("sys.argv", ["dir2prompt", project]), patch("dir2prompt.cli.main.DirectoryWatcher", return_value=watcher):
        with pytest.raises(SystemExit) as excinfo:
            main()
    assert excinfo.value.code == 1
    assert "Error: Cannot start filesystem watcher: inotify instance limit reached" in capfd.readouterr().err


def test_usage_error_exits_with_2(capfd):
    with patch("sys.argv", ["dir2prompt", "--no-such-option"]):
        with pytest.raises(SystemExit) as excinfo:
            main()
    assert excinfo.value.code == 2


def test_signal_exit_code(project, finished):
    with patch("dir2prompt.cli.main.signal_handler") as mock_handler:
        mock_handler.exit_code.return_value = 130
        with pytest.raises(SystemExit) as excinfo:
            run_main(["-p", project], finished(outcome=Outcome.QUIT, document=None))
    assert excinfo.value.code == 130


def session_args(project, discard=False):
    return argparse.Namespace(directory=project, discard_state_on_reload=discard)


def test_run_session_builds_tree_and_stops_watcher(project):
    watcher = MagicMock()
    with (
        patch("dir2prompt.cli.main.DirectoryWatcher", return_value=watcher),
        patch("dir2prompt.cli.main.run_app", side_effect=lambda session, w: session) as run,
    ):
        session = run_session(session_args(project), GitIgnoreExclusionRules(), PromptRenderer())

    watcher.start.assert_called_once()
    watcher.stop.assert_called_once()
    assert run.call_args.args[1] is watcher
    assert session.tree.root_path == project
    assert session.tree.preserve_state
    assert [row.node.name for row in session.rows] == ["a", "b.txt"]
    watcher.watch.assert_any_call(project)


def test_run_session_discard_policy(project):
    with (
        patch("dir2prompt.cli.main.DirectoryWatcher"),
        patch("dir2prompt.cli.main.run_app", side_effect=lambda session, w: session),
    ):
        session = run_session(session_args(project, discard=True), GitIgnoreExclusionRules(), PromptRenderer())
    assert not session.tree.preserve_state


def test_run_session_stops_watcher_when_app_fails(project):
    watcher = MagicMock()
    with (
        patch("dir2prompt.cli.main.DirectoryWatcher", return_value=watcher),
        patch("dir2prompt.cli.main.run_app", side_effect=OSError("No such device or address")),
    ):
        with pytest.raises(OSError):
            run_session(session_args(project), GitIgnoreExclusionRules(), PromptRenderer())
    watcher.stop.assert_called_once()


def test_registration_failures_reach_the_session(project):
    watcher = MagicMock()
    watcher.watch.side_effect = WatcherError("Cannot watch: limit reached")
    with (
        patch("dir2prompt.cli.main.DirectoryWatcher", return_value=watcher),
        patch("dir2prompt.cli.main.run_app", side_effect=lambda session, w: session),
    ):
        session = run_session(session_args(project), GitIgnoreExclusionRules(), PromptRenderer())
    assert session.errors
    assert all("limit reached" in error for error in session.errors)
