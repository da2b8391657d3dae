"""Command-line interface for dir2prompt.

This module runs an interactive session on the controlling terminal and delivers
the resulting prompt document. The document goes to the clipboard by default,
to standard output with -p, or to a file with -o. When no clipboard mechanism is
available the document is written to standard output instead.

Diagnostics:
    Problems found during the session (unreadable directories, watcher failures,
    files rendered as binary) are recorded and shown in the session's status
    line. With -v/--verbose they are printed to stderr as warnings after the
    interface is closed. Fatal problems are printed as errors.

Exit Codes:
    0: Document delivered, or the session was quit
    1: Runtime error (including failure to start the filesystem watcher)
    2: Command-line syntax error
    130: Interrupted by SIGINT
    141: Broken pipe (SIGPIPE) while writing the document

Example:
    # Browse the current directory
    $ dir2prompt

    # Browse a project and print the prompt
    $ dir2prompt -p -e .gitignore /path/to/project > prompt.txt
"""

import argparse
import sys
from collections.abc import Mapping
from typing import List, Optional

from dir2prompt.cli.argparser import create_parser, validate_args
from dir2prompt.cli.clipboard import copy_to_clipboard
from dir2prompt.cli.safe_writer import SafeWriter
from dir2prompt.cli.signal_handler import setup_signal_handling, signal_handler
from dir2prompt.exceptions import ClipboardUnavailableError
from dir2prompt.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dir2prompt.file_system_tree.file_system_tree import FileSystemTree
from dir2prompt.prompt_renderer import PromptRenderer
from dir2prompt.session.session import Outcome, Session, new_session
from dir2prompt.token_counter import TokenCounter
from dir2prompt.tui.app import run_app
from dir2prompt.watch.directory_watcher import DirectoryWatcher


def format_counts(counts: Mapping[str, Optional[int]]) -> str:
    """Format document statistics into a human-readable string.

    Args:
        counts: Mapping with "files", "lines", "characters", and "tokens" (None
            when token counting is disabled).

    Returns:
        One labelled count per line.
    """
    result = [
        f"Files: {counts['files']}",
        f"Lines: {counts['lines']}",
        f"Characters: {counts['characters']}",
    ]

    if counts["tokens"] is not None:
        result.insert(2, f"Tokens: {counts['tokens']}")

    return "\n".join(result)


def run_session(
    args: argparse.Namespace, exclusion_rules: GitIgnoreExclusionRules, renderer: PromptRenderer
) -> Session:
    """Start the watcher, build the tree, and run the interactive session.

    Every watch registration is released when the session ends, however it ends.

    Raises:
        WatcherStartError: If filesystem notification cannot be started.
    """
    watcher = DirectoryWatcher()
    watcher.start()
    try:
        tree = FileSystemTree(
            args.directory,
            exclusion_rules=exclusion_rules,
            watcher=watcher,
            preserve_state=not args.discard_state_on_reload,
        )
        return run_app(new_session(tree, renderer), watcher)
    finally:
        watcher.stop()


def collect_warnings(session: Session, renderer: PromptRenderer) -> List[str]:
    """Messages for every non-fatal problem recorded during the session."""
    warnings = list(session.errors)
    warnings.extend(f"{issue.path}: {issue.reason}" for issue in renderer.issues)
    return warnings


def deliver(document: str, args: argparse.Namespace) -> None:
    """Send the document to the destination chosen on the command line.

    Raises:
        BrokenPipeError: If standard output is closed while writing.
        OSError: If the output file cannot be written.
    """
    if args.output is not None:
        with SafeWriter(args.output) as writer:
            writer.write(document)
        return

    if not args.print:
        try:
            copy_to_clipboard(document)
            print("Prompt copied to clipboard.", file=sys.stderr)
            return
        except ClipboardUnavailableError as e:
            print(f"Warning: {e}. Writing the prompt to standard output.", file=sys.stderr)

    with SafeWriter(sys.stdout.fileno()) as writer:
        writer.write(document)


def main() -> None:
    """Main entry point for the dir2prompt command-line interface.

    Exit codes:
        0: Document delivered, or the session was quit
        1: Runtime error during execution
        2: Command-line syntax error
        130: Interrupted by SIGINT
        141: Broken pipe (SIGPIPE) while writing the document
    """
    setup_signal_handling()

    try:
        # Populated by the parser in command-line order
        exclusion_rules = GitIgnoreExclusionRules()
        parser = create_parser(exclusion_rules)
        args = parser.parse_args()
        validate_args(args)

        # Fail before the session if statistics cannot be produced
        counter = TokenCounter(args.tokenizer) if args.summary or args.tokenizer else None

        renderer = PromptRenderer(
            output_format=args.format,
            encoding=args.encoding,
            errors=args.encoding_errors,
            relative_paths=args.relative_paths,
        )

        session = run_session(args, exclusion_rules, renderer)

        if args.verbose:
            for warning in collect_warnings(session, renderer):
                print(f"Warning: {warning}", file=sys.stderr)

        if session.outcome is Outcome.SUBMITTED and session.document is not None:
            try:
                deliver(session.document, args)
            except BrokenPipeError:
                pass  # Reported through the exit code

            if counter is not None:
                counter.count(session.document)
                counts = {
                    "files": sum(1 for _ in session.tree.iter_selected_files()),
                    "lines": counter.get_total_lines(),
                    "characters": counter.get_total_characters(),
                    "tokens": counter.get_total_tokens(),
                }
                print(format_counts(counts), file=sys.stderr)

    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
