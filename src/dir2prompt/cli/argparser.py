"""Command-line argument parsing for dir2prompt."""

import argparse
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from dir2prompt import __version__
from dir2prompt.exclusion_rules.base_rules import BaseExclusionRules


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create an argparse action that feeds exclusion options into a rules object.

    Rule files (-e) and single patterns (-i) are applied as they are parsed, so
    their relative order on the command line is the order in which they match.

    Args:
        exclusion_rules: The rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return
            if option_string in ("-e", "--exclude"):
                try:
                    exclusion_rules.load_rules(Path(str(values)))
                except FileNotFoundError as e:
                    parser.error(str(e))
            else:
                exclusion_rules.add_rule(str(values))

            recorded = getattr(namespace, self.dest, None) or []
            setattr(namespace, self.dest, recorded + [values])

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with dir2prompt's options.
    """
    description = """
    dir2prompt: Interactively pick files from a directory and turn them into an LLM prompt.

    Browse the directory as a tree, select files or whole directories, type a request,
    and confirm. The result is one document holding a tree of the selected entries,
    the contents of every selected file, and the request. The tree follows the
    filesystem while you browse: entries created, deleted, or renamed in any expanded
    directory show up without restarting.

    Keys:
      Up/k, Down/j   move the cursor
      Enter          expand or collapse a directory
      Space          select or deselect (directories select everything below them)
      /              filter entries by name (Enter to finish, Esc to clear)
      Tab            switch between the tree, the request, and the Copy button
      Enter on Copy  produce the document
      q, Ctrl+C      quit without producing anything
    """

    epilog = """
    Examples:
      # Browse the current directory and copy the prompt to the clipboard
      dir2prompt

      # Browse a project, hiding what its .gitignore hides
      dir2prompt -e .gitignore /path/to/project

      # Hide individual patterns
      dir2prompt -i "*.pyc" -i "node_modules/" /path/to/project

      # Write the prompt to standard output or to a file instead of the clipboard
      dir2prompt -p /path/to/project > prompt.txt
      dir2prompt -o prompt.txt /path/to/project

      # JSON document with paths relative to the browsed directory
      dir2prompt -f json -r /path/to/project

      # Report document statistics, including tokens for a model
      dir2prompt -s -t gpt-4 /path/to/project
    """

    parser = argparse.ArgumentParser(
        prog="dir2prompt",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dir2prompt {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "directory",
        type=Path,
        nargs="?",
        default=Path("."),
        help="The directory to browse (default: the current directory).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help=(
            "Path to exclusion file (e.g., .gitignore) hiding entries from the tree "
            "(can be specified multiple times)."
        ),
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        help=(
            "Individual gitignore-style pattern hiding entries from the tree, such as *.log, build/ or "
            "!keep.log. Can be specified multiple times; patterns apply in the order they appear, mixed "
            "with -e/--exclude options."
        ),
    )

    destination = parser.add_mutually_exclusive_group()
    destination.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Write the document to FILE instead of copying it to the clipboard.",
    )
    destination.add_argument(
        "-p",
        "--print",
        action="store_true",
        help="Write the document to standard output instead of copying it to the clipboard.",
    )

    parser.add_argument(
        "-f",
        "--format",
        choices=["xml", "json"],
        default="xml",
        help="Document format (default: xml).",
    )
    parser.add_argument(
        "-r",
        "--relative-paths",
        action="store_true",
        help="Show file paths relative to the browsed directory instead of as absolute paths.",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Encoding used to read selected files (default: utf-8).",
    )
    parser.add_argument(
        "--encoding-errors",
        choices=["replace", "ignore", "strict"],
        default="replace",
        help=(
            "How bytes that cannot be decoded are handled: replace them with U+FFFD, drop them, "
            "or show the whole file as binary (default: replace)."
        ),
    )
    parser.add_argument(
        "--discard-state-on-reload",
        action="store_true",
        help=(
            "When a directory changes on disk, collapse and deselect its entries instead of keeping "
            "their state."
        ),
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model used to count tokens in the summary (e.g., gpt-4). Implies --summary.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        action="store_true",
        help="Print document statistics to standard error.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print the problems recorded during the session (unreadable directories, binary files, ...).",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments beyond what argparse checks.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.output is not None and args.output.is_dir():
        raise ValueError(f"Output path is a directory: {args.output}")
