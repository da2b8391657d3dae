"""Interactive session state and its transition functions.

The whole interactive state is one Session value. The terminal app feeds it keys
and change notifications through ``handle_key`` and ``handle_change``, and the
widget-level events it cannot express as keys (typing into the request box, a
click on a row, focus moving to another widget) through ``edit_request``,
``move_cursor_to`` and ``enter_phase``. Every transition returns the updated
session, so the state machine can be driven directly in tests without a terminal.

Phases and their keys:

    BROWSING_TREE      UP/k, DOWN/j move; ENTER expands or collapses a directory;
                       SPACE toggles selection; / filters rows by name;
                       TAB goes to EDITING_REQUEST; q quits.
    EDITING_REQUEST    typed text edits the request; TAB goes to CONFIRMING_SUBMIT.
    CONFIRMING_SUBMIT  ENTER renders the document and ends the session;
                       TAB returns to BROWSING_TREE; q quits.

CTRL_C quits from every phase. Quitting never produces a document.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Union

from dir2prompt.exceptions import DirectoryLoadError, WatcherError
from dir2prompt.file_system_tree.file_system_node import FileSystemNode
from dir2prompt.file_system_tree.file_system_tree import FileSystemTree, ViewRow
from dir2prompt.prompt_renderer import PromptRenderer
from dir2prompt.watch.change_event import ChangeEvent
from dir2prompt.watch.change_router import ChangeRouter


class SessionPhase(Enum):
    """The three phases of an interactive session, visited in order with one cycle."""

    BROWSING_TREE = "browsing_tree"
    EDITING_REQUEST = "editing_request"
    CONFIRMING_SUBMIT = "confirming_submit"


class Outcome(Enum):
    """How a session ended."""

    SUBMITTED = "submitted"
    QUIT = "quit"


@dataclass
class Session:
    """Complete state of one interactive session.

    The tree is shared between successive values and is mutated in place by
    expansion, selection, and reloads; every other field is replaced.

    Attributes:
        tree: The browsable tree.
        renderer: Renders the document on confirmation.
        router: Applies change notifications to the tree.
        phase: The current phase.
        rows: The flattened tree, recomputed after every structural change.
        cursor: Index of the highlighted row among ``visible_rows``.
        request: The free-text request typed by the user.
        filter_query: Case-insensitive name filter applied to ``rows``.
        filtering: True while the filter query is being typed.
        errors: Non-fatal problems recorded during the session, oldest first.
        outcome: How the session ended, None while it is running.
        document: The rendered document once the session was submitted.
    """

    tree: FileSystemTree
    renderer: PromptRenderer
    router: ChangeRouter
    phase: SessionPhase = SessionPhase.BROWSING_TREE
    rows: List[ViewRow] = field(default_factory=list)
    cursor: int = 0
    request: str = ""
    filter_query: str = ""
    filtering: bool = False
    errors: List[str] = field(default_factory=list)
    outcome: Optional[Outcome] = None
    document: Optional[str] = None

    @property
    def visible_rows(self) -> List[ViewRow]:
        """Rows that pass the name filter, in tree order."""
        if not self.filter_query:
            return self.rows
        query = self.filter_query.casefold()
        return [row for row in self.rows if query in row.node.name.casefold()]

    @property
    def current_node(self) -> Optional[FileSystemNode]:
        """The node under the cursor, or None when no row is visible."""
        rows = self.visible_rows
        if not rows:
            return None
        return rows[min(self.cursor, len(rows) - 1)].node

    @property
    def last_error(self) -> Optional[str]:
        return self.errors[-1] if self.errors else None


def new_session(tree: FileSystemTree, renderer: PromptRenderer) -> Session:
    """Create a session positioned on the first row of a freshly built tree."""
    session = Session(tree=tree, renderer=renderer, router=ChangeRouter(tree), rows=tree.flatten())
    return _collect_tree_errors(session)


def handle_key(session: Session, key: str) -> Session:
    """Apply one decoded key to the session.

    Args:
        session: The current session.
        key: A key token such as "UP", "ENTER", "TAB", "BACKSPACE", "ESC",
            "CTRL_C", or a single printable character.

    Returns:
        The updated session. A finished session is returned unchanged.
    """
    if session.outcome is not None:
        return session
    if key == "CTRL_C":
        return replace(session, outcome=Outcome.QUIT)
    if session.phase is SessionPhase.BROWSING_TREE:
        if session.filtering:
            return _handle_filter_key(session, key)
        return _handle_browse_key(session, key)
    if session.phase is SessionPhase.EDITING_REQUEST:
        return _handle_request_key(session, key)
    return _handle_confirm_key(session, key)


def handle_change(session: Session, notification: Union[ChangeEvent, WatcherError]) -> Session:
    """Apply one change notification (or notification failure) to the session.

    Reloads happen only for expanded directories; when something was reloaded
    the rows are recomputed and the cursor stays on the same entry if it still
    exists. Failures are recorded and the session carries on.
    """
    if session.outcome is not None:
        return session
    if isinstance(notification, WatcherError):
        return replace(session, errors=session.errors + [str(notification)])

    result = session.router.route(notification)
    if result.errors:
        session = replace(session, errors=session.errors + result.errors)
    session = _collect_tree_errors(session)
    if result.reloaded:
        session = _refresh_rows(session)
    return session


def edit_request(session: Session, text: str) -> Session:
    """Replace the request text, as typed into a text box."""
    if session.outcome is not None or text == session.request:
        return session
    return replace(session, request=text)


def move_cursor_to(session: Session, index: int) -> Session:
    """Put the cursor on a visible row, for example one picked with the mouse."""
    if session.outcome is not None or not 0 <= index < len(session.visible_rows):
        return session
    if index == session.cursor:
        return session
    return replace(session, cursor=index)


def enter_phase(session: Session, phase: SessionPhase) -> Session:
    """Switch directly to a phase, for example when another widget takes focus."""
    if session.outcome is not None or phase is session.phase:
        return session
    return replace(session, phase=phase, filtering=False)


def submit(session: Session) -> Session:
    """Render the document and end the session."""
    if session.outcome is not None:
        return session
    document = session.renderer.render(session.tree, session.request)
    return replace(session, outcome=Outcome.SUBMITTED, document=document)


def _handle_browse_key(session: Session, key: str) -> Session:
    if key in ("UP", "k"):
        return _move_cursor(session, -1)
    if key in ("DOWN", "j"):
        return _move_cursor(session, 1)
    if key == "ENTER":
        return _toggle_expand(session)
    if key == " ":
        node = session.current_node
        if node is not None:
            session.tree.toggle_select(node)
        return session
    if key == "/":
        return replace(session, filtering=True)
    if key == "ESC" and session.filter_query:
        return _set_filter(session, "")
    if key == "TAB":
        return replace(session, phase=SessionPhase.EDITING_REQUEST)
    if key == "q":
        return replace(session, outcome=Outcome.QUIT)
    return session


def _handle_filter_key(session: Session, key: str) -> Session:
    if key == "ENTER":
        return replace(session, filtering=False)
    if key == "ESC":
        return replace(_set_filter(session, ""), filtering=False)
    if key == "BACKSPACE":
        return _set_filter(session, session.filter_query[:-1])
    if key in ("UP", "DOWN"):
        return _move_cursor(session, -1 if key == "UP" else 1)
    if _is_text(key):
        return _set_filter(session, session.filter_query + key)
    return session


def _handle_request_key(session: Session, key: str) -> Session:
    if key == "TAB":
        return replace(session, phase=SessionPhase.CONFIRMING_SUBMIT)
    if key == "ENTER":
        return replace(session, request=session.request + "\n")
    if key == "BACKSPACE":
        return replace(session, request=session.request[:-1])
    if _is_text(key):
        return replace(session, request=session.request + key)
    return session


def _handle_confirm_key(session: Session, key: str) -> Session:
    if key == "ENTER":
        return submit(session)
    if key == "TAB":
        return replace(session, phase=SessionPhase.BROWSING_TREE)
    if key == "q":
        return replace(session, outcome=Outcome.QUIT)
    return session


def _is_text(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def _move_cursor(session: Session, delta: int) -> Session:
    count = len(session.visible_rows)
    if count == 0:
        return session
    # The list wraps around at both ends
    return replace(session, cursor=(session.cursor + delta) % count)


def _toggle_expand(session: Session) -> Session:
    node = session.current_node
    if node is None or not node.is_dir:
        return session
    try:
        session.tree.toggle_expand(node)
    except DirectoryLoadError as e:
        session = replace(session, errors=session.errors + [str(e)])
    return _refresh_rows(_collect_tree_errors(session), keep=node)


def _set_filter(session: Session, query: str) -> Session:
    keep = session.current_node
    session = replace(session, filter_query=query)
    return _place_cursor(session, keep)


def _refresh_rows(session: Session, keep: Optional[FileSystemNode] = None) -> Session:
    if keep is None:
        keep = session.current_node
    return _place_cursor(replace(session, rows=session.tree.flatten()), keep)


def _place_cursor(session: Session, keep: Optional[FileSystemNode]) -> Session:
    rows = session.visible_rows
    cursor = min(session.cursor, max(0, len(rows) - 1))
    if keep is not None:
        for index, row in enumerate(rows):
            if row.node.abs_path == keep.abs_path:
                cursor = index
                break
    return replace(session, cursor=cursor)


def _collect_tree_errors(session: Session) -> Session:
    if not session.tree.errors:
        return session
    messages = list(session.tree.errors)
    session.tree.errors.clear()
    return replace(session, errors=session.errors + messages)
