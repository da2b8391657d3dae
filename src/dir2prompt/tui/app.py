"""Textual application that runs an interactive session.

The app keeps no browsing state of its own. Key bindings, typing in the request
box, clicks, focus changes, and change notifications are all turned into
session transitions, and the widgets are then brought in line with the
resulting session. The watcher is drained on a timer on the app's own loop, so
the tree is only ever touched from one thread.
"""

from dataclasses import replace
from typing import Dict, Optional, Tuple

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Footer, Label, OptionList, Static, TextArea
from textual.widgets.option_list import Option

from dir2prompt.file_system_tree.file_system_tree import ViewRow
from dir2prompt.session.session import (
    Outcome,
    Session,
    SessionPhase,
    edit_request,
    enter_phase,
    handle_change,
    handle_key,
    move_cursor_to,
    submit,
)
from dir2prompt.watch.base_watcher import BaseWatcher

# Seconds between drains of pending change notifications
POLL_INTERVAL = 0.05

FOOTER = "Press q to quit."

PHASE_WIDGETS: Dict[SessionPhase, str] = {
    SessionPhase.BROWSING_TREE: "#tree",
    SessionPhase.EDITING_REQUEST: "#request",
    SessionPhase.CONFIRMING_SUBMIT: "#copy",
}


def row_label(row: ViewRow) -> Text:
    """Label for one tree row: checkbox, indentation, icon, and name.

    Example:
        >>> from dir2prompt.file_system_tree.file_system_node import FileSystemNode
        >>> row_label(ViewRow(FileSystemNode("/p/a", is_dir=True), 1)).plain
        '[ ]   📁 a'
    """
    node = row.node
    if node.is_dir:
        icon = "📂 " if node.expanded else "📁 "
    else:
        icon = "📄 "
    checkbox = ("[x]", "bold green") if node.selected else ("[ ]", "dim")
    return Text.assemble(checkbox, " ", "  " * row.depth + icon + node.name)


def tree_title(session: Session) -> Text:
    """Title above the tree, showing the name filter while one is set."""
    title = "File Tree"
    if session.filtering or session.filter_query:
        title += f"  /{session.filter_query}"
        if session.filtering:
            title += "_"
    return Text(title, style="bold")


def status_line(session: Session) -> Text:
    """The help line followed by the most recent problem, if any."""
    error = session.last_error
    if error is None:
        return Text(FOOTER)
    return Text.assemble(FOOTER, "  ", (error, "red"))


class SessionTree(OptionList):
    """The file tree. Its keys are forwarded to the session."""

    BINDINGS = [
        Binding("up,k", "app.session_key('UP')", "Up", show=False),
        Binding("down,j", "app.session_key('DOWN')", "Down", show=False),
        Binding("enter", "app.session_key('ENTER')", "Expand"),
        Binding("space", "app.session_key(' ')", "Select"),
        Binding("slash", "app.session_key('/')", "Filter"),
        Binding("escape", "app.session_key('ESC')", "Clear filter", show=False),
        Binding("backspace", "app.session_key('BACKSPACE')", show=False),
    ]

    class Typed(Message):
        """A printable key typed while the name filter is being edited."""

        def __init__(self, character: str) -> None:
            super().__init__()
            self.character = character

    # Mirrors Session.filtering
    filtering = False

    def on_key(self, event: events.Key) -> None:
        # Filter text takes precedence over the single-letter bindings
        if self.filtering and event.is_printable and event.character is not None:
            event.stop()
            event.prevent_default()
            self.post_message(self.Typed(event.character))


class PromptApp(App[Session]):
    """Runs one session: a file tree on the left, the request and Copy button on the right.

    The app exits with the finished session as its return value.

    Attributes:
        session (Session): The current session value.
        watcher (Optional[BaseWatcher]): Source of change notifications.
    """

    CSS = """
    #body { height: 1fr; }
    #tree_panel { width: 1fr; height: 100%; }
    #request_panel { width: 1fr; height: 100%; padding: 0 2; }
    #tree { height: 1fr; border: none; }
    #request { height: 1fr; }
    #copy { margin-top: 1; }
    #status_bar { height: 1; padding: 0 1; }
    """

    BINDINGS = [
        Binding("ctrl+c", "session_key('CTRL_C')", "Quit", show=False, priority=True),
        Binding("tab", "session_key('TAB')", "Next", priority=True),
        Binding("q", "session_key('q')", "Quit"),
    ]

    def __init__(self, session: Session, watcher: Optional[BaseWatcher] = None) -> None:
        super().__init__()
        self.session = session
        self.watcher = watcher
        self._shown_rows: Optional[Tuple[Tuple[str, int, bool, bool], ...]] = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="body"):
            with Vertical(id="tree_panel"):
                yield Label(tree_title(self.session), id="tree_title")
                yield SessionTree(id="tree")
            with Vertical(id="request_panel"):
                yield Label("User Request:")
                yield TextArea(self.session.request, id="request")
                yield Button("Copy", id="copy")
        yield Static(status_line(self.session), id="status_bar")
        yield Footer()

    def on_mount(self) -> None:
        self._sync_view()
        if self.watcher is not None:
            self.set_interval(POLL_INTERVAL, self.drain_notifications)

    def action_session_key(self, key: str) -> None:
        """Apply a key to the session."""
        self.session = handle_key(self.session, key)
        self._sync_view()

    def drain_notifications(self) -> None:
        """Apply every pending change notification to the session."""
        if self.watcher is None:
            return
        session = self.session
        for notification in self.watcher.drain():
            session = handle_change(session, notification)
        if session is not self.session:
            self.session = session
            self._sync_view()

    def on_session_tree_typed(self, event: SessionTree.Typed) -> None:
        self.action_session_key(event.character)

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        # Highlight moved by the list itself (mouse, page keys)
        self.session = move_cursor_to(self.session, event.option_index)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        # A click on a row acts like ENTER on that row
        session = enter_phase(self.session, SessionPhase.BROWSING_TREE)
        session = move_cursor_to(session, event.option_index)
        self.session = handle_key(session, "ENTER")
        self._sync_view()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.session = edit_request(self.session, event.text_area.text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "copy":
            self.session = submit(self.session)
            self._sync_view()

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        # Ignore focus changes that were already superseded
        if event.widget is not self.focused:
            return
        for phase, selector in PHASE_WIDGETS.items():
            if event.widget.id == selector.lstrip("#"):
                self.session = enter_phase(self.session, phase)
                self._sync_view()
                return

    def _sync_view(self) -> None:
        session = self.session
        if session.outcome is not None:
            self.exit(session)
            return

        tree = self.query_one(SessionTree)
        tree.filtering = session.filtering
        rows = session.visible_rows
        shown = tuple((row.node.abs_path, row.depth, row.node.expanded, row.node.selected) for row in rows)
        with self.prevent(OptionList.OptionHighlighted):
            if shown != self._shown_rows:
                if rows:
                    tree.set_options(row_label(row) for row in rows)
                else:
                    message = "No entries match the filter" if session.filter_query else "Empty directory"
                    tree.set_options([Option(Text(message, style="dim"), disabled=True)])
                self._shown_rows = shown
            tree.highlighted = session.cursor if rows else None

        self.query_one("#tree_title", Label).update(tree_title(session))
        self.query_one("#status_bar", Static).update(status_line(session))

        widget = self.query_one(PHASE_WIDGETS[session.phase])
        if self.focused is not widget:
            widget.focus()


def run_app(session: Session, watcher: Optional[BaseWatcher] = None) -> Session:
    """Run a session in the terminal until it is submitted or quit.

    Textual draws on standard error, so standard output stays free for the
    document.

    Returns:
        The finished session. Closing the app any other way counts as quitting.
    """
    app = PromptApp(session, watcher)
    result = app.run()
    if result is None:
        return replace(app.session, outcome=Outcome.QUIT)
    return result
