"""Interactive session state and its transitions."""

from .session import (
    Outcome,
    Session,
    SessionPhase,
    edit_request,
    enter_phase,
    handle_change,
    handle_key,
    move_cursor_to,
    new_session,
    submit,
)

__all__ = [
    "Outcome",
    "Session",
    "SessionPhase",
    "edit_request",
    "enter_phase",
    "handle_change",
    "handle_key",
    "move_cursor_to",
    "new_session",
    "submit",
]
