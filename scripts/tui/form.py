"""
Form state machine for the task entry screen.

No Textual imports: the app feeds raw key names in and reads a FormView
back out. Everything shown on screen is derived from the focus index and
the cursor mode at render time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from tui.providers import Task, TaskStore

logger = logging.getLogger(__name__)

TITLE_CHAR_LIMIT = 32
DEFAULT_CHAR_LIMIT = 64

# (Task attribute, placeholder, char limit) in focus order
FIELD_SPECS: tuple[tuple[str, str, int], ...] = (
    ("title", "Title", TITLE_CHAR_LIMIT),
    ("description", "Description", DEFAULT_CHAR_LIMIT),
    ("urgency", "Urgency", DEFAULT_CHAR_LIMIT),
    ("status", "Status", DEFAULT_CHAR_LIMIT),
    ("assigned_by", "Assigned By ( Email )", DEFAULT_CHAR_LIMIT),
    ("comments", "Comments", DEFAULT_CHAR_LIMIT),
)

NEXT_KEYS = frozenset({"tab", "down", "right"})
PREVIOUS_KEYS = frozenset({"shift+tab", "up", "left"})
QUIT_KEYS = frozenset({"escape", "ctrl+c"})
ENTER_KEY = "enter"
CURSOR_MODE_KEY = "ctrl+r"


class CursorMode(Enum):
    """How the focused field's caret is drawn."""

    BLINK = "blink"
    STATIC = "static"
    HIDDEN = "hidden"

    def next(self) -> CursorMode:
        modes = list(CursorMode)
        return modes[(modes.index(self) + 1) % len(modes)]

    def __str__(self) -> str:
        return self.value


class FormState(Enum):
    EDITING = "editing"
    COMMITTED = "committed"
    ABANDONED = "abandoned"


class Intent(Enum):
    """What a raw key means at the current focus position."""

    NEXT = "next"
    PREVIOUS = "previous"
    ADVANCE = "advance"
    ACTIVATE = "activate"
    CYCLE_CURSOR = "cycle_cursor"
    ABANDON = "abandon"
    EDIT = "edit"


def _printable(text: str) -> str:
    return "".join(c for c in text if c.isprintable())


@dataclass
class Field:
    """One editable text slot. ``value`` never exceeds ``char_limit``."""

    name: str
    placeholder: str
    char_limit: int = DEFAULT_CHAR_LIMIT
    value: str = ""
    caret: int = 0

    @property
    def room(self) -> int:
        return max(0, self.char_limit - len(self.value))

    def insert(self, text: str) -> None:
        """Insert at the caret, dropping whatever does not fit."""
        text = _printable(text)[: self.room]
        if not text:
            return
        self.value = self.value[: self.caret] + text + self.value[self.caret :]
        self.caret += len(text)

    def backspace(self) -> None:
        if self.caret == 0:
            return
        self.value = self.value[: self.caret - 1] + self.value[self.caret :]
        self.caret -= 1

    def delete(self) -> None:
        self.value = self.value[: self.caret] + self.value[self.caret + 1 :]

    def delete_to_start(self) -> None:
        self.value = self.value[self.caret :]
        self.caret = 0

    def delete_to_end(self) -> None:
        self.value = self.value[: self.caret]

    def home(self) -> None:
        self.caret = 0

    def end(self) -> None:
        self.caret = len(self.value)

    def apply_key(self, key: str, character: str | None = None) -> bool:
        """Apply an editing key. Returns False for keys with no meaning here."""
        handler = {
            "backspace": self.backspace,
            "ctrl+h": self.backspace,
            "delete": self.delete,
            "ctrl+d": self.delete,
            "home": self.home,
            "ctrl+a": self.home,
            "end": self.end,
            "ctrl+e": self.end,
            "ctrl+u": self.delete_to_start,
            "ctrl+k": self.delete_to_end,
        }.get(key)
        if handler is not None:
            handler()
            return True
        if character and len(character) == 1 and character.isprintable():
            self.insert(character)
            return True
        return False


class FocusRing:
    """Focus index over N fields followed by Submit (N) and Cancel (N + 1).

    Wrapping is asymmetric: stepping past Cancel lands on the first field,
    stepping back from the first field lands on Submit.
    """

    def __init__(self, field_count: int, index: int = 0):
        self.field_count = field_count
        self.index = index

    @property
    def submit_index(self) -> int:
        return self.field_count

    @property
    def cancel_index(self) -> int:
        return self.field_count + 1

    @property
    def on_field(self) -> bool:
        return self.index < self.field_count

    @property
    def on_submit(self) -> bool:
        return self.index == self.submit_index

    @property
    def on_cancel(self) -> bool:
        return self.index == self.cancel_index

    def next(self) -> int:
        self.index += 1
        if self.index > self.cancel_index:
            self.index = 0
        return self.index

    def previous(self) -> int:
        self.index -= 1
        if self.index < 0:
            self.index = self.submit_index
        return self.index


@dataclass(frozen=True)
class FieldView:
    """Display attributes for one field."""

    placeholder: str
    value: str
    caret: int
    char_limit: int
    focused: bool
    cursor_mode: CursorMode


@dataclass(frozen=True)
class FormView:
    """Everything the screen needs for one redraw."""

    fields: tuple[FieldView, ...]
    submit_focused: bool
    cancel_focused: bool
    cursor_mode: CursorMode
    state: FormState

    @property
    def status_line(self) -> str:
        return f"cursor mode is {self.cursor_mode} (ctrl+r to change style)"


class FormController:
    """Turns key events into focus moves, edits, commit or abandon.

    Single shot: once the form is committed or abandoned every further
    event is ignored.
    """

    def __init__(
        self,
        store: TaskStore,
        field_specs: tuple[tuple[str, str, int], ...] = FIELD_SPECS,
    ) -> None:
        self.fields = [Field(name, placeholder, limit) for name, placeholder, limit in field_specs]
        self.ring = FocusRing(len(self.fields))
        self.cursor_mode = CursorMode.BLINK
        self.state = FormState.EDITING
        self._store = store

    @property
    def focus_index(self) -> int:
        return self.ring.index

    @property
    def finished(self) -> bool:
        return self.state is not FormState.EDITING

    @property
    def focused_field(self) -> Field | None:
        if self.ring.on_field:
            return self.fields[self.ring.index]
        return None

    def resolve_intent(self, key: str) -> Intent:
        """Map a raw key to an intent given the current focus."""
        if key in QUIT_KEYS:
            return Intent.ABANDON
        if key == CURSOR_MODE_KEY:
            return Intent.CYCLE_CURSOR
        if key == ENTER_KEY:
            return Intent.ADVANCE if self.ring.on_field else Intent.ACTIVATE
        if key in NEXT_KEYS:
            return Intent.NEXT
        if key in PREVIOUS_KEYS:
            return Intent.PREVIOUS
        return Intent.EDIT

    def handle_key(self, key: str, character: str | None = None) -> FormState:
        """Process one key event and return the resulting state.

        Store errors raised during commit propagate; the form stays in
        the editing state.
        """
        if self.finished:
            return self.state

        intent = self.resolve_intent(key)
        if intent in (Intent.NEXT, Intent.ADVANCE):
            self.ring.next()
        elif intent is Intent.PREVIOUS:
            self.ring.previous()
        elif intent is Intent.CYCLE_CURSOR:
            self.cursor_mode = self.cursor_mode.next()
            logger.debug("Cursor mode is now %s", self.cursor_mode)
        elif intent is Intent.ABANDON:
            self.abandon()
        elif intent is Intent.ACTIVATE:
            self.activate()
        else:
            field = self.focused_field
            if field is not None:
                field.apply_key(key, character)
        return self.state

    def paste(self, text: str) -> None:
        """Insert pasted text into the focused field."""
        field = self.focused_field
        if self.finished or field is None:
            return
        field.insert(text)

    def activate(self) -> None:
        """Press whichever action button has focus."""
        if self.ring.on_submit:
            self.commit()
        elif self.ring.on_cancel:
            self.abandon()

    def abandon(self) -> None:
        self.state = FormState.ABANDONED
        logger.debug("Form abandoned")

    def commit(self) -> None:
        task = self.build_task()
        self._store.append(task)
        self.state = FormState.COMMITTED
        logger.debug("Form committed: %r", task.title)

    def build_task(self) -> Task:
        """Build a Task from the current field values.

        The Comments field holds a single comment; an empty one means none.
        """
        values = {f.name: f.value for f in self.fields}
        comment = values.pop("comments", "")
        return Task(**values, comments=(comment,) if comment else ())

    def view(self) -> FormView:
        """Derive display attributes from focus index and cursor mode."""
        fields = tuple(
            FieldView(
                placeholder=f.placeholder,
                value=f.value,
                caret=f.caret,
                char_limit=f.char_limit,
                focused=i == self.ring.index,
                cursor_mode=self.cursor_mode,
            )
            for i, f in enumerate(self.fields)
        )
        return FormView(
            fields=fields,
            submit_focused=self.ring.on_submit,
            cancel_focused=self.ring.on_cancel,
            cursor_mode=self.cursor_mode,
            state=self.state,
        )
