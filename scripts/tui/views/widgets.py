"""Reusable widgets for the task form."""

from rich.style import Style
from rich.text import Text
from textual.widgets import Static

from tui.form import CursorMode, FieldView, FormView

PROMPT = "> "
FOCUSED = Style(color="color(205)")
BLURRED = Style(color="color(240)")
HELP = Style(color="color(240)")
CURSOR_MODE_HELP = Style(color="color(244)")
CARET = Style(color="color(205)", reverse=True)


def caret_visible(view: FieldView, blink_on: bool) -> bool:
    """Whether the caret should be drawn for this field right now."""
    if not view.focused or view.cursor_mode is CursorMode.HIDDEN:
        return False
    if view.cursor_mode is CursorMode.BLINK:
        return blink_on
    return True


def render_field(view: FieldView, blink_on: bool = True) -> Text:
    """Render one field as prompt + value (or placeholder) + caret."""
    style = FOCUSED if view.focused else Style()
    text = Text(PROMPT, style=style)
    show_caret = caret_visible(view, blink_on)

    if not view.value:
        if show_caret:
            head, tail = view.placeholder[:1] or " ", view.placeholder[1:]
            text.append(head, style=CARET)
            text.append(tail, style=BLURRED)
        else:
            text.append(view.placeholder, style=BLURRED)
        return text

    before, after = view.value[: view.caret], view.value[view.caret :]
    text.append(before, style=style)
    if show_caret:
        text.append(after[:1] or " ", style=CARET)
        after = after[1:]
    text.append(after, style=style)
    return text


def render_button(label: str, focused: bool) -> Text:
    if focused:
        return Text(f"[ {label} ]", style=FOCUSED)
    text = Text("[ ")
    text.append(label, style=BLURRED)
    text.append(" ]")
    return text


def render_actions(view: FormView) -> Text:
    """Render the Submit and Cancel buttons on one line."""
    text = render_button("Submit", view.submit_focused)
    text.append("\t")
    text.append_text(render_button("Cancel", view.cancel_focused))
    return text


def render_status(view: FormView) -> Text:
    text = Text("cursor mode is ", style=HELP)
    text.append(str(view.cursor_mode), style=CURSOR_MODE_HELP)
    text.append(" (ctrl+r to change style)", style=HELP)
    return text


class FieldRow(Static):
    """One input line of the form."""

    DEFAULT_CSS = """
    FieldRow {
        height: 1;
    }
    """

    def show(self, view: FieldView, blink_on: bool) -> None:
        self.update(render_field(view, blink_on))


class ActionBar(Static):
    """Submit / Cancel buttons."""

    DEFAULT_CSS = """
    ActionBar {
        height: 1;
        margin: 1 0;
    }
    """

    def show(self, view: FormView) -> None:
        self.update(render_actions(view))


class CursorModeLine(Static):
    """Status line naming the current cursor mode."""

    DEFAULT_CSS = """
    CursorModeLine {
        height: 1;
    }
    """

    def show(self, view: FormView) -> None:
        self.update(render_status(view))
