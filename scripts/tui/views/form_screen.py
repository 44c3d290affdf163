"""Task entry screen."""

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Label

from tui.form import CursorMode, FormController
from tui.views.widgets import ActionBar, CursorModeLine, FieldRow

BLINK_INTERVAL = 0.53


class FormScreen(Screen):
    """Renders the form controller and forwards unbound keys to the app."""

    DEFAULT_CSS = """
    FormScreen {
        padding: 1 2;
    }

    FormScreen .form-title {
        color: $accent;
        text-style: bold;
        margin-bottom: 1;
    }
    """

    def __init__(self, controller: FormController, **kwargs) -> None:
        super().__init__(**kwargs)
        self._controller = controller
        self._blink_on = True

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("  Create A New Task \n ____________________", classes="form-title")
            for i in range(len(self._controller.fields)):
                yield FieldRow(id=f"field-{i}")
            yield ActionBar(id="actions")
            yield CursorModeLine(id="cursor-mode")

    def on_mount(self) -> None:
        self.set_interval(BLINK_INTERVAL, self._toggle_blink)
        self.refresh_form()

    def _toggle_blink(self) -> None:
        if self._controller.cursor_mode is not CursorMode.BLINK:
            return
        self._blink_on = not self._blink_on
        self.refresh_form()

    def refresh_form(self, reset_blink: bool = False) -> None:
        """Redraw every field, both buttons and the status line."""
        if reset_blink:
            self._blink_on = True
        if not self.is_mounted:
            return
        view = self._controller.view()
        for i, field_view in enumerate(view.fields):
            self.query_one(f"#field-{i}", FieldRow).show(field_view, self._blink_on)
        self.query_one("#actions", ActionBar).show(view)
        self.query_one("#cursor-mode", CursorModeLine).show(view)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.app.route_key(event.key, event.character)

    def on_paste(self, event: events.Paste) -> None:
        event.stop()
        self.app.route_paste(event.text)
