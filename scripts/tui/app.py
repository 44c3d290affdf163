"""
Task Form TUI Application.

Main entry point for the terminal user interface.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure scripts directory is in path
SCRIPT_DIR = Path(__file__).resolve().parent.parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from textual.app import App  # noqa: E402
from textual.binding import Binding  # noqa: E402

from tui.form import FormController, FormState  # noqa: E402
from tui.providers import TaskStore  # noqa: E402
from tui.task_store import FileTaskStore, StoreError  # noqa: E402
from tui.views.form_screen import FormScreen  # noqa: E402

logger = logging.getLogger(__name__)

# Keys intercepted before Textual's focus and quit defaults see them.
ROUTED_KEYS = (
    "tab", "shift+tab", "up", "down", "left", "right",
    "enter", "ctrl+r", "escape", "ctrl+c",
)


class TaskFormApp(App[FormState]):
    """Single-shot form that appends one task to the store."""

    TITLE = "Task Form"
    SUB_TITLE = "Create A New Task"

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding(key, f"route_key('{key}')", show=False, priority=True)
        for key in ROUTED_KEYS
    ]

    def __init__(self, store: TaskStore | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._store = store if store is not None else FileTaskStore()
        self.controller = FormController(self._store)
        self.store_error: StoreError | None = None
        self._form_screen: FormScreen | None = None

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self._form_screen = FormScreen(self.controller)
        self.push_screen(self._form_screen)

    def action_route_key(self, key: str) -> None:
        self.route_key(key)

    def route_key(self, key: str, character: str | None = None) -> None:
        """Feed one key to the controller, then redraw or exit."""
        try:
            state = self.controller.handle_key(key, character)
        except StoreError as e:
            logger.error("Could not save task: %s", e)
            self.store_error = e
            self.exit(return_code=1)
            return
        self._after_event(state)

    def route_paste(self, text: str) -> None:
        self.controller.paste(text)
        self._after_event(self.controller.state)

    def _after_event(self, state: FormState) -> None:
        if state is not FormState.EDITING:
            logger.info("Form finished: %s", state.value)
            self.exit(state)
            return
        if self._form_screen is not None:
            self._form_screen.refresh_form(reset_blink=True)


def run(tasks_file: Path | None = None) -> int:
    """Run the TUI application and return the process exit code."""
    app = TaskFormApp(store=FileTaskStore(tasks_file))
    app.run()
    if app.store_error is not None:
        print(f"could not save task: {app.store_error}", file=sys.stderr)
        return 1
    if app.return_code:
        print(f"task form exited with code {app.return_code}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
