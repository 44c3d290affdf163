"""Tests for the Textual form app and its render helpers."""

import asyncio
import json
import sys
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

import tui.app
from tui.app import TaskFormApp
from tui.form import CursorMode, FieldView, FormController, FormState
from tui.task_store import DecodeError, FileTaskStore, StoreIOError
from tui.views.widgets import caret_visible, render_actions, render_field, render_status


def run_app(app: TaskFormApp, *keys: str) -> TaskFormApp:
    """Drive the app headless with the given key presses."""

    async def drive() -> None:
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press(*keys)

    asyncio.run(drive())
    return app


def field_view(**overrides) -> FieldView:
    values = dict(
        placeholder="Title",
        value="",
        caret=0,
        char_limit=32,
        focused=True,
        cursor_mode=CursorMode.STATIC,
    )
    values.update(overrides)
    return FieldView(**values)


@pytest.fixture
def tasks_file(tmp_path: Path) -> Path:
    return tmp_path / "db" / "tasks.json"


class TestRenderHelpers:
    """Tests for widget render functions."""

    def test_blurred_empty_field_shows_placeholder(self) -> None:
        text = render_field(field_view(focused=False))
        assert text.plain == "> Title"

    def test_focused_empty_field_draws_caret_on_placeholder(self) -> None:
        text = render_field(field_view())
        assert text.plain == "> Title"

    def test_caret_at_end_adds_cell(self) -> None:
        text = render_field(field_view(value="abc", caret=3))
        assert text.plain == "> abc "

    def test_hidden_caret(self) -> None:
        text = render_field(field_view(value="abc", caret=3, cursor_mode=CursorMode.HIDDEN))
        assert text.plain == "> abc"

    def test_caret_visibility(self) -> None:
        assert caret_visible(field_view(), blink_on=False)
        assert caret_visible(field_view(cursor_mode=CursorMode.BLINK), blink_on=True)
        assert not caret_visible(field_view(cursor_mode=CursorMode.BLINK), blink_on=False)
        assert not caret_visible(field_view(cursor_mode=CursorMode.HIDDEN), blink_on=True)
        assert not caret_visible(field_view(focused=False), blink_on=True)

    def test_actions_and_status(self) -> None:
        form = FormController(FileTaskStore())
        view = form.view()
        assert render_actions(view).plain == "[ Submit ]\t[ Cancel ]"
        assert render_status(view).plain == "cursor mode is blink (ctrl+r to change style)"


class TestTaskFormApp:
    """Headless tests for TaskFormApp."""

    def test_type_title_and_submit(self, tasks_file: Path) -> None:
        app = run_app(
            TaskFormApp(store=FileTaskStore(tasks_file)),
            "F", "i", "x", "shift+tab", "enter",
        )

        assert app.return_value is FormState.COMMITTED
        assert app.store_error is None
        records = json.loads(tasks_file.read_text())
        assert len(records) == 1
        assert records[0]["title"] == "Fix"
        assert records[0]["description"] == ""

    def test_escape_leaves_missing_file_missing(self, tasks_file: Path) -> None:
        app = run_app(TaskFormApp(store=FileTaskStore(tasks_file)), "a", "b", "escape")

        assert app.return_value is FormState.ABANDONED
        assert not tasks_file.exists()
        assert not tasks_file.parent.exists()

    def test_ctrl_c_leaves_existing_file_untouched(self, tasks_file: Path) -> None:
        tasks_file.parent.mkdir(parents=True)
        original = b'[{"title": "keep me"}]'
        tasks_file.write_bytes(original)

        app = run_app(TaskFormApp(store=FileTaskStore(tasks_file)), "z", "ctrl+c")

        assert app.return_value is FormState.ABANDONED
        assert tasks_file.read_bytes() == original

    def test_cancel_button_abandons(self, tasks_file: Path) -> None:
        app = run_app(
            TaskFormApp(store=FileTaskStore(tasks_file)),
            "q", "shift+tab", "tab", "enter",
        )

        assert app.return_value is FormState.ABANDONED
        assert not tasks_file.exists()

    def test_navigation_and_cursor_mode(self, tasks_file: Path) -> None:
        app = run_app(
            TaskFormApp(store=FileTaskStore(tasks_file)),
            "down", "down", "up", "ctrl+r",
        )

        assert app.controller.focus_index == 1
        assert app.controller.cursor_mode is CursorMode.STATIC
        assert app.controller.state is FormState.EDITING

    def test_store_failure_exits_with_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        app = run_app(
            TaskFormApp(store=FileTaskStore(blocker / "tasks.json")),
            "shift+tab", "enter",
        )

        assert app.store_error is not None
        assert app.return_code == 1

    def test_undecodable_file_exits_with_decode_error(self, tasks_file: Path) -> None:
        tasks_file.parent.mkdir(parents=True)
        tasks_file.write_bytes(b"\xff")

        app = run_app(
            TaskFormApp(store=FileTaskStore(tasks_file)),
            "shift+tab", "enter",
        )

        assert isinstance(app.store_error, DecodeError)
        assert app.return_code == 1
        assert tasks_file.read_bytes() == b"\xff"


class TestRun:
    """Tests for mapping the app outcome to a process exit code."""

    def test_clean_exit(self, tasks_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(TaskFormApp, "run", lambda self, *a, **kw: None)
        monkeypatch.setattr(TaskFormApp, "return_code", property(lambda self: 0))

        assert tui.app.run(tasks_file) == 0

    def test_store_error_exits_one(
        self, tasks_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        def fail(self, *args, **kwargs) -> None:
            self.store_error = StoreIOError("disk full")

        monkeypatch.setattr(TaskFormApp, "run", fail)
        monkeypatch.setattr(TaskFormApp, "return_code", property(lambda self: 1))

        assert tui.app.run(tasks_file) == 1
        assert "disk full" in capsys.readouterr().err

    def test_crashed_app_exits_one(
        self, tasks_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        monkeypatch.setattr(TaskFormApp, "run", lambda self, *a, **kw: None)
        monkeypatch.setattr(TaskFormApp, "return_code", property(lambda self: 1))

        assert tui.app.run(tasks_file) == 1
        assert "exited with code 1" in capsys.readouterr().err
