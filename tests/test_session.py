"""GUI session state, exercised without a display."""

from __future__ import annotations

import pytest

from conftest import outline_entries, set_mtime
from pdf_merger.core.merger import merge_pdfs
from pdf_merger.core.models import SortKey
from pdf_merger.gui.session import CUSTOM_ORDER, MergeSession


def names(records) -> list[str]:
    return [r.name for r in records]


def loaded_session(input_dir, make_pdfs) -> MergeSession:
    make_pdfs({"b.pdf": 1, "a.pdf": 2, "c.pdf": 3})
    session = MergeSession()
    session.load_files(str(input_dir))
    return session


def test_load_and_sorted_view(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    assert names(session.displayed_files()) == ["a.pdf", "b.pdf", "c.pdf"]

    session.descending = True
    assert names(session.displayed_files()) == ["c.pdf", "b.pdf", "a.pdf"]


def test_date_view(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    set_mtime(input_dir / "c.pdf", 100)
    set_mtime(input_dir / "a.pdf", 200)
    set_mtime(input_dir / "b.pdf", 300)
    session.load_files(str(input_dir))

    session.set_sort_mode("date")

    assert names(session.displayed_files()) == ["c.pdf", "a.pdf", "b.pdf"]


def test_switch_to_custom_keeps_displayed_order(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    session.descending = True

    session.set_sort_mode(CUSTOM_ORDER)

    assert session.is_custom
    assert names(session.displayed_files()) == ["c.pdf", "b.pdf", "a.pdf"]


def test_move_up_down_and_bounds(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    session.set_sort_mode(CUSTOM_ORDER)

    assert not session.move_up(0)
    assert not session.move_down(2)
    assert session.move_down(0)
    assert names(session.files) == ["b.pdf", "a.pdf", "c.pdf"]
    assert session.move_up(2)
    assert names(session.files) == ["b.pdf", "c.pdf", "a.pdf"]


def test_move_file(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    session.set_sort_mode(CUSTOM_ORDER)

    assert session.move_file(0, 2)
    assert names(session.files) == ["b.pdf", "c.pdf", "a.pdf"]
    assert not session.move_file(1, 1)
    assert not session.move_file(0, 9)


def test_can_merge_and_reset(input_dir, tmp_path, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    assert not session.can_merge()

    session.output_path = str(tmp_path / "out.pdf")
    assert session.can_merge()
    session.is_running = True
    assert not session.can_merge()

    session.reset()
    assert session.files == [] and session.input_path == "" and session.sort_mode == SortKey.NAME.value


def test_build_options_custom_order_drives_merge(input_dir, tmp_path, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    session.output_path = str(tmp_path / "out.pdf")
    session.set_sort_mode(CUSTOM_ORDER)
    session.move_file(2, 0)
    session.add_bookmarks = True

    options = session.build_options()
    assert options.uses_custom_order

    result = merge_pdfs(session.input_path, session.output_path, options)

    assert result.success
    assert [t for t, _ in outline_entries(tmp_path / "out.pdf")] == ["c", "a", "b"]


def test_build_options_sorted_mode(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    session.set_sort_mode("size")
    session.file_pattern = ""

    options = session.build_options()

    assert options.custom_file_order is None
    assert options.sort_by is SortKey.SIZE
    assert options.file_pattern is None


class FakeListbox:
    """Stand-in for tk.Listbox: rows are 20px tall, no display needed."""

    def __init__(self):
        self.rows = []
        self.selected = None

    def nearest(self, y):
        return max(0, min(len(self.rows) - 1, y // 20))

    def delete(self, first, last=None):
        self.rows = []

    def insert(self, index, text):
        self.rows.append(text)

    def selection_set(self, index):
        self.selected = index


class FakeButton:
    def config(self, **kwargs):
        self.options = kwargs


class FakeEvent:
    def __init__(self, y):
        self.y = y


def window_for(session):
    pytest.importorskip("tkinter")
    from pdf_merger.gui.main_window import AppGUI

    window = AppGUI.__new__(AppGUI)
    window.session = session
    window.file_list = FakeListbox()
    window.btn_up = FakeButton()
    window.btn_down = FakeButton()
    window._drag_index = None
    window.refresh_file_list()
    return window


def test_drag_reorders_in_custom_mode(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    session.set_sort_mode(CUSTOM_ORDER)
    window = window_for(session)

    window._on_drag_start(FakeEvent(5))
    window._on_drag_motion(FakeEvent(25))
    window._on_drag_motion(FakeEvent(45))
    window._on_drag_end(FakeEvent(45))

    assert names(session.files) == ["b.pdf", "c.pdf", "a.pdf"]
    assert window.file_list.selected == 2
    assert window.file_list.rows[2].startswith("📄 a.pdf")
    assert window._drag_index is None


def test_drag_ignored_outside_custom_mode(input_dir, make_pdfs) -> None:
    session = loaded_session(input_dir, make_pdfs)
    window = window_for(session)

    window._on_drag_start(FakeEvent(5))
    window._on_drag_motion(FakeEvent(45))

    assert names(session.displayed_files()) == ["a.pdf", "b.pdf", "c.pdf"]
