"""Tests for sleepmon.routine -- bedtime checklist."""

import pytest

from sleepmon.routine import (
    add_item,
    default_routine,
    remove_item,
    reset_routine,
    routine_progress,
    toggle_item,
)


class TestRoutine:
    def test_defaults(self):
        items = default_routine()
        assert len(items) == 5
        assert items[0].title == "Brush teeth"
        assert [i.id for i in items] == ["1", "2", "3", "4", "5"]
        assert not any(i.completed for i in items)

    def test_progress(self):
        items = default_routine()
        assert routine_progress(items) == 0.0
        items = toggle_item(items, "1")
        items = toggle_item(items, "2")
        assert routine_progress(items) == pytest.approx(40.0)

    def test_progress_empty(self):
        assert routine_progress([]) == 0.0

    def test_toggle_twice(self):
        items = toggle_item(toggle_item(default_routine(), "3"), "3")
        assert items == default_routine()

    def test_add_assigns_next_id(self):
        items = add_item(default_routine(), "  Stretch  ")
        assert items[-1].id == "6"
        assert items[-1].title == "Stretch"

    def test_add_blank_rejected(self):
        with pytest.raises(ValueError):
            add_item(default_routine(), "   ")

    def test_remove(self):
        items = remove_item(default_routine(), "2")
        assert [i.id for i in items] == ["1", "3", "4", "5"]
        with pytest.raises(ValueError):
            remove_item(items, "2")

    def test_reset(self):
        items = toggle_item(default_routine(), "1")
        assert routine_progress(reset_routine(items)) == 0.0
