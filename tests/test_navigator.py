"""
Unit tests for Navigator.
"""

import pytest

from licensing_exam.engine.navigator import Navigator
from licensing_exam.errors import InvalidNavigation


class TestNavigator:

    def test_starts_at_first_question(self):
        nav = Navigator(3)
        assert nav.current_index == 0
        assert nav.is_first
        assert not nav.is_last

    def test_next_clamps_at_last_index(self):
        nav = Navigator(3)
        assert nav.next() == 1
        assert nav.next() == 2
        assert nav.next() == 2
        assert nav.is_last

    def test_previous_clamps_at_zero(self):
        nav = Navigator(3)
        assert nav.previous() == 0
        nav.go_to(2)
        assert nav.previous() == 1

    def test_go_to_any_index(self):
        nav = Navigator(10)
        assert nav.go_to(7) == 7
        assert nav.go_to(0) == 0

    @pytest.mark.parametrize("bad_index", [-1, 10, 99, "3", 2.0, True])
    def test_go_to_out_of_range_leaves_cursor_unchanged(self, bad_index):
        nav = Navigator(10)
        nav.go_to(4)

        with pytest.raises(InvalidNavigation):
            nav.go_to(bad_index)

        assert nav.current_index == 4

    def test_single_question(self):
        nav = Navigator(1)
        assert nav.next() == 0
        assert nav.previous() == 0
        assert nav.is_first and nav.is_last

    def test_requires_at_least_one_question(self):
        with pytest.raises(ValueError):
            Navigator(0)
