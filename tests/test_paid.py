"""Tests for the paid-mark overlay."""

import pytest

from catorcena.domain.entities import PaidMark
from catorcena.domain.errors import ValidationError


class TestPaidService:
    def test_unmarked_item_is_unpaid(self, paid_service):
        assert paid_service.is_paid(2025, 0, "12") is False

    def test_toggle_marks_paid(self, paid_service):
        assert paid_service.toggle(2025, 3, "1-7-0") is True
        assert paid_service.is_paid(2025, 3, "1-7-0")

    def test_double_toggle_restores_state(self, paid_service):
        paid_service.toggle(2025, 3, "1-7-0")
        assert paid_service.toggle(2025, 3, "1-7-0") is False
        assert not paid_service.is_paid(2025, 3, "1-7-0")
        assert paid_service.list_marks() == []

    def test_mark_is_per_period(self, paid_service):
        paid_service.set_paid(2025, 3, "12", True)
        assert not paid_service.is_paid(2025, 4, "12")

    def test_mark_is_per_year(self, paid_service):
        paid_service.toggle(2025, 0, "12")
        assert paid_service.is_paid(2025, 0, "12")
        assert not paid_service.is_paid(2026, 0, "12")

    def test_set_paid_is_idempotent(self, paid_service):
        paid_service.set_paid(2025, 1, "5", True)
        paid_service.set_paid(2025, 1, "5", True)
        assert paid_service.list_marks() == [PaidMark(2025, 1, "5")]
        paid_service.set_paid(2025, 1, "5", False)
        paid_service.set_paid(2025, 1, "5", False)
        assert paid_service.list_marks() == []

    def test_list_marks_ordered(self, paid_service):
        paid_service.set_paid(2025, 5, "b", True)
        paid_service.set_paid(2026, 0, "a", True)
        paid_service.set_paid(2025, 2, "z", True)
        paid_service.set_paid(2025, 5, "a", True)
        assert paid_service.list_marks() == [
            PaidMark(2025, 2, "z"),
            PaidMark(2025, 5, "a"),
            PaidMark(2025, 5, "b"),
            PaidMark(2026, 0, "a"),
        ]
        assert paid_service.list_marks(2026) == [PaidMark(2026, 0, "a")]

    @pytest.mark.parametrize(
        "year,period_index,item_id",
        [
            (2025, -1, "12"),
            (2025, 26, "12"),
            (2025, "3", "12"),
            (2025, True, "12"),
            (2025, 0, ""),
            (2025, 0, "  "),
            ("2025", 0, "12"),
            (0, 0, "12"),
        ],
    )
    def test_invalid_keys(self, paid_service, year, period_index, item_id):
        with pytest.raises(ValidationError):
            paid_service.toggle(year, period_index, item_id)
