"""Tests for the shared time arithmetic."""

from subdelay.timing import ShiftResult, shift_ms, split_ms


class TestShiftMs:
    def test_positive(self) -> None:
        assert shift_ms(1000, 500) == 1500

    def test_negative_within_range(self) -> None:
        assert shift_ms(1000, -400) == 600

    def test_clamps_to_zero(self) -> None:
        assert shift_ms(1000, -5000) == 0

    def test_exactly_zero(self) -> None:
        assert shift_ms(1000, -1000) == 0


class TestSplitMs:
    def test_components(self) -> None:
        assert split_ms(3_723_004) == (1, 2, 3, 4)

    def test_unbounded_hours(self) -> None:
        assert split_ms(125 * 3_600_000) == (125, 0, 0, 0)


def test_shift_result_defaults() -> None:
    result = ShiftResult(text="x")
    assert result.shifted == 0
    assert result.warnings == []
