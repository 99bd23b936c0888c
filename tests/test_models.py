from datetime import date
import pytest

from custodycompass.models import (
    CustodyBlock, CustomPattern, HolidayRule, NamedPattern, Parent, ScheduleConfig, pattern_from_id,
)


def test_parent_parse_and_other():
    assert Parent.parse("a") is Parent.A
    assert Parent.parse(" B ") is Parent.B
    assert Parent.A.other is Parent.B
    assert Parent.B.other is Parent.A
    assert Parent.A == "A"
    with pytest.raises(ValueError):
        Parent.parse("C")


@pytest.mark.parametrize("text,rule", [
    ("alternate", HolidayRule.ALTERNATE),
    ("alternate-by-year", HolidayRule.ALTERNATE),
    ("split", HolidayRule.SPLIT),
    ("fixed-a", HolidayRule.FIXED_A),
    ("always-A", HolidayRule.FIXED_A),
    ("always-B", HolidayRule.FIXED_B),
])
def test_holiday_rule_parse(text, rule):
    assert HolidayRule.parse(text) is rule


def test_holiday_rule_unknown():
    with pytest.raises(ValueError):
        HolidayRule.parse("every-third-year")


def test_pattern_from_id():
    assert pattern_from_id("2-2-3") == NamedPattern("2-2-3")
    assert pattern_from_id("custom", [0, 1, 1]) == CustomPattern((0, 1, 1))
    assert pattern_from_id("custom") == CustomPattern(())


def test_schedule_pattern_id():
    assert ScheduleConfig(NamedPattern("3-4-4-3"), date(2024, 1, 1)).pattern_id == "3-4-4-3"
    assert ScheduleConfig(CustomPattern((0, 1)), date(2024, 1, 1)).pattern_id == "custom"


def test_block_days_inclusive():
    assert CustodyBlock(date(2024, 1, 1), date(2024, 1, 7), Parent.A).days == 7
    assert CustodyBlock(date(2024, 1, 15), date(2024, 1, 15), Parent.A).days == 1
