from datetime import date, timedelta
import pytest

from custodycompass.calendar_logic import resolve_base_parent
from custodycompass.errors import UnknownPatternError
from custodycompass.models import NamedPattern, Parent, ScheduleConfig
from custodycompass.patterns import DEFAULT_PATTERNS, PatternTable

# dokumentierte Verteilung (Tage A, Tage B) je 14-Tage-Zyklus
DISTRIBUTION = {
    "alternating-weeks": (7, 7),
    "2-2-3": (7, 7),
    "2-2-5-5": (9, 5),
    "3-4-4-3": (7, 7),
    "every-other-weekend": (12, 2),
}


def test_builtin_patterns_registered():
    assert sorted(DEFAULT_PATTERNS.names()) == sorted(DISTRIBUTION)
    assert "custom" not in DEFAULT_PATTERNS


def test_alternating_weeks_literal():
    assert DEFAULT_PATTERNS.get_cycle("alternating-weeks") == (0,) * 7 + (1,) * 7


@pytest.mark.parametrize("pattern_id,expected", sorted(DISTRIBUTION.items()))
def test_cycle_distribution(pattern_id, expected):
    cycle = DEFAULT_PATTERNS.get_cycle(pattern_id)
    start = date(2024, 1, 1)
    config = ScheduleConfig(NamedPattern(pattern_id), start, Parent.A)
    resolved = [resolve_base_parent(start + timedelta(days=i), config) for i in range(len(cycle))]
    assert (resolved.count(Parent.A), resolved.count(Parent.B)) == expected


def test_unknown_pattern_raises():
    with pytest.raises(UnknownPatternError) as exc:
        DEFAULT_PATTERNS.get_cycle("1-in-3")
    assert exc.value.pattern_id == "1-in-3"
    # 'custom' ist kein Tabelleneintrag
    with pytest.raises(UnknownPatternError):
        DEFAULT_PATTERNS.get_cycle("custom")


def test_display_names():
    assert DEFAULT_PATTERNS.display_name("2-2-3") == "2-2-3 Rotation"
    assert DEFAULT_PATTERNS.display_name("custom") == "Custom Pattern"
    assert DEFAULT_PATTERNS.display_name("unlisted") == "unlisted"


def test_injected_table_is_used():
    table = PatternTable({"three-day": [0, 0, 1]})
    config = ScheduleConfig(NamedPattern("three-day"), date(2024, 1, 1), Parent.A)
    days = [resolve_base_parent(date(2024, 1, d), config, table) for d in range(1, 7)]
    assert days == [Parent.A, Parent.A, Parent.B, Parent.A, Parent.A, Parent.B]
    # eingebaute Muster sind in der injizierten Tabelle nicht bekannt
    with pytest.raises(UnknownPatternError):
        resolve_base_parent(date(2024, 1, 1), ScheduleConfig(NamedPattern("2-2-3"), date(2024, 1, 1)), table)


def test_table_is_read_only():
    source = {"x": [0, 1]}
    table = PatternTable(source)
    source["x"].append(1)
    source["y"] = [1]
    assert table.get_cycle("x") == (0, 1)
    assert "y" not in table
    assert len(table) == 1
