from datetime import date

from custodycompass.calendar_logic import segment
from custodycompass.models import CustodyBlock, NamedPattern, Parent, ScheduleConfig
from custodycompass.statistics import count_days_by_weekday, summarize_custody

CONFIG = ScheduleConfig(NamedPattern("alternating-weeks"), date(2024, 1, 1), Parent.A)


def test_summarize_custody():
    blocks = list(segment(date(2024, 1, 1), date(2024, 1, 15), CONFIG))
    stats = summarize_custody(blocks)
    assert stats['total'] == 15
    assert stats['days_a'] == 8
    assert stats['days_b'] == 7
    assert stats['pct_a'] == 53.3
    assert stats['pct_b'] == 46.7
    assert stats['exchanges'] == 2
    assert stats['longest_a'] == 7
    assert stats['longest_b'] == 7


def test_summarize_empty():
    stats = summarize_custody([])
    assert stats['total'] == 0
    assert stats['pct_a'] == 0.0
    assert stats['exchanges'] == 0
    assert stats['longest_b'] == 0


def test_adjacent_same_parent_blocks_are_no_exchange():
    blocks = [
        CustodyBlock(date(2024, 1, 1), date(2024, 1, 2), Parent.A),
        CustodyBlock(date(2024, 1, 3), date(2024, 1, 3), Parent.A),
        CustodyBlock(date(2024, 1, 4), date(2024, 1, 5), Parent.B),
    ]
    assert summarize_custody(blocks)['exchanges'] == 1


def test_count_days_by_weekday():
    blocks = list(segment(date(2024, 1, 1), date(2024, 1, 15), CONFIG))
    counts = count_days_by_weekday(blocks)
    # Montag: 1. (A), 8. (B), 15. (A)
    assert counts[0] == {'A': 2, 'B': 1}
    # Sonntag: 7. (A), 14. (B)
    assert counts[6] == {'A': 1, 'B': 1}
    assert sum(c['A'] + c['B'] for c in counts.values()) == 15
