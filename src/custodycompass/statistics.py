from datetime import timedelta
from typing import Dict, Iterable

from .models import CustodyBlock, Parent


def summarize_custody(blocks: Iterable[CustodyBlock]) -> Dict[str, float]:
    """
    Gesamt-Zusammenfassung für eine Liste von Blöcken:
      total         : Anzahl Tage im Zeitraum
      days_a/days_b : Tage bei Parent A / Parent B
      pct_a/pct_b   : prozentualer Anteil (eine Nachkommastelle)
      exchanges     : Anzahl Wechsel zwischen den Elternteilen
      longest_a/b   : längster zusammenhängender Block je Elternteil
    """
    blocks = list(blocks)
    days_a = sum(b.days for b in blocks if b.parent == Parent.A)
    days_b = sum(b.days for b in blocks if b.parent == Parent.B)
    total = days_a + days_b
    # benachbarte Blöcke können nach einem Feiertag denselben Elternteil haben
    exchanges = sum(1 for prev, cur in zip(blocks, blocks[1:]) if prev.parent != cur.parent)

    return {
        'total': total,
        'days_a': days_a,
        'days_b': days_b,
        'pct_a': round(days_a / total * 100, 1) if total else 0.0,
        'pct_b': round(days_b / total * 100, 1) if total else 0.0,
        'exchanges': exchanges,
        'longest_a': max((b.days for b in blocks if b.parent == Parent.A), default=0),
        'longest_b': max((b.days for b in blocks if b.parent == Parent.B), default=0),
    }


def count_days_by_weekday(blocks: Iterable[CustodyBlock]) -> Dict[int, Dict[str, int]]:
    """0=Montag … 6=Sonntag -> {'A': Tage, 'B': Tage}"""
    counts = {wd: {'A': 0, 'B': 0} for wd in range(7)}
    for block in blocks:
        d = block.start_date
        while d <= block.end_date:
            counts[d.weekday()][block.parent.value] += 1
            d += timedelta(days=1)
    return counts
