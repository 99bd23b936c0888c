from datetime import date
from typing import Dict, Mapping, Optional

from .models import CustodyBlock, HolidayRule, Parent, ScheduleConfig

_RULE_LABELS = {
    HolidayRule.ALTERNATE: 'Alternating Years',
    HolidayRule.SPLIT: 'Split Between Parents',
    HolidayRule.FIXED_A: 'Always with Parent A',
    HolidayRule.FIXED_B: 'Always with Parent B',
}


def parent_label(parent, parent_names: Optional[Mapping[str, str]] = None) -> str:
    """Anzeigename eines Elternteils, Fallback 'Parent A' / 'Parent B'."""
    p = Parent.parse(parent)
    names: Dict[str, str] = dict(parent_names or {})
    return names.get(p.value) or f"Parent {p.value}"


def rule_label(rule) -> str:
    return _RULE_LABELS[HolidayRule.parse(rule)]


def format_exchange_note(config: ScheduleConfig) -> str:
    """
    Kurzbeschreibung der Übergabe für Feed-Beschreibung und PDF.
    Leere Felder werden weggelassen.
    """
    parts = []
    if config.exchange_time:
        parts.append(f"Exchange time: {config.exchange_time}")
    if config.exchange_location:
        parts.append(f"Location: {config.exchange_location}")
    if config.alternate_location:
        parts.append(f"Alternate location: {config.alternate_location}")
    return "\n".join(parts)


def format_date_range(block: CustodyBlock) -> str:
    if block.start_date == block.end_date:
        return _fmt(block.start_date)
    return f"{_fmt(block.start_date)} - {_fmt(block.end_date)}"


def _fmt(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}, {d.year}"
