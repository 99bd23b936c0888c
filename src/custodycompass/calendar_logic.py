import calendar
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import InvalidCycleError, InvalidDateRangeError
from .models import (
    CalendarDay, CustodyBlock, CustomPattern, Holiday, HolidayRule,
    NamedPattern, Parent, ScheduleConfig, SplitDay,
)
from .patterns import DEFAULT_PATTERNS, PatternTable

DateLike = Union[date, datetime]

# Jahres-Parität, in der Parent A einen 'alternate'-Feiertag hat (gerade Jahre)
ALTERNATE_REFERENCE_PARITY = 0


def _as_day(value: DateLike) -> date:
    """Uhrzeit abschneiden; datetime ist eine Unterklasse von date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_cycle(config: ScheduleConfig, patterns: PatternTable = DEFAULT_PATTERNS) -> Tuple[int, ...]:
    """Liefert den Zyklus der Konfiguration (eingebaut oder custom) und prüft ihn."""
    source = config.pattern
    if isinstance(source, CustomPattern):
        cycle = tuple(source.cycle)
    elif isinstance(source, NamedPattern):
        cycle = patterns.get_cycle(source.pattern_id)
    else:
        raise TypeError(f"Unsupported pattern source: {source!r}")

    if not cycle:
        raise InvalidCycleError(f"Cycle for pattern {config.pattern_id!r} is empty")
    if any(v not in (0, 1) for v in cycle):
        raise InvalidCycleError(f"Cycle for pattern {config.pattern_id!r} must contain only 0 and 1")
    return cycle


def resolve_base_parent(day: DateLike, config: ScheduleConfig,
                        patterns: PatternTable = DEFAULT_PATTERNS) -> Parent:
    """Elternteil laut Grundrhythmus, ohne Feiertage."""
    offset = (_as_day(day) - _as_day(config.start_date)).days
    cycle = resolve_cycle(config, patterns)
    # Python-% ist bereits nicht-negativ, auch für Tage vor dem Startdatum
    raw = cycle[offset % len(cycle)]
    starting = Parent.parse(config.starting_parent)
    return starting if raw == 0 else starting.other


def holiday_for(day: DateLike, config: ScheduleConfig) -> Optional[Holiday]:
    """Erster aktivierter Feiertag, der auf `day` fällt."""
    d = _as_day(day)
    for holiday in config.holidays:
        if holiday.enabled and d in holiday.dates:
            return holiday
    return None


def _apply_rule(rule: HolidayRule, d: date, base: Parent) -> Parent:
    if rule is HolidayRule.FIXED_A:
        return Parent.A
    if rule is HolidayRule.FIXED_B:
        return Parent.B
    if rule is HolidayRule.ALTERNATE:
        return Parent.A if d.year % 2 == ALTERNATE_REFERENCE_PARITY else Parent.B
    if rule is HolidayRule.SPLIT:
        # Der Kalendertag bleibt beim Elternteil der ersten Tageshälfte
        return base
    raise ValueError(f"Unhandled holiday rule: {rule!r}")


def resolve_parent(day: DateLike, config: ScheduleConfig,
                   patterns: PatternTable = DEFAULT_PATTERNS) -> Parent:
    """Elternteil für `day` inklusive Feiertagsregeln (nur dieser eine Tag)."""
    base = resolve_base_parent(day, config, patterns)
    holiday = holiday_for(day, config)
    if holiday is None:
        return base
    return _apply_rule(HolidayRule.parse(holiday.rule), _as_day(day), base)


def _check_range(start: date, end: date):
    if end < start:
        raise InvalidDateRangeError(start, end)


def segment(start: DateLike, end: DateLike, config: ScheduleConfig,
            patterns: PatternTable = DEFAULT_PATTERNS,
            apply_holidays: bool = True) -> Iterator[CustodyBlock]:
    """
    Zerlegt [start, end] (inklusive) in zusammenhängende Blöcke je Elternteil.
    Der Bereich wird sofort geprüft; die Blöcke selbst entstehen lazy.
    """
    first, last = _as_day(start), _as_day(end)
    _check_range(first, last)
    resolve = resolve_parent if apply_holidays else resolve_base_parent
    return _walk(first, last, config, patterns, resolve)


def _walk(first: date, last: date, config, patterns, resolve) -> Iterator[CustodyBlock]:
    block_start = first
    current = resolve(first, config, patterns)
    d = first + timedelta(days=1)
    while d <= last:
        parent = resolve(d, config, patterns)
        if parent != current:
            yield CustodyBlock(block_start, d - timedelta(days=1), current)
            block_start, current = d, parent
        d += timedelta(days=1)
    # letzter Block wird am Bereichsende abgeschnitten
    yield CustodyBlock(block_start, last, current)


def split_days(start: DateLike, end: DateLike, config: ScheduleConfig,
               patterns: PatternTable = DEFAULT_PATTERNS) -> List[SplitDay]:
    """Alle geteilten Feiertage im Bereich mit Übergabe zur `split_cutoff`-Zeit."""
    first, last = _as_day(start), _as_day(end)
    _check_range(first, last)
    out: List[SplitDay] = []
    d = first
    while d <= last:
        holiday = holiday_for(d, config)
        if holiday is not None and HolidayRule.parse(holiday.rule) is HolidayRule.SPLIT:
            morning = resolve_parent(d, config, patterns)
            out.append(SplitDay(d, holiday.name, morning, morning.other, config.split_cutoff))
        d += timedelta(days=1)
    return out


def parent_by_day(blocks: Iterable[CustodyBlock]) -> Dict[date, Parent]:
    """Blöcke wieder in eine Tag -> Elternteil Zuordnung auffalten."""
    out: Dict[date, Parent] = {}
    for block in blocks:
        d = block.start_date
        while d <= block.end_date:
            out[d] = block.parent
            d += timedelta(days=1)
    return out


def month_grid(year: int, month: int, blocks: Iterable[CustodyBlock],
               today: Optional[date] = None, firstweekday: int = 0) -> List[List[CalendarDay]]:
    """
    Wochenraster eines Monats für die Kalenderansicht.
    Tage außerhalb der Blöcke haben parent=None; `today` markiert nur die Zelle.
    """
    by_day = parent_by_day(blocks)
    cal = calendar.Calendar(firstweekday=firstweekday)
    weeks = []
    for week in cal.monthdatescalendar(year, month):
        weeks.append([
            CalendarDay(d, by_day.get(d), is_today=(d == today), in_month=(d.month == month))
            for d in week
        ])
    return weeks
