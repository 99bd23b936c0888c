# src/custodycompass/models.py
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import FrozenSet, Optional, Sequence, Tuple, Union


class Parent(str, Enum):
    """Einer der beiden Elternteile."""
    A = "A"
    B = "B"

    @property
    def other(self) -> "Parent":
        return Parent.B if self is Parent.A else Parent.A

    @classmethod
    def parse(cls, value) -> "Parent":
        if isinstance(value, Parent):
            return value
        text = str(value).strip().upper()
        if text not in ("A", "B"):
            raise ValueError(f"Unknown parent: {value!r}")
        return cls(text)


class HolidayRule(str, Enum):
    """Regel, wie ein Feiertag den Standard-Rhythmus überschreibt."""
    ALTERNATE = "alternate"   # gerade Jahre A, ungerade B
    SPLIT = "split"           # Übergabe am Tag selbst
    FIXED_A = "fixed-a"
    FIXED_B = "fixed-b"

    @classmethod
    def parse(cls, value) -> "HolidayRule":
        if isinstance(value, HolidayRule):
            return value
        key = str(value).strip().lower()
        rule = _RULE_ALIASES.get(key)
        if rule is None:
            raise ValueError(f"Unknown holiday rule: {value!r}")
        return rule


_RULE_ALIASES = {
    'alternate': HolidayRule.ALTERNATE,
    'alternate-by-year': HolidayRule.ALTERNATE,
    'split': HolidayRule.SPLIT,
    'fixed-a': HolidayRule.FIXED_A,
    'always-a': HolidayRule.FIXED_A,
    'fixed-b': HolidayRule.FIXED_B,
    'always-b': HolidayRule.FIXED_B,
}


@dataclass(frozen=True)
class NamedPattern:
    """Verweis auf ein eingebautes Muster der PatternTable."""
    pattern_id: str


@dataclass(frozen=True)
class CustomPattern:
    """Frei definierter Zyklus aus 0/1-Werten (0 = Start-Elternteil)."""
    cycle: Tuple[int, ...]


PatternSource = Union[NamedPattern, CustomPattern]

CUSTOM_PATTERN_ID = "custom"


def pattern_from_id(pattern_id: str, custom_cycle: Optional[Sequence[int]] = None) -> PatternSource:
    """Übersetze die String-Form ('custom' + Zyklus) in NamedPattern/CustomPattern."""
    if pattern_id == CUSTOM_PATTERN_ID:
        return CustomPattern(tuple(custom_cycle or ()))
    return NamedPattern(pattern_id)


@dataclass(frozen=True)
class Holiday:
    """Feiertag mit Regel; `dates` liefert der externe Feiertagskalender."""
    name: str
    rule: HolidayRule
    enabled: bool = True
    dates: FrozenSet[date] = frozenset()


@dataclass(frozen=True)
class ScheduleConfig:
    """Unveränderliche Umgangs-Konfiguration, wie sie der Wizard erzeugt."""
    pattern: PatternSource
    start_date: date
    starting_parent: Parent = Parent.A
    exchange_time: str = ""
    exchange_location: str = ""
    alternate_location: str = ""
    holidays: Tuple[Holiday, ...] = ()
    split_cutoff: time = time(12, 0)   # Übergabezeit an geteilten Feiertagen

    @property
    def pattern_id(self) -> str:
        if isinstance(self.pattern, CustomPattern):
            return CUSTOM_PATTERN_ID
        return self.pattern.pattern_id


@dataclass(frozen=True)
class CustodyBlock:
    """Zusammenhängender Zeitraum bei einem Elternteil (end_date inklusive)."""
    start_date: date
    end_date: date
    parent: Parent

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class SplitDay:
    """Geteilter Feiertag: erste Tageshälfte bis `cutoff`, danach der andere."""
    day: date
    holiday: str
    first_parent: Parent
    second_parent: Parent
    cutoff: time


@dataclass(frozen=True)
class CalendarDay:
    """Eine Zelle der Monatsansicht."""
    day: date
    parent: Optional[Parent]
    is_today: bool = False
    in_month: bool = True
