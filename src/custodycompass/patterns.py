# src/custodycompass/patterns.py
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import UnknownPatternError
from .models import CUSTOM_PATTERN_ID


class PatternTable:
    """
    Unveränderliche Tabelle der benannten Umgangsmuster.
    Jeder Eintrag ist ein Zyklus aus 0/1-Werten, ein Wert pro Tag;
    0 steht für den Start-Elternteil, 1 für den anderen.
    """

    def __init__(self, entries: Mapping[str, Sequence[int]], names: Optional[Mapping[str, str]] = None):
        self._cycles = MappingProxyType({pid: tuple(cycle) for pid, cycle in entries.items()})
        self._names = MappingProxyType(dict(names or {}))

    def get_cycle(self, pattern_id: str) -> Tuple[int, ...]:
        try:
            return self._cycles[pattern_id]
        except KeyError:
            raise UnknownPatternError(pattern_id) from None

    def names(self) -> List[str]:
        return list(self._cycles)

    def display_name(self, pattern_id: str) -> str:
        if pattern_id == CUSTOM_PATTERN_ID:
            return self._names.get(CUSTOM_PATTERN_ID, "Custom Pattern")
        return self._names.get(pattern_id, pattern_id)

    def __contains__(self, pattern_id) -> bool:
        return pattern_id in self._cycles

    def __len__(self) -> int:
        return len(self._cycles)


# 14-Tage-Zyklen, Tag 0 = Startdatum
_BUILTIN_CYCLES: Dict[str, Tuple[int, ...]] = {
    "alternating-weeks":   (0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1),
    "2-2-3":               (0, 0, 1, 1, 0, 0, 0, 1, 1, 0, 0, 1, 1, 1),
    "2-2-5-5":             (0, 0, 1, 1, 0, 0, 0, 0, 0, 1, 1, 0, 0, 1),
    "3-4-4-3":             (0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 1, 1, 1),
    "every-other-weekend": (0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0, 0, 0),
}

_BUILTIN_NAMES = {
    "alternating-weeks": "Alternating Weeks",
    "2-2-3": "2-2-3 Rotation",
    "2-2-5-5": "2-2-5-5 Rotation",
    "3-4-4-3": "3-4-4-3 Rotation",
    "every-other-weekend": "Every Other Weekend",
    CUSTOM_PATTERN_ID: "Custom Pattern",
}

DEFAULT_PATTERNS = PatternTable(_BUILTIN_CYCLES, _BUILTIN_NAMES)
