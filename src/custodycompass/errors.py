# src/custodycompass/errors.py


class CustodyError(Exception):
    """Basisklasse aller Fehler der Umgangs-Engine."""


class UnknownPatternError(CustodyError):
    """Pattern-ID ist weder registriert noch 'custom'."""

    def __init__(self, pattern_id):
        super().__init__(f"Unknown custody pattern: {pattern_id!r}")
        self.pattern_id = pattern_id


class InvalidCycleError(CustodyError):
    """Zyklus ist leer oder enthält andere Werte als 0/1."""


class InvalidDateRangeError(CustodyError):
    """Enddatum liegt vor dem Startdatum."""

    def __init__(self, start, end):
        super().__init__(f"End date {end.isoformat()} is before start date {start.isoformat()}")
        self.start = start
        self.end = end
