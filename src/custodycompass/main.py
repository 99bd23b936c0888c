# src/custodycompass/main.py

import logging
from datetime import date
from typing import List

from .calendar_logic import segment, split_days
from .config import load_config, save_schedule
from .errors import CustodyError
from .export_utils import format_date_range, parent_label
from .ics_export import export_window, write_ics
from .models import Holiday, HolidayRule, Parent, ScheduleConfig, pattern_from_id
from .patterns import DEFAULT_PATTERNS
from .pdf_export import render_schedule_pdf
from .statistics import summarize_custody

SCHEDULE_FILE = "custodycompass_schedule.json"


def _parse_cycle(text: str) -> List[int]:
    """'AABB…' oder '0011…' -> [0, 0, 1, 1, …] (A bzw. 0 = Start-Elternteil)"""
    mapping = {'0': 0, '1': 1, 'A': 0, 'B': 1}
    cycle = []
    for ch in text.replace(',', '').replace(' ', '').upper():
        if ch not in mapping:
            raise ValueError(f"Invalid cycle character: {ch!r}")
        cycle.append(mapping[ch])
    return cycle


def input_schedule() -> ScheduleConfig:
    print("\n✏️  Umgangs-Rhythmus:")
    for pid in DEFAULT_PATTERNS.names():
        print(f"   - {pid} ({DEFAULT_PATTERNS.display_name(pid)})")
    print("   - custom")
    pid = input("  Pattern [alternating-weeks]: ").strip() or "alternating-weeks"
    cycle = None
    if pid == "custom":
        cycle = _parse_cycle(input("  Zyklus (z.B. AAAAAAABBBBBBB): "))
    start_str = input("  Startdatum (YYYY-MM-DD) [leer=heute]: ").strip()
    start = date.today() if not start_str else date.fromisoformat(start_str)
    starting = Parent.parse(input("  Start-Elternteil (A/B) [A]: ").strip() or "A")
    exchange_time = input("  Übergabezeit (z.B. 6:00 PM): ").strip()
    location = input("  Übergabeort: ").strip()

    holidays = []
    if input("Feiertage hinzufügen? (j/n) ").lower() == "j":
        while True:
            holidays.append(input_holiday())
            if input("Weiteren Feiertag? (j/n) ").lower() != "j":
                break

    return ScheduleConfig(
        pattern=pattern_from_id(pid, cycle),
        start_date=start,
        starting_parent=starting,
        exchange_time=exchange_time,
        exchange_location=location,
        holidays=tuple(holidays),
    )


def input_holiday() -> Holiday:
    print("\n🎉  Neuer Feiertag:")
    name = input("  Name: ").strip()
    rule = HolidayRule.parse(input("  Regel (alternate/split/fixed-a/fixed-b): "))
    dates_str = input("  Daten (YYYY-MM-DD), kommasepariert: ")
    dates = frozenset(date.fromisoformat(x.strip()) for x in dates_str.split(",") if x.strip())
    return Holiday(name=name, rule=rule, dates=dates)


def run_wizard():
    print("🎯 Willkommen zum CustodyCompass Setup Wizard 🎯")
    cfg = load_config()
    names = cfg['parent_names']

    try:
        schedule = input_schedule()
        first_str = input("Zeitraum von (YYYY-MM-DD) [leer=Monatsanfang]: ").strip()
        if first_str:
            first = date.fromisoformat(first_str)
            last = date.fromisoformat(input("Zeitraum bis (YYYY-MM-DD): ").strip())
        else:
            first, last = export_window(date.today(), cfg['months_ahead'])
        blocks = list(segment(first, last, schedule))
    except (CustodyError, ValueError) as e:
        logging.error(f"[CustodyCompass] Ungültige Eingabe: {e}")
        print(f"❌ {e}")
        return

    stats = summarize_custody(blocks)
    print(f"\n✅ {len(blocks)} Umgangsblöcke von {first.isoformat()} bis {last.isoformat()}:")
    for b in blocks:
        print(f"  {format_date_range(b):<32} {b.days:>3} Tage  {parent_label(b.parent, names)}")
    print(f"\n  {parent_label(Parent.A, names)}: {stats['days_a']} Tage ({stats['pct_a']}%)")
    print(f"  {parent_label(Parent.B, names)}: {stats['days_b']} Tage ({stats['pct_b']}%)")

    if input("\nKalender (.ics) exportieren? (j/n) ").lower() == "j":
        fn = input("  Dateiname [custody-schedule.ics]: ").strip() or "custody-schedule.ics"
        write_ics(fn, blocks, schedule, names)
        print(f"Kalender in {fn} gespeichert.")

    if input("PDF exportieren? (j/n) ").lower() == "j":
        fn = input("  Dateiname [custody-schedule.pdf]: ").strip() or "custody-schedule.pdf"
        layout = input(f"  Layout (table/grid) [{cfg['document_layout']}]: ").strip() or cfg['document_layout']
        try:
            pages = render_schedule_pdf(
                fn, blocks, schedule, names, layout=layout,
                splits=split_days(first, last, schedule), colors=cfg['colors'],
            )
        except (CustodyError, ValueError) as e:
            logging.error(f"[CustodyCompass] PDF-Export fehlgeschlagen: {e}")
            print(f"❌ {e}")
        else:
            print(f"PDF in {fn} gespeichert ({pages} Seiten).")

    if input("Konfiguration speichern? (j/n) ").lower() == "j":
        save_schedule(schedule, SCHEDULE_FILE)
        print(f"Konfiguration in {SCHEDULE_FILE} gespeichert.")


if __name__ == "__main__":
    run_wizard()
