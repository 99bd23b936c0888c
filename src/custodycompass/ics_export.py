import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote

from dateutil.relativedelta import relativedelta
from icalendar import Calendar, Event

from .calendar_logic import segment
from .export_utils import format_exchange_note, parent_label
from .models import CustodyBlock, ScheduleConfig

PRODID = "-//CustodyCompass//Custody Schedule//EN"
CALENDAR_NAME = "Custody Schedule"
UID_DOMAIN = "custodycompass"


def _event_for_block(block: CustodyBlock, config: ScheduleConfig, parent_names, stamp: datetime) -> Event:
    ev = Event()
    ev.add('uid', f"{uuid.uuid4().hex}@{UID_DOMAIN}")
    ev.add('dtstamp', stamp)
    ev.add('dtstart', block.start_date)
    # DTEND ist bei ganztägigen Terminen exklusiv
    ev.add('dtend', block.end_date + timedelta(days=1))
    ev.add('summary', f"Custody: {parent_label(block.parent, parent_names)}")
    if config.exchange_location:
        ev.add('location', config.exchange_location)
    note = format_exchange_note(config)
    if note:
        ev.add('description', note)
    ev.add('transp', 'TRANSPARENT')
    return ev


def generate_ics(blocks: Iterable[CustodyBlock], config: ScheduleConfig,
                 parent_names: Optional[Mapping[str, str]] = None,
                 calendar_name: str = CALENDAR_NAME) -> str:
    """
    Ein ganztägiger VEVENT pro Block. Die UIDs sind nur innerhalb eines
    Exports eindeutig; jeder Export ist eine Momentaufnahme.
    """
    cal = Calendar()
    cal.add('prodid', PRODID)
    cal.add('version', '2.0')
    cal.add('calscale', 'GREGORIAN')
    cal.add('method', 'PUBLISH')
    cal.add('x-wr-calname', calendar_name)

    stamp = datetime.now(timezone.utc)
    count = 0
    for block in blocks:
        cal.add_component(_event_for_block(block, config, parent_names, stamp))
        count += 1
    logging.info(f"[CustodyCompass] ICS-Export mit {count} Terminen erstellt.")
    return cal.to_ical().decode('utf-8')


def export_window(today: date, months_ahead: int = 12) -> Tuple[date, date]:
    """Vom Monatsersten des aktuellen Monats bis heute + months_ahead."""
    return today.replace(day=1), today + relativedelta(months=months_ahead)


def export_schedule_ics(config: ScheduleConfig, parent_names: Optional[Mapping[str, str]] = None,
                        months_ahead: int = 12, today: Optional[date] = None) -> str:
    start, end = export_window(today or date.today(), months_ahead)
    return generate_ics(segment(start, end, config), config, parent_names)


def write_ics(path: str, blocks: Iterable[CustodyBlock], config: ScheduleConfig,
              parent_names: Optional[Mapping[str, str]] = None):
    text = generate_ics(blocks, config, parent_names)
    # to_ical liefert bereits CRLF-Zeilenenden
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(text)


def read_ics_ranges(text: str) -> List[Tuple[date, date, str]]:
    """Liest ganztägige Termine zurück als (Start, Ende inklusive, Summary)."""
    cal = Calendar.from_ical(text)
    out = []
    for ev in cal.walk('VEVENT'):
        start = ev.decoded('dtstart')
        end = ev.decoded('dtend') if 'DTEND' in ev else start + timedelta(days=1)
        if isinstance(start, datetime):
            start = start.date()
        if isinstance(end, datetime):
            end = end.date()
        out.append((start, end - timedelta(days=1), str(ev.get('summary', ''))))
    return sorted(out)


def google_calendar_url(config: ScheduleConfig, parent_name: str, day: date) -> str:
    """Link zum Anlegen eines einzelnen Umgangstags in Google Calendar."""
    title = quote(f"Custody: {parent_name}", safe="")
    details = quote(f"Exchange time: {config.exchange_time}\n"
                    f"Location: {config.exchange_location or 'Not specified'}", safe='')
    location = quote(config.exchange_location or '', safe='')
    dates = f"{day.strftime('%Y%m%d')}/{(day + timedelta(days=1)).strftime('%Y%m%d')}"
    return ("https://calendar.google.com/calendar/render?action=TEMPLATE"
            f"&text={title}&dates={dates}&details={details}&location={location}")
