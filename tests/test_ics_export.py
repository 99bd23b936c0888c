from datetime import date

from icalendar import Calendar

from custodycompass.calendar_logic import segment
from custodycompass.ics_export import (
    export_schedule_ics, export_window, generate_ics, google_calendar_url, read_ics_ranges, write_ics,
)
from custodycompass.models import NamedPattern, Parent, ScheduleConfig

CONFIG = ScheduleConfig(NamedPattern("alternating-weeks"), date(2024, 1, 1), Parent.A,
                        exchange_time="6:00 PM", exchange_location="School")
NAMES = {'A': 'Alex', 'B': 'Sam'}


def blocks():
    return list(segment(date(2024, 1, 1), date(2024, 1, 15), CONFIG))


def test_feed_structure():
    text = generate_ics(blocks(), CONFIG, NAMES)
    assert text.startswith('BEGIN:VCALENDAR')
    assert text.rstrip().endswith('END:VCALENDAR')
    assert 'VERSION:2.0' in text
    assert 'METHOD:PUBLISH' in text
    assert text.count('BEGIN:VEVENT') == 3
    assert 'DTSTART;VALUE=DATE:20240101' in text
    assert 'SUMMARY:Custody: Alex' in text
    assert 'SUMMARY:Custody: Sam' in text
    assert 'LOCATION:School' in text
    assert 'TRANSP:TRANSPARENT' in text


def test_dtend_is_exclusive():
    text = generate_ics(blocks(), CONFIG, NAMES)
    for d in ('20240108', '20240115', '20240116'):
        assert f'DTEND;VALUE=DATE:{d}' in text


def test_round_trip_recovers_blocks():
    bl = blocks()
    ranges = read_ics_ranges(generate_ics(bl, CONFIG, NAMES))
    assert [(s, e) for s, e, _ in ranges] == [(b.start_date, b.end_date) for b in bl]
    assert [summary for _, _, summary in ranges] == ['Custody: Alex', 'Custody: Sam', 'Custody: Alex']


def test_uids_unique_within_export():
    cal = Calendar.from_ical(generate_ics(blocks(), CONFIG, NAMES))
    uids = [str(ev['uid']) for ev in cal.walk('VEVENT')]
    assert len(uids) == 3
    assert len(set(uids)) == 3
    assert all(uid.endswith('@custodycompass') for uid in uids)


def test_reserved_characters_escaped():
    config = ScheduleConfig(NamedPattern("alternating-weeks"), date(2024, 1, 1), Parent.A,
                            exchange_time="6:00 PM", exchange_location="Main St, Apt 4")
    text = generate_ics(blocks(), config, {'A': 'Smith; Alex', 'B': 'Sam'})
    assert 'SUMMARY:Custody: Smith\\; Alex' in text
    assert 'LOCATION:Main St\\, Apt 4' in text
    # Zeilenumbruch in der Beschreibung wird zu \n
    assert 'DESCRIPTION:Exchange time: 6:00 PM\\nLocation' in text


def test_default_parent_names():
    text = generate_ics(blocks(), CONFIG)
    assert 'SUMMARY:Custody: Parent A' in text


def test_empty_feed():
    text = generate_ics([], CONFIG, NAMES)
    assert 'BEGIN:VCALENDAR' in text
    assert 'BEGIN:VEVENT' not in text
    assert read_ics_ranges(text) == []


def test_export_window():
    assert export_window(date(2024, 3, 15), 12) == (date(2024, 3, 1), date(2025, 3, 15))
    assert export_window(date(2024, 1, 31), 1) == (date(2024, 1, 1), date(2024, 2, 29))


def test_export_schedule_ics_uses_window():
    text = export_schedule_ics(CONFIG, NAMES, months_ahead=1, today=date(2024, 1, 15))
    ranges = read_ics_ranges(text)
    assert ranges[0][:2] == (date(2024, 1, 1), date(2024, 1, 7))
    assert ranges[-1][:2] == (date(2024, 2, 12), date(2024, 2, 15))
    assert len(ranges) == 7


def test_write_ics(tmp_path):
    fn = tmp_path / 'custody.ics'
    write_ics(str(fn), blocks(), CONFIG, NAMES)
    content = fn.read_bytes()
    assert b'\r\n' in content
    assert len(read_ics_ranges(content.decode('utf-8'))) == 3


def test_read_foreign_feed():
    text = (
        'BEGIN:VCALENDAR\r\n'
        'BEGIN:VEVENT\r\n'
        'DTSTART;VALUE=DATE:20251220\r\n'
        'DTEND;VALUE=DATE:20260105\r\n'
        'SUMMARY:Winter Break\r\n'
        'END:VEVENT\r\n'
        'END:VCALENDAR\r\n'
    )
    assert read_ics_ranges(text) == [(date(2025, 12, 20), date(2026, 1, 4), 'Winter Break')]


def test_google_calendar_url():
    url = google_calendar_url(CONFIG, 'Sam', date(2024, 1, 8))
    assert url.startswith('https://calendar.google.com/calendar/render?action=TEMPLATE')
    assert 'text=Custody%3A%20Sam' in url
    assert 'dates=20240108/20240109' in url
    assert 'location=School' in url
