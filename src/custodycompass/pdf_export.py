import calendar
import logging
import os
import tempfile
from datetime import date, datetime
from typing import Iterable, Mapping, Optional

from reportlab.lib import colors as rl_colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from .calendar_logic import month_grid
from .charts import create_pie_chart
from .config import DEFAULT_CONFIG
from .export_utils import format_date_range, parent_label, rule_label
from .models import CustodyBlock, Parent, ScheduleConfig, SplitDay
from .patterns import DEFAULT_PATTERNS, PatternTable
from .statistics import summarize_custody

LAYOUT_TABLE = 'table'
LAYOUT_GRID = 'grid'

HEADER_COLOR = rl_colors.Color(33 / 255, 176 / 255, 254 / 255)
MARGIN = 50
BOTTOM = 60
WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _footer_text(page: int, total: int) -> str:
    return f"Page {page} of {total}"


class _NumberedCanvas(canvas.Canvas):
    """Hält die Seiten bis zum Speichern zurück, damit die Fußzeile die Gesamtzahl kennt."""

    def __init__(self, *args, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def _draw_footer(self, total: int):
        w, _ = self._pagesize
        self.setFont('Helvetica', 8)
        self.setFillColor(rl_colors.grey)
        self.drawString(MARGIN, 30, 'CustodyCompass - Court-Ready Documentation')
        self.drawCentredString(w / 2, 30, _footer_text(self.getPageNumber(), total))
        self.setFillColor(rl_colors.black)


class _Document:
    """Canvas mit Kopf-/Fußzeile und einfachem Seitenumbruch."""

    def __init__(self, path: str, title: str, generated_at: datetime):
        self.c = _NumberedCanvas(path, pagesize=letter)
        self.w, self.h = letter
        self.title = title
        self.generated_at = generated_at
        # Diagramm-PNGs werden erst beim Speichern gelesen
        self.tmpdir = tempfile.TemporaryDirectory()
        self._start_page(title)

    def _start_page(self, title):
        c = self.c
        c.setFillColor(HEADER_COLOR)
        c.rect(0, self.h - 40, self.w, 40, stroke=0, fill=1)
        c.setFillColor(rl_colors.white)
        c.setFont('Helvetica-Bold', 16)
        c.drawString(MARGIN, self.h - 27, title)
        c.setFont('Helvetica', 9)
        c.drawRightString(self.w - MARGIN, self.h - 27,
                          f"Generated: {self.generated_at.strftime('%B %d, %Y %H:%M')}")
        c.setFillColor(rl_colors.black)
        self.y = self.h - 70

    def new_page(self, title: Optional[str] = None):
        self.c.showPage()
        self._start_page(title or f"{self.title} (continued)")

    def ensure(self, needed: float) -> bool:
        """Neue Seite, wenn weniger als `needed` Punkte Platz bleiben."""
        if self.y - needed < BOTTOM:
            self.new_page()
            return True
        return False

    def heading(self, text: str):
        self.ensure(40)
        self.c.setFont('Helvetica-Bold', 12)
        self.c.drawString(MARGIN, self.y, text)
        self.y -= 18

    def line(self, text: str, indent: float = 10, size: int = 10):
        self.ensure(15)
        self.c.setFont('Helvetica', size)
        self.c.drawString(MARGIN + indent, self.y, text)
        self.y -= 14

    def finish(self) -> int:
        pages = self.c.getPageNumber()
        self.c.showPage()
        try:
            self.c.save()
        finally:
            self.tmpdir.cleanup()
        return pages


def _fill(parent, colors: Mapping[str, str]):
    return rl_colors.HexColor(colors.get(Parent.parse(parent).value, '#DDDDDD'))


def _draw_overview(doc: _Document, config: ScheduleConfig, parent_names, patterns: PatternTable):
    doc.heading('Parties:')
    doc.line(f"Parent A: {parent_label(Parent.A, parent_names)}")
    doc.line(f"Parent B: {parent_label(Parent.B, parent_names)}")
    doc.y -= 8

    doc.heading('Schedule Pattern:')
    doc.line(f"Pattern: {patterns.display_name(config.pattern_id)}")
    doc.line(f"Starting Parent: {parent_label(config.starting_parent, parent_names)}")
    doc.line(f"Effective Date: {config.start_date.strftime('%B')} {config.start_date.day}, {config.start_date.year}")
    doc.y -= 8

    doc.heading('Exchange Details:')
    doc.line(f"Exchange Time: {config.exchange_time or 'Not specified'}")
    doc.line(f"Primary Location: {config.exchange_location or 'Not specified'}")
    if config.alternate_location:
        doc.line(f"Alternate Location: {config.alternate_location}")
    doc.y -= 8

    enabled = [h for h in config.holidays if h.enabled]
    if enabled:
        doc.heading('Holiday Schedule:')
        for h in enabled:
            doc.line(f"{h.name}: {rule_label(h.rule)}")
        doc.y -= 8


def _draw_summary(doc: _Document, blocks, parent_names, colors, include_chart: bool):
    stats = summarize_custody(blocks)
    doc.heading('Custody Summary:')
    doc.line(f"Days in range: {stats['total']}")
    doc.line(f"{parent_label(Parent.A, parent_names)}: {stats['days_a']} days ({stats['pct_a']}%)")
    doc.line(f"{parent_label(Parent.B, parent_names)}: {stats['days_b']} days ({stats['pct_b']}%)")
    doc.line(f"Exchanges: {stats['exchanges']}")
    doc.y -= 8
    if not include_chart or not stats['total']:
        return
    size = 150
    doc.ensure(size + 10)
    png = os.path.join(doc.tmpdir.name, 'custody_share.png')
    create_pie_chart(
        [stats['days_a'], stats['days_b']],
        [parent_label(Parent.A, parent_names), parent_label(Parent.B, parent_names)],
        png,
        colors=[colors.get('A'), colors.get('B')],
    )
    doc.c.drawImage(png, doc.w / 2 - size / 2, doc.y - size, width=size, height=size)
    doc.y -= size + 10


def _draw_table(doc: _Document, blocks, parent_names, colors):
    cols = (MARGIN, MARGIN + 200, MARGIN + 250)

    def header():
        doc.c.setFont('Helvetica-Bold', 11)
        doc.c.drawString(cols[0], doc.y, 'Dates')
        doc.c.drawString(cols[1], doc.y, 'Days')
        doc.c.drawString(cols[2], doc.y, 'Parent')
        doc.y -= 18

    doc.heading('Custody Blocks:')
    if not blocks:
        doc.line('No custody blocks in the selected range.')
        return
    header()
    for block in blocks:
        if doc.ensure(16):
            header()
        c = doc.c
        c.setFillColor(_fill(block.parent, colors))
        c.rect(cols[2], doc.y - 2, 10, 10, stroke=0, fill=1)
        c.setFillColor(rl_colors.black)
        c.setFont('Helvetica', 10)
        c.drawString(cols[0], doc.y, format_date_range(block))
        c.drawString(cols[1], doc.y, str(block.days))
        c.drawString(cols[2] + 16, doc.y, parent_label(block.parent, parent_names))
        doc.y -= 15


def _months_between(first: date, last: date):
    y, m = first.year, first.month
    while (y, m) <= (last.year, last.month):
        yield y, m
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)


def _draw_grid(doc: _Document, blocks, parent_names, colors, splits):
    if not blocks:
        doc.heading('Custody Calendar:')
        doc.line('No custody blocks in the selected range.')
        return
    split_by_day = {s.day: s for s in splits}
    cell_w = (doc.w - 2 * MARGIN) / 7
    cell_h = 80
    for year, month in _months_between(blocks[0].start_date, blocks[-1].end_date):
        # jeder Monat auf eigener Seite
        doc.new_page(f"{doc.title}: {calendar.month_name[month]} {year}")
        c = doc.c
        c.setFont('Helvetica-Bold', 10)
        for i, name in enumerate(WEEKDAY_NAMES):
            c.drawCentredString(MARGIN + i * cell_w + cell_w / 2, doc.y, name)
        doc.y -= 8
        for week in month_grid(year, month, blocks):
            top = doc.y
            for i, cell in enumerate(week):
                x = MARGIN + i * cell_w
                if cell.in_month and cell.parent is not None:
                    c.setFillColor(_fill(cell.parent, colors))
                else:
                    c.setFillColor(rl_colors.whitesmoke)
                c.rect(x, top - cell_h, cell_w, cell_h, stroke=1, fill=1)
                if not cell.in_month:
                    continue
                c.setFillColor(rl_colors.black)
                c.setFont('Helvetica-Bold', 10)
                c.drawString(x + 4, top - 14, str(cell.day.day))
                if cell.parent is not None:
                    c.setFont('Helvetica', 8)
                    c.drawString(x + 4, top - 28, parent_label(cell.parent, parent_names)[:16])
                split = split_by_day.get(cell.day)
                if split is not None:
                    c.setFont('Helvetica-Oblique', 7)
                    c.drawString(x + 4, top - cell_h + 14, split.holiday[:18])
                    handover = parent_label(split.second_parent, parent_names)
                    c.drawString(x + 4, top - cell_h + 5,
                                 f"Split {split.cutoff.strftime('%H:%M')} -> {handover[:12]}")
            doc.y = top - cell_h
        c.setFillColor(rl_colors.black)
    legend = ', '.join(f"{p.value} = {parent_label(p, parent_names)}" for p in Parent)
    doc.y -= 20
    doc.line(f"Legend: {legend}", indent=0, size=9)


def render_schedule_pdf(path: str, blocks: Iterable[CustodyBlock], config: ScheduleConfig,
                        parent_names: Optional[Mapping[str, str]] = None,
                        layout: str = LAYOUT_TABLE,
                        title: str = 'Custody Schedule',
                        include_chart: bool = False,
                        splits: Iterable[SplitDay] = (),
                        colors: Optional[Mapping[str, str]] = None,
                        patterns: PatternTable = DEFAULT_PATTERNS,
                        generated_at: Optional[datetime] = None) -> int:
    """
    Gerichtstaugliches PDF: Übersicht, Zusammenfassung und entweder eine
    Tabelle (eine Zeile pro Block) oder ein Monatsraster (eine Seite pro Monat).
    Gibt die Seitenzahl zurück.
    """
    if layout not in (LAYOUT_TABLE, LAYOUT_GRID):
        raise ValueError(f"Unknown document layout: {layout!r}")
    blocks = list(blocks)
    colors = colors or DEFAULT_CONFIG['colors']
    logging.info(f"[CustodyCompass] PDF-Export ({layout}) mit {len(blocks)} Blöcken gestartet.")

    doc = _Document(path, title, generated_at or datetime.now())
    _draw_overview(doc, config, parent_names, patterns)
    _draw_summary(doc, blocks, parent_names, colors, include_chart)
    if layout == LAYOUT_TABLE:
        _draw_table(doc, blocks, parent_names, colors)
    else:
        _draw_grid(doc, blocks, parent_names, colors, list(splits))
    pages = doc.finish()
    logging.info(f"[CustodyCompass] PDF gespeichert: {path} ({pages} Seiten)")
    return pages
