from typing import List, Optional, Tuple
from xml.sax.saxutils import escape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from tzscraps.config import Config
from tzscraps.logic.formatting import LONG_DATETIME_FORMAT, format_datetime
from tzscraps.reports.kinds import ReportData, ReportKind, display_rows

CUSTOM_FONT = "ReportFont"

GRID_STYLE = [
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2980b9")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
]


def _font_name() -> Optional[str]:
    if not Config.PDF_FONT_PATH:
        return None
    if CUSTOM_FONT not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(CUSTOM_FONT, Config.PDF_FONT_PATH))
    return CUSTOM_FONT


def document_sections(
    kind: ReportKind, data: ReportData, limit: Optional[int] = None
) -> List[Tuple[str, Optional[List[List[str]]]]]:
    """
    Content of the paginated document as (heading, table) pairs:
    the summary metrics first, then the active report. A table of None means
    the report has no rows and the heading is its "no data" message.
    """
    if limit is None:
        limit = Config.DOCUMENT_ROW_LIMIT

    summary = [["Metric", "Value"]] + [
        [label, value] for label, value in data.formatted_summary()
    ]
    sections = [("Summary Statistics", summary)]

    rows = display_rows(kind, data, limit=limit)
    if rows:
        sections.append((kind.heading, [list(kind.columns)] + rows))
    else:
        sections.append((kind.empty_message, None))
    return sections


def build_story(kind: ReportKind, data: ReportData, limit: Optional[int] = None) -> list:
    styles = getSampleStyleSheet()
    font = _font_name()
    if font:
        for style in styles.byName.values():
            style.fontName = font
    cell_style = styles["BodyText"]

    story = [
        Paragraph(escape(f"{Config.BUSINESS_NAME} - Business Report"), styles["Title"]),
        Paragraph(escape(f"Report Period: {data.period_label}"), styles["Normal"]),
        Paragraph(
            escape(
                f"Generated: {format_datetime(data.generated_at, LONG_DATETIME_FORMAT)}"
            ),
            styles["Normal"],
        ),
        Spacer(1, 0.25 * inch),
    ]

    for heading, table_rows in document_sections(kind, data, limit=limit):
        story.append(Paragraph(escape(heading), styles["Heading2"]))
        if table_rows is None:
            continue
        header, body = table_rows[0], table_rows[1:]
        cells = [header] + [
            [Paragraph(escape(str(value)), cell_style) for value in row] for row in body
        ]
        # Header row repeats on every page the table breaks onto
        table = Table(cells, repeatRows=1)
        style = list(GRID_STYLE)
        if font:
            style.append(("FONTNAME", (0, 0), (-1, -1), font))
        table.setStyle(TableStyle(style))
        story.append(table)
        story.append(Spacer(1, 0.25 * inch))

    return story


def render_document(
    kind: ReportKind, data: ReportData, target, limit: Optional[int] = None
) -> None:
    """Writes the PDF to `target` (a path or a binary file object)."""
    doc = SimpleDocTemplate(
        target,
        pagesize=A4,
        title=f"{Config.BUSINESS_NAME} - Business Report",
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
    )
    doc.build(build_story(kind, data, limit=limit))
