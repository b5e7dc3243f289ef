from datetime import datetime
from typing import Any, List, Optional
from openpyxl import Workbook
from openpyxl.styles import Font
from tzscraps.config import Config
from tzscraps.logic.formatting import LONG_DATETIME_FORMAT, format_datetime
from tzscraps.reports.kinds import ReportData, ReportKind, raw_rows

SUMMARY_SHEET = "Summary"
# Layout of the per-kind sheet: title, blank row, header, then data
HEADER_ROW = 3
FIRST_DATA_ROW = 4

BOLD = Font(bold=True)


def _cell_value(value: Any) -> Any:
    """Excel has no timezones; aware datetimes are written as local wall time."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _append(sheet, values: List[Any], bold: bool = False):
    sheet.append([_cell_value(v) for v in values])
    if not values:
        return
    for cell in sheet[sheet.max_row][: len(values)]:
        # openpyxl reads "=..." text as a formula; keep it a literal string
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.data_type = "s"
        if bold:
            cell.font = BOLD


def build_workbook(
    kind: ReportKind, data: ReportData, limit: Optional[int] = None
) -> Workbook:
    """
    Two sheets:
    - "Summary": report title, period, generation time and the five metrics
      (raw numbers, no currency formatting).
    - one sheet named after the report kind with raw, recalculable values.
    """
    if limit is None:
        limit = Config.WORKBOOK_ROW_LIMIT

    workbook = Workbook()
    summary = workbook.active
    summary.title = SUMMARY_SHEET

    _append(summary, [f"{Config.BUSINESS_NAME} - Business Report"], bold=True)
    _append(summary, [f"Report Period: {data.period_label}"])
    _append(
        summary,
        [f"Generated: {format_datetime(data.generated_at, LONG_DATETIME_FORMAT)}"],
    )
    _append(summary, [])
    _append(summary, ["Summary Statistics"], bold=True)
    _append(summary, ["Metric", "Value"], bold=True)
    for label, value in data.summary_metrics():
        _append(summary, [label, value])
    summary.column_dimensions["A"].width = 24
    summary.column_dimensions["B"].width = 18

    sheet = workbook.create_sheet(kind.title)
    _append(sheet, [kind.heading], bold=True)
    _append(sheet, [])

    rows = raw_rows(kind, data, limit=limit)
    if not rows:
        _append(sheet, [kind.empty_message])
        return workbook

    _append(sheet, list(kind.raw_columns), bold=True)
    for row in rows:
        _append(sheet, row)

    return workbook


def save_workbook(workbook: Workbook, target) -> None:
    """`target` is a path or a binary file object."""
    workbook.save(target)
