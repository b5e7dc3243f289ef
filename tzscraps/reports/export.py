import os
from datetime import datetime
from enum import Enum
from typing import Optional
from tzscraps.config import Config
from tzscraps.reports.document import render_document
from tzscraps.reports.kinds import ReportData, ReportKind
from tzscraps.reports.printing import render_report_html
from tzscraps.reports.workbook import build_workbook, save_workbook


class ExportFormat(str, Enum):
    HTML = "html"
    WORKBOOK = "xlsx"
    DOCUMENT = "pdf"


def export_basename(
    kind: ReportKind, generated_at: datetime, business_name: Optional[str] = None
) -> str:
    """<business-name>-Report-<ISO date>-Kind-<n>, e.g. TZ-Scraps-Report-2024-05-01-Kind-3."""
    business = (business_name or Config.BUSINESS_NAME).strip().replace(" ", "-")
    return f"{business}-Report-{generated_at.date().isoformat()}-Kind-{kind.number}"


def export_report(
    kind: ReportKind,
    data: ReportData,
    fmt: ExportFormat,
    output_dir: Optional[str] = None,
) -> str:
    """Writes one artifact for the active report kind and returns its path."""
    output_dir = output_dir or Config.REPORTS_DIR
    os.makedirs(output_dir, exist_ok=True)

    filename = f"{export_basename(kind, data.generated_at)}.{fmt.value}"
    path = os.path.join(output_dir, filename)

    if fmt == ExportFormat.HTML:
        with open(path, "w", encoding="utf-8") as f:
            f.write(render_report_html(kind, data))
    elif fmt == ExportFormat.WORKBOOK:
        save_workbook(build_workbook(kind, data), path)
    else:
        render_document(kind, data, path)

    print(f"Report exported to: {path}")
    return path
