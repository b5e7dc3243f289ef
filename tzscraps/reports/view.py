from dataclasses import dataclass
from typing import List, Optional, Tuple
from tzscraps.config import Config
from tzscraps.reports.kinds import ReportData, ReportKind, display_rows


@dataclass
class ReportView:
    """What the reports screen draws for the active tab."""

    kind: ReportKind
    period_label: str
    summary: List[Tuple[str, str]]
    columns: Tuple[str, ...]
    rows: List[List[str]]

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def empty_message(self) -> Optional[str]:
        return self.kind.empty_message if self.is_empty else None


def build_view(
    kind: ReportKind, data: ReportData, limit: Optional[int] = None
) -> ReportView:
    if limit is None:
        limit = Config.VIEW_ROW_LIMIT
    return ReportView(
        kind=kind,
        period_label=data.period_label,
        summary=data.formatted_summary(),
        columns=kind.columns,
        rows=display_rows(kind, data, limit=limit),
    )
