import argparse
from pydantic import ValidationError
from datetime import date
from tzscraps.config import Config
from tzscraps.db.database import StorageError
from tzscraps.models.schemas import PeriodKind, ReportPeriod
from tzscraps.pipelines.report_loader import fetch_report_data
from tzscraps.reports.export import ExportFormat, export_report
from tzscraps.reports.kinds import ReportKind
from tzscraps.supabase.client import SupabaseClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exports one business report (print HTML, spreadsheet or PDF)."
    )
    parser.add_argument(
        "--kind",
        type=ReportKind.parse,
        default=ReportKind.CUSTOMER_SPENDING,
        help="1-5 or name: customer_spending, product_purchases, "
        "recent_transactions, customer_list, product_list",
    )
    parser.add_argument(
        "--format",
        dest="fmt",
        type=ExportFormat,
        choices=list(ExportFormat),
        default=ExportFormat.DOCUMENT,
        help="html, xlsx or pdf",
    )
    parser.add_argument(
        "--period",
        type=PeriodKind,
        choices=list(PeriodKind),
        default=PeriodKind.ALL,
        help="all, month, last_month or custom",
    )
    parser.add_argument("--start", type=date.fromisoformat, help="YYYY-MM-DD (custom)")
    parser.add_argument("--end", type=date.fromisoformat, help="YYYY-MM-DD (custom)")
    parser.add_argument("--output", type=str, default=None, help="Output directory")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        period = ReportPeriod(kind=args.period, start=args.start, end=args.end)
    except ValidationError as e:
        parser.error(str(e))

    try:
        data = fetch_report_data(SupabaseClient(), period)
    except StorageError as e:
        print(f"Failed to fetch report data. Error: {e}")
        return 1

    export_report(args.kind, data, args.fmt, args.output or Config.REPORTS_DIR)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
