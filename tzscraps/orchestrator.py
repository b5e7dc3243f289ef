import schedule
import time
import sys
from datetime import datetime
from typing import Optional
from tzscraps.config import Config
from tzscraps.models.schemas import ReportPeriod
from tzscraps.pipelines.report_loader import fetch_report_data
from tzscraps.reports.export import ExportFormat, export_report
from tzscraps.reports.kinds import ReportKind
from tzscraps.supabase.client import SupabaseClient

DAILY_FORMATS = (ExportFormat.WORKBOOK, ExportFormat.DOCUMENT)


def run_daily_export(
    client: Optional[SupabaseClient] = None, period: Optional[ReportPeriod] = None
):
    """
    Daily job:
    1. Fetch customers, products and transactions (one barrier fetch)
    2. Export every report kind as spreadsheet and PDF into REPORTS_DIR
    """
    print(f"[{datetime.now().isoformat()}] Starting daily report export...")

    try:
        Config.check_and_create_dirs()
        client = client or SupabaseClient()

        print("--- Step 1: Fetching report data ---")
        data = fetch_report_data(client, period or ReportPeriod())

        print("\n--- Step 2: Exporting reports ---")
        exported = []
        for kind in ReportKind:
            for fmt in DAILY_FORMATS:
                exported.append(export_report(kind, data, fmt, Config.REPORTS_DIR))

        print(
            f"\n[{datetime.now().isoformat()}] Daily export completed: {len(exported)} files."
        )
        return exported
    except Exception as e:
        print(f"[{datetime.now().isoformat()}] CRITICAL: Daily export failed: {e}")
        return []


def main():
    print("--- TZ SCRAPS REPORT SCHEDULER ---")
    print(f"Environment: {Config.ENVIRONMENT.upper()}")

    run_time = Config.get_schedule_time()
    print(f"Scheduled execution time: {run_time}")

    schedule.every().day.at(run_time).do(run_daily_export)

    print(f"Scheduler is running. Waiting for {run_time}...")

    while True:
        schedule.run_pending()
        time.sleep(1)


if __name__ == "__main__":
    delay = Config.get_startup_delay()
    if delay > 0:
        print(
            f"Waiting {delay} seconds before starting (Environment: {Config.ENVIRONMENT.upper()})..."
        )
        time.sleep(delay)

    # --now exports once and exits instead of scheduling
    if "--now" in sys.argv[1:]:
        run_daily_export()
    else:
        main()
