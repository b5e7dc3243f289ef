import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional
from tzscraps.db import database
from tzscraps.db.database import StorageError
from tzscraps.logic.confirmation import Notification
from tzscraps.models.schemas import ReportPeriod
from tzscraps.reports.kinds import ReportData
from tzscraps.supabase.client import SupabaseClient


def fetch_report_data(
    client: SupabaseClient,
    period: Optional[ReportPeriod] = None,
    generated_at: Optional[datetime] = None,
) -> ReportData:
    """
    Fetches customers, products and transactions in parallel and aggregates
    once all three have arrived. Any StorageError propagates after the
    other fetches finish; nothing partial is returned.
    """
    period = period or ReportPeriod()
    with ThreadPoolExecutor(max_workers=3) as pool:
        customers_future = pool.submit(database.list_customers, client)
        products_future = pool.submit(database.list_products, client)
        transactions_future = pool.submit(database.list_transactions, client, period)

        customers = customers_future.result()
        products = products_future.result()
        transactions = transactions_future.result()

    print(
        f"Retrieved {len(customers)} customers, {len(products)} products and "
        f"{len(transactions)} transactions ({period.label()})."
    )
    return ReportData.build(
        customers, products, transactions, period=period, generated_at=generated_at
    )


class ReportLoader:
    """
    Reports screen state. Each refresh gets a ticket; only the newest ticket
    may replace `data`, so a slow, superseded fetch never overwrites a newer one.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        self.client = client or SupabaseClient()
        self.period = ReportPeriod()
        self.data: Optional[ReportData] = None
        self.notification: Optional[Notification] = None
        self.loading = False
        self._latest_ticket = 0
        self._lock = threading.Lock()

    def begin(self) -> int:
        with self._lock:
            self._latest_ticket += 1
            self.loading = True
            return self._latest_ticket

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest_ticket

    def commit(
        self, ticket: int, data: ReportData, period: Optional[ReportPeriod] = None
    ) -> bool:
        with self._lock:
            if ticket != self._latest_ticket:
                return False
            self.data = data
            if period is not None:
                self.period = period
            self.loading = False
            return True

    def fail(self, ticket: int, error: StorageError) -> None:
        with self._lock:
            if ticket != self._latest_ticket:
                return
            self.notification = Notification("Error loading report data", "error")
            self.loading = False

    def refresh(self, period: Optional[ReportPeriod] = None) -> Optional[ReportData]:
        """Returns the new data, or None when the fetch failed or was superseded."""
        period = period or self.period
        ticket = self.begin()
        print(f"Fetching report data for period: {period.label()}")

        try:
            data = fetch_report_data(self.client, period)
        except StorageError as e:
            print(f"Failed to fetch report data. Error: {e}")
            self.fail(ticket, e)
            return None

        if not self.commit(ticket, data, period):
            print(f"Discarding stale report data (request {ticket}).")
            return None
        return data
