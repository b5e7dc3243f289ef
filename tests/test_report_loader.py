import pytest
from datetime import date
from unittest.mock import MagicMock, patch
from tzscraps.db.database import StorageError
from tzscraps.models.schemas import PeriodKind, ReportPeriod
from tzscraps.pipelines.report_loader import ReportLoader, fetch_report_data
from tzscraps.reports.kinds import ReportData


@pytest.fixture
def loader():
    return ReportLoader(client=MagicMock())


@patch("tzscraps.db.database.list_transactions")
@patch("tzscraps.db.database.list_products")
@patch("tzscraps.db.database.list_customers")
def test_fetch_waits_for_all_three(
    mock_customers, mock_products, mock_transactions, customers, products, report_data
):
    mock_customers.return_value = customers
    mock_products.return_value = products
    mock_transactions.return_value = report_data.transactions
    client = MagicMock()
    period = ReportPeriod(kind=PeriodKind.MONTH)

    data = fetch_report_data(client, period)

    mock_transactions.assert_called_once_with(client, period)
    assert data.customers == customers
    assert data.products == products
    assert data.period_label == "This Month"
    assert data.aggregation.total_amount == pytest.approx(180.0)


@patch("tzscraps.db.database.list_transactions")
@patch("tzscraps.db.database.list_products")
@patch("tzscraps.db.database.list_customers")
def test_fetch_failure_propagates(mock_customers, mock_products, mock_transactions):
    mock_customers.return_value = []
    mock_products.side_effect = StorageError("Loading products", Exception("down"))
    mock_transactions.return_value = []

    with pytest.raises(StorageError):
        fetch_report_data(MagicMock())


def test_refresh_commits_data(loader, report_data):
    period = ReportPeriod(
        kind=PeriodKind.CUSTOM, start=date(2024, 5, 1), end=date(2024, 5, 31)
    )
    with patch(
        "tzscraps.pipelines.report_loader.fetch_report_data", return_value=report_data
    ) as mock_fetch:
        assert loader.refresh(period) is report_data

    mock_fetch.assert_called_once_with(loader.client, period)
    assert loader.data is report_data
    assert loader.period == period
    assert loader.loading is False


def test_refresh_failure_keeps_previous_data(loader, report_data):
    loader.data = report_data
    with patch(
        "tzscraps.pipelines.report_loader.fetch_report_data",
        side_effect=StorageError("Loading customers", Exception("down")),
    ):
        assert loader.refresh() is None

    assert loader.data is report_data
    assert loader.notification.message == "Error loading report data"
    assert loader.notification.severity == "error"
    assert loader.loading is False


def test_stale_fetch_is_discarded(loader, report_data, empty_report_data):
    def superseded(client, period):
        # a newer refresh starts while this one is still in flight
        newer = loader.begin()
        loader.commit(newer, report_data)
        return empty_report_data

    with patch(
        "tzscraps.pipelines.report_loader.fetch_report_data", side_effect=superseded
    ):
        assert loader.refresh() is None

    assert loader.data is report_data


def test_only_latest_ticket_commits(loader, report_data, empty_report_data):
    first = loader.begin()
    second = loader.begin()

    assert loader.is_current(first) is False
    assert loader.commit(first, empty_report_data) is False
    loader.fail(first, StorageError("x", Exception("late")))
    assert loader.notification is None

    assert loader.commit(second, report_data) is True
    assert loader.data is report_data
