import pytest
from datetime import datetime, timedelta
from tzscraps.reports.kinds import (
    ReportData,
    ReportKind,
    display_rows,
    raw_rows,
)
from tzscraps.reports.view import build_view


def test_kinds_are_numbered_one_to_five():
    assert [k.number for k in ReportKind] == [1, 2, 3, 4, 5]
    assert ReportKind.from_number(3) == ReportKind.RECENT_TRANSACTIONS


@pytest.mark.parametrize(
    "text, kind",
    [
        ("1", ReportKind.CUSTOMER_SPENDING),
        ("product_purchases", ReportKind.PRODUCT_PURCHASES),
        ("Customer List", ReportKind.CUSTOMER_LIST),
        ("product-list", ReportKind.PRODUCT_LIST),
    ],
)
def test_parse_kind(text, kind):
    assert ReportKind.parse(text) == kind


@pytest.mark.parametrize("text", ["0", "6", "sales"])
def test_parse_unknown_kind(text):
    with pytest.raises(ValueError):
        ReportKind.parse(text)


def test_column_schemas():
    assert ReportKind.CUSTOMER_SPENDING.columns == (
        "Customer",
        "Phone",
        "Transaction Count",
        "Total Spent",
    )
    assert ReportKind.RECENT_TRANSACTIONS.columns == (
        "Date",
        "Customer",
        "Product",
        "Quantity",
        "Total Amount",
    )
    assert ReportKind.CUSTOMER_LIST.columns[-1] == "Status"
    assert ReportKind.PRODUCT_LIST.columns == ("Name", "Serial", "Description", "Added Date")


def test_summary_metrics(report_data):
    assert report_data.summary_metrics() == [
        ("Total Customers", 2),
        ("Total Products", 2),
        ("Total Transactions", 3),
        ("Total Amount", 180.0),
        ("Total Quantity", 6.5),
    ]
    assert ("Total Amount", "₦180.00") in report_data.formatted_summary()


def test_customer_spending_rows(report_data):
    assert raw_rows(ReportKind.CUSTOMER_SPENDING, report_data) == [
        ["Alice", "08012345678", 2, 150.0],
        ["Bob", "", 1, 30.0],
    ]
    assert display_rows(ReportKind.CUSTOMER_SPENDING, report_data) == [
        ["Alice", "08012345678", "2", "₦150.00"],
        ["Bob", "No phone", "1", "₦30.00"],
    ]


def test_product_purchase_rows(report_data):
    assert display_rows(ReportKind.PRODUCT_PURCHASES, report_data) == [
        ["Copper", "TZ-1-abc", "2.00", "₦100.00"],
        ["Cans", "TZ-2-def", "4.50", "₦80.00"],
    ]


def test_transaction_rows_join_quantity_and_unit(report_data):
    row = display_rows(ReportKind.RECENT_TRANSACTIONS, report_data)[1]
    assert row[1:] == ["Alice", "Cans", "1.5 kg", "₦50.00"]

    raw = raw_rows(ReportKind.RECENT_TRANSACTIONS, report_data)[1]
    assert raw[3:] == [1.5, "kg", 50.0, 50.0]


def test_list_rows(report_data):
    assert display_rows(ReportKind.CUSTOMER_LIST, report_data)[1] == [
        "Bob",
        "No phone",
        "20 May 2024",
        "Active",
    ]
    assert display_rows(ReportKind.PRODUCT_LIST, report_data)[1][2] == "No description"


def test_cap_only_applies_to_transactions(make_transaction, customers):
    transactions = [make_transaction(customer_id=f"C{i}") for i in range(10)]
    data = ReportData.build(customers, [], transactions)

    capped = raw_rows(ReportKind.RECENT_TRANSACTIONS, data, limit=4)
    assert [r[0] for r in capped] == [t.created_at for t in transactions[:4]]
    assert len(raw_rows(ReportKind.CUSTOMER_SPENDING, data, limit=4)) == 10


def test_view_formats_without_touching_values(report_data):
    view = build_view(ReportKind.CUSTOMER_SPENDING, report_data)

    assert view.rows[0][-1] == "₦150.00"
    assert report_data.aggregation.customer_spending[0].total_spent == 150.0
    assert not view.is_empty
    assert view.empty_message is None


def test_view_caps_transactions(make_transaction):
    transactions = [make_transaction() for _ in range(60)]
    data = ReportData.build([], [], transactions)

    assert len(build_view(ReportKind.RECENT_TRANSACTIONS, data).rows) == 50


@pytest.mark.parametrize("kind", list(ReportKind))
def test_view_empty_message(kind, empty_report_data):
    view = build_view(kind, empty_report_data)

    assert view.is_empty
    assert view.empty_message == kind.empty_message
