import pytest
from datetime import datetime
from unittest.mock import MagicMock, patch
from pydantic import ValidationError
from tzscraps.db.database import StorageError
from tzscraps.logic.sheet import TRANSACTION_DELETE_PROMPT, TransactionSheet
from tzscraps.models.schemas import Customer


@pytest.fixture
def sheet():
    customer = Customer(id="C1", name="Alice", phone="08012345678")
    return TransactionSheet(customer, client=MagicMock())


def _storage_error():
    return StorageError("Test", Exception("boom"))


def test_totals_follow_items(sheet, make_transaction):
    sheet.items = [
        make_transaction(quantity=2, total_amount=100),
        make_transaction(quantity=1.5, total_amount=50.5),
        make_transaction(quantity=None, total_amount=None),
    ]

    assert sheet.transaction_count == 3
    assert sheet.total_amount == pytest.approx(150.5)
    assert sheet.total_items == pytest.approx(3.5)
    assert sheet.total_amount_display == "₦150.50"
    assert sheet.total_items_display == "3.50"

    sheet.items = sheet.items[:1]
    assert sheet.total_amount_display == "₦100.00"
    assert sheet.total_items_display == "2"


def test_empty_sheet_totals(sheet):
    assert sheet.transaction_count == 0
    assert sheet.total_amount_display == "₦0.00"
    assert sheet.total_items_display == "0"


@patch("tzscraps.db.database.list_transactions")
def test_refresh_loads_customer_transactions(mock_list, sheet, make_transaction):
    mock_list.return_value = [make_transaction()]

    assert sheet.refresh() is True

    mock_list.assert_called_once_with(sheet.client, customer_id="C1")
    assert sheet.transaction_count == 1


@patch("tzscraps.db.database.list_products")
def test_load_products_by_name(mock_list, sheet, products):
    mock_list.return_value = products

    assert sheet.load_products() is True

    mock_list.assert_called_once_with(sheet.client, order="name.asc")
    assert sheet.products == products


@pytest.mark.parametrize(
    "quantity, price, unit",
    [
        (0, 10, "kg"),
        (-1, 10, "kg"),
        (1, 0, "kg"),
        (1, float("nan"), "kg"),
        (1, 10, "tonne"),
    ],
)
@patch("tzscraps.db.database.insert_transaction")
def test_invalid_transaction_never_reaches_storage(
    mock_insert, quantity, price, unit, sheet
):
    with pytest.raises(ValidationError):
        sheet.add_transaction("P1", quantity, price, unit)

    mock_insert.assert_not_called()


@patch("tzscraps.db.database.list_transactions")
@patch("tzscraps.db.database.insert_transaction")
def test_add_transaction_stores_total_and_refreshes(
    mock_insert, mock_list, sheet, make_transaction
):
    saved = make_transaction(quantity=2.5, price=40, total_amount=100)
    mock_insert.return_value = saved
    mock_list.return_value = [saved]

    result = sheet.add_transaction("P1", 2.5, 40, "bag")

    data = mock_insert.call_args.args[1]
    assert data.total_amount == 100
    assert data.to_payload()["unit"] == "bag"
    assert result is saved
    assert sheet.items == [saved]
    assert sheet.notification.message == "Product added successfully!"


@patch("tzscraps.db.database.list_transactions")
@patch("tzscraps.db.database.insert_transaction")
def test_add_transaction_failure_keeps_list(
    mock_insert, mock_list, sheet, make_transaction
):
    existing = make_transaction()
    sheet.items = [existing]
    mock_insert.side_effect = _storage_error()

    assert sheet.add_transaction("P1", 1, 10) is None

    assert sheet.items == [existing]
    assert sheet.notification.severity == "error"
    assert sheet.notification.message == "Error adding product. Please try again."
    mock_list.assert_not_called()


@patch("tzscraps.db.database.delete_transaction")
def test_delete_requires_confirmation(mock_delete, sheet, make_transaction):
    first, second = make_transaction(), make_transaction()
    sheet.items = [first, second]

    pending = sheet.request_delete(first.id)
    assert pending.message == TRANSACTION_DELETE_PROMPT
    with pytest.raises(ValueError, match="has not been confirmed"):
        sheet.resolve_delete(pending)
    mock_delete.assert_not_called()

    assert sheet.resolve_delete(pending.confirm()) is True
    mock_delete.assert_called_once_with(sheet.client, first.id)
    assert sheet.items == [second]
    assert sheet.notification.message == "Transaction deleted successfully!"


@patch("tzscraps.db.database.delete_transaction")
def test_cancelled_delete_changes_nothing(mock_delete, sheet, make_transaction):
    sheet.items = [make_transaction()]

    pending = sheet.request_delete(sheet.items[0].id).cancel()

    assert sheet.resolve_delete(pending) is False
    mock_delete.assert_not_called()
    assert len(sheet.items) == 1
    assert sheet.notification is None
    with pytest.raises(ValueError, match="already cancelled"):
        pending.confirm()


@patch("tzscraps.db.database.delete_transaction")
def test_failed_delete_keeps_item(mock_delete, sheet, make_transaction):
    sheet.items = [make_transaction()]
    mock_delete.side_effect = _storage_error()

    pending = sheet.request_delete(sheet.items[0].id).confirm()

    assert sheet.resolve_delete(pending) is False
    assert len(sheet.items) == 1
    assert sheet.notification.message == "Error deleting transaction. Please try again."


def test_receipt_without_transactions_warns(sheet):
    assert sheet.print_receipt() is None
    assert sheet.notification.severity == "warning"
    assert sheet.notification.message == "No transactions to print. Add products first."


def test_receipt_with_transactions(sheet, make_transaction):
    sheet.items = [make_transaction(total_amount=75)]

    html = sheet.print_receipt(printed_at=datetime(2024, 5, 20, 14, 0))

    assert "Alice" in html
    assert "Total Amount: ₦75.00" in html
    assert sheet.notification.message == "Receipt generated successfully!"


@patch("tzscraps.db.database.list_transactions")
@patch("tzscraps.db.database.insert_transaction")
def test_added_transaction_kept_when_reload_fails(
    mock_insert, mock_list, sheet, make_transaction
):
    existing = make_transaction(total_amount=20)
    saved = make_transaction(total_amount=80)
    sheet.items = [existing]
    mock_insert.return_value = saved
    mock_list.side_effect = _storage_error()

    assert sheet.add_transaction("P1", 2, 40) is saved

    assert sheet.items == [saved, existing]
    assert sheet.total_amount_display == "₦100.00"
    assert sheet.notification.message == "Product added successfully!"
