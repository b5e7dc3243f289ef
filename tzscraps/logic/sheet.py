from datetime import datetime
from typing import List, Optional, Union
from tzscraps.db import database
from tzscraps.db.database import StorageError
from tzscraps.logic.catalog import Listing
from tzscraps.logic.confirmation import Notification, PendingDeletion
from tzscraps.logic.formatting import format_currency, format_item_count
from tzscraps.models.schemas import (
    Customer,
    Product,
    Transaction,
    TransactionInput,
    Unit,
)
from tzscraps.reports.printing import render_receipt_html
from tzscraps.supabase.client import SupabaseClient

TRANSACTION_DELETE_PROMPT = "Are you sure you want to delete this transaction?"


class TransactionSheet(Listing):
    """
    One customer's transactions plus running totals. Totals are derived from
    the current list on every read, so they always follow adds and deletes.
    """

    label = "transactions"

    def __init__(self, customer: Customer, client: Optional[SupabaseClient] = None):
        super().__init__(client)
        self.customer = customer
        self.products: List[Product] = []

    def _fetch(self) -> List[Transaction]:
        return database.list_transactions(self.client, customer_id=self.customer.id)

    def _delete(self, item_id: str):
        database.delete_transaction(self.client, item_id)

    @property
    def transactions(self) -> List[Transaction]:
        return self.items

    def load_products(self) -> bool:
        """Product picker for the add dialog, ordered by name."""
        try:
            self.products = database.list_products(self.client, order="name.asc")
            return True
        except StorageError as e:
            print(f"Error fetching products: {e}")
            return False

    # =================================================================
    # Totals
    # =================================================================

    @property
    def transaction_count(self) -> int:
        return len(self.items)

    @property
    def total_amount(self) -> float:
        return sum(t.total_amount or 0.0 for t in self.items)

    @property
    def total_items(self) -> float:
        return sum(t.quantity or 0.0 for t in self.items)

    @property
    def total_amount_display(self) -> str:
        return format_currency(self.total_amount)

    @property
    def total_items_display(self) -> str:
        return format_item_count(self.total_items)

    # =================================================================
    # Mutations
    # =================================================================

    def add_transaction(
        self,
        product_id: str,
        quantity: float,
        price: float,
        unit: Union[Unit, str] = Unit.KILOGRAM,
    ) -> Optional[Transaction]:
        """
        Validates first (raises pydantic.ValidationError: quantity > 0,
        price > 0, known unit), then stores price x quantity as total_amount.
        """
        data = TransactionInput(
            customer_id=self.customer.id,
            product_id=product_id,
            quantity=quantity,
            price=price,
            unit=unit,
        )
        try:
            saved = database.insert_transaction(self.client, data)
        except StorageError as e:
            print(f"Error adding transaction: {e}")
            self.notification = Notification(
                "Error adding product. Please try again.", "error"
            )
            return None

        if not self.refresh():
            # Stored anyway; keep it in the list until the next successful load
            self.items = [saved] + self.items
        self.notification = Notification("Product added successfully!")
        return saved

    def request_delete(self, transaction_id: str) -> PendingDeletion:
        return PendingDeletion(transaction_id, TRANSACTION_DELETE_PROMPT)

    # =================================================================
    # Receipt
    # =================================================================

    def print_receipt(self, printed_at: Optional[datetime] = None) -> Optional[str]:
        if not self.items:
            self.notification = Notification(
                "No transactions to print. Add products first.", "warning"
            )
            return None

        html = render_receipt_html(self.customer, self.items, printed_at=printed_at)
        self.notification = Notification("Receipt generated successfully!")
        return html
