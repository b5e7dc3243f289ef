import random
import string
import time
from typing import List, Optional, Tuple
from tzscraps.db import database
from tzscraps.db.database import StorageError
from tzscraps.logic.confirmation import Notification, PendingDeletion
from tzscraps.models.schemas import Customer, CustomerInput, Product, ProductInput
from tzscraps.supabase.client import SupabaseClient

CUSTOMER_DELETE_PROMPT = (
    "Are you sure you want to delete this customer? "
    "This will also delete all their transactions."
)
PRODUCT_DELETE_PROMPT = "Are you sure you want to delete this product?"

SERIAL_ALPHABET = string.ascii_lowercase + string.digits


def generate_serial_number(now_ms: Optional[int] = None, rng=random) -> str:
    """TZ-<epoch ms>-<9 random base36 chars>. Only called when a product is created."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(rng.choice(SERIAL_ALPHABET) for _ in range(9))
    return f"TZ-{now_ms}-{suffix}"


def search_customers(
    customers: List[Customer], term: str
) -> List[Tuple[int, Customer]]:
    """
    Numbers customers 1..n in listing order (SN) and keeps the ones whose
    name (case-insensitive), phone or SN contains the term.
    """
    numbered = list(enumerate(customers, start=1))
    term = (term or "").strip()
    if not term:
        return numbered

    lowered = term.lower()
    return [
        (sn, c)
        for sn, c in numbered
        if lowered in c.name.lower()
        or (c.phone and term in c.phone)
        or term in str(sn)
    ]


def search_products(products: List[Product], term: str) -> List[Product]:
    """Matches name, serial number or description, case-insensitive."""
    lowered = (term or "").strip().lower()
    if not lowered:
        return list(products)

    def matches(p: Product) -> bool:
        fields = (p.name, p.serial_number, p.description)
        return any(lowered in f.lower() for f in fields if f)

    return [p for p in products if matches(p)]


class Listing:
    """Screen state shared by the customer and product listings."""

    label = "records"

    def __init__(self, client: Optional[SupabaseClient] = None):
        self.client = client or SupabaseClient()
        self.items: list = []
        self.search_term = ""
        self.notification: Optional[Notification] = None

    def _fetch(self) -> list:
        raise NotImplementedError

    def _delete(self, item_id: str):
        raise NotImplementedError

    def refresh(self) -> bool:
        try:
            self.items = self._fetch()
            return True
        except StorageError as e:
            print(f"Error loading {self.label}: {e}")
            self.notification = Notification(f"Error loading {self.label}", "error")
            return False

    def dismiss_notification(self):
        self.notification = None

    def resolve_delete(self, pending: PendingDeletion) -> bool:
        """Second step of a deletion. Returns True only when a row was deleted."""
        pending.ensure_settled()
        if not pending.is_confirmed:
            return False

        singular = self.label.rstrip("s")
        try:
            self._delete(pending.target_id)
        except StorageError as e:
            print(f"Error deleting {singular} {pending.target_id}: {e}")
            self.notification = Notification(
                f"Error deleting {singular}. Please try again.", "error"
            )
            return False

        self.items = [item for item in self.items if item.id != pending.target_id]
        self.notification = Notification(f"{singular.capitalize()} deleted successfully!")
        return True


class CustomerDirectory(Listing):
    label = "customers"

    def _fetch(self) -> List[Customer]:
        return database.list_customers(self.client)

    def _delete(self, item_id: str):
        database.delete_customer(self.client, item_id)

    @property
    def visible(self) -> List[Tuple[int, Customer]]:
        return search_customers(self.items, self.search_term)

    def save(
        self, name: str, phone: Optional[str] = None, customer_id: Optional[str] = None
    ) -> Optional[Customer]:
        """
        Adds a customer, or updates `customer_id` when given.
        Raises pydantic.ValidationError before touching storage on bad input.
        """
        data = CustomerInput(name=name, phone=phone)
        try:
            if customer_id:
                saved = database.update_customer(self.client, customer_id, data)
            else:
                saved = database.insert_customer(self.client, data)
        except StorageError as e:
            print(f"Error saving customer: {e}")
            self.notification = Notification(
                "Error saving customer. Please try again.", "error"
            )
            return None

        verb = "updated" if customer_id else "added"
        self.notification = Notification(f"Customer {verb} successfully!")
        self.refresh()
        return saved

    def request_delete(self, customer_id: str) -> PendingDeletion:
        return PendingDeletion(customer_id, CUSTOMER_DELETE_PROMPT)


class ProductCatalog(Listing):
    label = "products"

    def __init__(self, client: Optional[SupabaseClient] = None, order: str = "created_at.desc"):
        super().__init__(client)
        self.order = order

    def _fetch(self) -> List[Product]:
        return database.list_products(self.client, order=self.order)

    def _delete(self, item_id: str):
        database.delete_product(self.client, item_id)

    @property
    def visible(self) -> List[Product]:
        return search_products(self.items, self.search_term)

    def save(
        self,
        name: str,
        description: Optional[str] = "",
        product_id: Optional[str] = None,
    ) -> Optional[Product]:
        """Adds a product with a fresh serial number, or updates name/description only."""
        data = ProductInput(name=name, description=description)
        try:
            if product_id:
                saved = database.update_product(self.client, product_id, data)
            else:
                saved = database.insert_product(
                    self.client, data, generate_serial_number()
                )
        except StorageError as e:
            print(f"Error saving product: {e}")
            self.notification = Notification(
                "Error saving product. Please try again.", "error"
            )
            return None

        verb = "updated" if product_id else "added"
        self.notification = Notification(f"Product {verb} successfully!")
        self.refresh()
        return saved

    def request_delete(self, product_id: str) -> PendingDeletion:
        return PendingDeletion(product_id, PRODUCT_DELETE_PROMPT)
