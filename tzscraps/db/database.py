import requests
from typing import Any, Dict, List, Optional
from tzscraps.supabase.client import SupabaseClient
from tzscraps.models.schemas import (
    Customer,
    CustomerInput,
    Product,
    ProductInput,
    ReportPeriod,
    Transaction,
    TransactionInput,
)

CUSTOMERS_TABLE = "customers"
PRODUCTS_TABLE = "products"
TRANSACTIONS_TABLE = "transactions"

# Eager join: each transaction row carries its customer and product inline
TRANSACTION_SELECT = "*,customers(name,phone),products(name,serial_number)"

# DDL for the hosted backend (run once in the SQL editor of the project)
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS customers (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL,
    phone TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS products (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    serial_number TEXT UNIQUE NOT NULL,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS transactions (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    customer_id UUID NOT NULL REFERENCES customers(id) ON DELETE CASCADE,
    product_id UUID NOT NULL REFERENCES products(id) ON DELETE CASCADE,
    quantity NUMERIC NOT NULL CHECK (quantity > 0),
    unit TEXT NOT NULL CHECK (unit IN ('kg', 'g', 'piece', 'liter', 'packet', 'bag')),
    price NUMERIC NOT NULL CHECK (price > 0),
    total_amount NUMERIC NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""


class StorageError(Exception):
    """A fetch or mutation against the backend failed. Nothing was applied locally."""

    def __init__(self, action: str, cause: Exception):
        super().__init__(f"{action} failed: {cause}")
        self.action = action
        self.cause = cause


def _call(action: str, func, *args, **kwargs) -> Any:
    try:
        return func(*args, **kwargs)
    except requests.RequestException as e:
        raise StorageError(action, e) from e


# =====================================================================
# Generic table operations
# =====================================================================


def select_rows(
    client: SupabaseClient,
    table: str,
    select: str = "*",
    order: Optional[str] = "created_at.desc",
    filters: Optional[List[tuple]] = None,
) -> List[Dict[str, Any]]:
    """Ordered select. `filters` are PostgREST (column, "op.value") pairs."""
    params = [("select", select)]
    if order:
        params.append(("order", order))
    params.extend(filters or [])
    return _call(f"Loading {table}", client.get, table, params=params) or []


def insert_row(
    client: SupabaseClient, table: str, payload: Dict[str, Any]
) -> Dict[str, Any]:
    rows = _call(
        f"Adding to {table}",
        client.post,
        table,
        json=[payload],
        headers={"Prefer": "return=representation"},
    )
    return rows[0] if rows else {}


def update_row(
    client: SupabaseClient, table: str, row_id: str, payload: Dict[str, Any]
) -> Dict[str, Any]:
    rows = _call(
        f"Updating {table}",
        client.patch,
        table,
        params={"id": f"eq.{row_id}"},
        json=payload,
        headers={"Prefer": "return=representation"},
    )
    return rows[0] if rows else {}


def delete_row(client: SupabaseClient, table: str, row_id: str) -> None:
    _call(f"Deleting from {table}", client.delete, table, params={"id": f"eq.{row_id}"})


# =====================================================================
# Typed access per table
# =====================================================================


def list_customers(client: SupabaseClient) -> List[Customer]:
    return [Customer(**row) for row in select_rows(client, CUSTOMERS_TABLE)]


def list_products(
    client: SupabaseClient, order: str = "created_at.desc"
) -> List[Product]:
    return [Product(**row) for row in select_rows(client, PRODUCTS_TABLE, order=order)]


def list_transactions(
    client: SupabaseClient,
    period: Optional[ReportPeriod] = None,
    customer_id: Optional[str] = None,
) -> List[Transaction]:
    """Newest first, joined with customer name/phone and product name/serial."""
    filters = []
    if customer_id:
        filters.append(("customer_id", f"eq.{customer_id}"))

    if period is not None:
        start_dt, end_dt = period.bounds()
        # Naive bounds are local time; send them with the local offset
        if start_dt:
            filters.append(("created_at", f"gte.{start_dt.astimezone().isoformat()}"))
        if end_dt:
            filters.append(("created_at", f"lte.{end_dt.astimezone().isoformat()}"))

    rows = select_rows(
        client, TRANSACTIONS_TABLE, select=TRANSACTION_SELECT, filters=filters
    )
    return [Transaction(**row) for row in rows]


def insert_customer(client: SupabaseClient, customer: CustomerInput) -> Customer:
    return Customer(**insert_row(client, CUSTOMERS_TABLE, customer.model_dump()))


def update_customer(
    client: SupabaseClient, customer_id: str, customer: CustomerInput
) -> Customer:
    return Customer(
        **update_row(client, CUSTOMERS_TABLE, customer_id, customer.model_dump())
    )


def delete_customer(client: SupabaseClient, customer_id: str) -> None:
    """Transactions of the customer are removed by ON DELETE CASCADE."""
    delete_row(client, CUSTOMERS_TABLE, customer_id)


def insert_product(
    client: SupabaseClient, product: ProductInput, serial_number: str
) -> Product:
    payload = {**product.model_dump(), "serial_number": serial_number}
    return Product(**insert_row(client, PRODUCTS_TABLE, payload))


def update_product(
    client: SupabaseClient, product_id: str, product: ProductInput
) -> Product:
    # serial_number is never part of an update payload
    return Product(**update_row(client, PRODUCTS_TABLE, product_id, product.model_dump()))


def delete_product(client: SupabaseClient, product_id: str) -> None:
    delete_row(client, PRODUCTS_TABLE, product_id)


def insert_transaction(
    client: SupabaseClient, transaction: TransactionInput
) -> Transaction:
    return Transaction(
        **insert_row(client, TRANSACTIONS_TABLE, transaction.to_payload())
    )


def delete_transaction(client: SupabaseClient, transaction_id: str) -> None:
    delete_row(client, TRANSACTIONS_TABLE, transaction_id)
