from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple
from tzscraps.logic.aggregation import UNKNOWN_NAME, aggregate
from tzscraps.logic.formatting import (
    format_currency,
    format_date,
    format_datetime,
    format_decimal,
    format_quantity,
)
from tzscraps.models.schemas import (
    AggregationResult,
    Customer,
    Product,
    ReportPeriod,
    Transaction,
)

ACTIVE_STATUS = "Active"


class ReportKind(Enum):
    """The five exportable reports, each with its own column schema."""

    CUSTOMER_SPENDING = (
        1,
        "Customer Spending",
        ("Customer", "Phone", "Transaction Count", "Total Spent"),
        ("Customer", "Phone", "Transaction Count", "Total Spent"),
        "No customer spending data available",
    )
    PRODUCT_PURCHASES = (
        2,
        "Product Purchases",
        ("Product", "Serial", "Total Quantity", "Total Amount"),
        ("Product", "Serial", "Total Quantity", "Total Amount"),
        "No product purchase data available",
    )
    RECENT_TRANSACTIONS = (
        3,
        "Recent Transactions",
        ("Date", "Customer", "Product", "Quantity", "Total Amount"),
        # Spreadsheet keeps quantity numeric, with unit and price in their own columns
        ("Date", "Customer", "Product", "Quantity", "Unit", "Price", "Total Amount"),
        "No transaction data available",
    )
    CUSTOMER_LIST = (
        4,
        "Customer List",
        ("Name", "Phone", "Joined Date", "Status"),
        ("Name", "Phone", "Joined Date", "Status"),
        "No customer data available",
    )
    PRODUCT_LIST = (
        5,
        "Product List",
        ("Name", "Serial", "Description", "Added Date"),
        ("Name", "Serial", "Description", "Added Date"),
        "No product data available",
    )

    def __init__(self, number, title, columns, raw_columns, empty_message):
        self.number = number
        self.title = title
        self.columns = columns
        self.raw_columns = raw_columns
        self.empty_message = empty_message

    @property
    def heading(self) -> str:
        return f"{self.title} Report"

    @classmethod
    def from_number(cls, number: int) -> "ReportKind":
        for kind in cls:
            if kind.number == number:
                return kind
        raise ValueError(f"Unknown report kind number: {number}")

    @classmethod
    def parse(cls, text: str) -> "ReportKind":
        """Accepts '3', 'recent_transactions' or 'Recent Transactions'."""
        text = text.strip()
        if text.isdigit():
            return cls.from_number(int(text))
        key = text.upper().replace(" ", "_").replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown report kind: {text}") from None


@dataclass
class ReportData:
    """Everything a report needs, fetched and aggregated once per refresh."""

    customers: List[Customer]
    products: List[Product]
    transactions: List[Transaction]
    aggregation: AggregationResult
    period_label: str = "All Time"
    generated_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def build(
        cls,
        customers: List[Customer],
        products: List[Product],
        transactions: List[Transaction],
        period: Optional[ReportPeriod] = None,
        generated_at: Optional[datetime] = None,
    ) -> "ReportData":
        return cls(
            customers=list(customers),
            products=list(products),
            transactions=list(transactions),
            aggregation=aggregate(transactions),
            period_label=(period or ReportPeriod()).label(),
            generated_at=generated_at or datetime.now(),
        )

    def summary_metrics(self) -> List[Tuple[str, Any]]:
        return [
            ("Total Customers", len(self.customers)),
            ("Total Products", len(self.products)),
            ("Total Transactions", len(self.transactions)),
            ("Total Amount", self.aggregation.total_amount),
            ("Total Quantity", self.aggregation.total_quantity),
        ]

    def formatted_summary(self) -> List[Tuple[str, str]]:
        formatted = []
        for label, value in self.summary_metrics():
            if label == "Total Amount":
                formatted.append((label, format_currency(value)))
            elif label == "Total Quantity":
                formatted.append((label, format_decimal(value)))
            else:
                formatted.append((label, str(value)))
        return formatted


def source_items(kind: ReportKind, data: ReportData) -> list:
    if kind == ReportKind.CUSTOMER_SPENDING:
        return data.aggregation.customer_spending
    if kind == ReportKind.PRODUCT_PURCHASES:
        return data.aggregation.product_purchases
    if kind == ReportKind.RECENT_TRANSACTIONS:
        return data.transactions
    if kind == ReportKind.CUSTOMER_LIST:
        return data.customers
    return data.products


def _limited(kind: ReportKind, data: ReportData, limit: Optional[int]) -> list:
    items = source_items(kind, data)
    # Only the transaction list is capped; it is newest first, so older rows drop
    if kind == ReportKind.RECENT_TRANSACTIONS and limit is not None:
        return items[:limit]
    return items


def _ref_name(ref) -> str:
    return ref.name if ref and ref.name else UNKNOWN_NAME


def raw_rows(
    kind: ReportKind, data: ReportData, limit: Optional[int] = None
) -> List[List[Any]]:
    """Unformatted cell values in `kind.raw_columns` order."""
    items = _limited(kind, data, limit)

    if kind == ReportKind.CUSTOMER_SPENDING:
        return [
            [c.customer_name, c.phone or "", c.transaction_count, c.total_spent]
            for c in items
        ]
    if kind == ReportKind.PRODUCT_PURCHASES:
        return [
            [p.product_name, p.serial or "", p.total_quantity, p.total_amount]
            for p in items
        ]
    if kind == ReportKind.RECENT_TRANSACTIONS:
        return [
            [
                t.created_at,
                _ref_name(t.customer),
                _ref_name(t.product),
                t.quantity,
                t.unit or "",
                t.price,
                t.total_amount,
            ]
            for t in items
        ]
    if kind == ReportKind.CUSTOMER_LIST:
        return [[c.name, c.phone or "", c.created_at, ACTIVE_STATUS] for c in items]
    return [
        [p.name, p.serial_number or "", p.description or "", p.created_at]
        for p in items
    ]


def display_rows(
    kind: ReportKind, data: ReportData, limit: Optional[int] = None
) -> List[List[str]]:
    """Rows in `kind.columns` order, formatted for reading (2 decimals, currency)."""
    items = _limited(kind, data, limit)

    if kind == ReportKind.CUSTOMER_SPENDING:
        return [
            [
                c.customer_name,
                c.phone or "No phone",
                str(c.transaction_count),
                format_currency(c.total_spent),
            ]
            for c in items
        ]
    if kind == ReportKind.PRODUCT_PURCHASES:
        return [
            [
                p.product_name,
                p.serial or "",
                format_decimal(p.total_quantity),
                format_currency(p.total_amount),
            ]
            for p in items
        ]
    if kind == ReportKind.RECENT_TRANSACTIONS:
        return [
            [
                format_datetime(t.created_at),
                _ref_name(t.customer),
                _ref_name(t.product),
                format_quantity(t.quantity, t.unit),
                format_currency(t.total_amount),
            ]
            for t in items
        ]
    if kind == ReportKind.CUSTOMER_LIST:
        return [
            [c.name, c.phone or "No phone", format_date(c.created_at), ACTIVE_STATUS]
            for c in items
        ]
    return [
        [
            p.name,
            p.serial_number or "",
            p.description or "No description",
            format_date(p.created_at),
        ]
        for p in items
    ]
