from typing import Dict, Iterable, Optional
from tzscraps.models.schemas import (
    AggregationResult,
    CustomerSpending,
    ProductPurchase,
    Transaction,
)

UNKNOWN_NAME = "Unknown"


def _amount(value: Optional[float]) -> float:
    return value if value is not None else 0.0


def aggregate(transactions: Iterable[Transaction]) -> AggregationResult:
    """
    Turns a flat transaction list into totals and grouped breakdowns.
    - total_amount / total_quantity: plain sums, missing values count as 0.
    - customer_spending: one entry per customer_id, name/phone taken from the
      first transaction of that customer, sorted by total_spent (desc).
    - product_purchases: one entry per product_id, sorted by total_amount (desc).
    Ties keep input order. The input is never mutated.
    """
    total_amount = 0.0
    total_quantity = 0.0
    by_customer: Dict[str, CustomerSpending] = {}
    by_product: Dict[str, ProductPurchase] = {}

    for t in transactions:
        amount = _amount(t.total_amount)
        quantity = _amount(t.quantity)
        total_amount += amount
        total_quantity += quantity

        if t.customer_id:
            if t.customer_id not in by_customer:
                ref = t.customer
                by_customer[t.customer_id] = CustomerSpending(
                    customer_id=t.customer_id,
                    customer_name=(ref.name if ref and ref.name else UNKNOWN_NAME),
                    phone=ref.phone if ref else None,
                )
            group = by_customer[t.customer_id]
            group.total_spent += amount
            group.transaction_count += 1

        if t.product_id:
            if t.product_id not in by_product:
                ref = t.product
                by_product[t.product_id] = ProductPurchase(
                    product_id=t.product_id,
                    product_name=(ref.name if ref and ref.name else UNKNOWN_NAME),
                    serial=ref.serial_number if ref else None,
                )
            group = by_product[t.product_id]
            group.total_quantity += quantity
            group.total_amount += amount

    # sorted() is stable, also with reverse=True
    return AggregationResult(
        total_amount=total_amount,
        total_quantity=total_quantity,
        customer_spending=sorted(
            by_customer.values(), key=lambda c: c.total_spent, reverse=True
        ),
        product_purchases=sorted(
            by_product.values(), key=lambda p: p.total_amount, reverse=True
        ),
    )
