import os
import sys

# Adds the project root to PYTHONPATH so 'tzscraps' can be imported
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tzscraps.db.database import StorageError
from tzscraps.logic.formatting import format_currency, format_datetime
from tzscraps.pipelines.report_loader import fetch_report_data
from tzscraps.supabase.client import SupabaseClient


def print_recent_transactions(data, limit=5):
    """Latest transactions with their customer and product."""
    print("-" * 80)
    print(
        f"{'DATE':<17} | {'CUSTOMER':<18} | {'PRODUCT':<18} | {'QTY':<8} | {'AMOUNT'}"
    )
    print("-" * 80)

    if not data.transactions:
        print("No transactions found.")

    for t in data.transactions[:limit]:
        customer = (t.customer.name if t.customer else None) or "Unknown"
        product = (t.product.name if t.product else None) or "Unknown"
        quantity = f"{t.quantity or 0:g} {t.unit or ''}"
        print(
            f"{format_datetime(t.created_at):<17} | {customer[:18]:<18} | "
            f"{product[:18]:<18} | {quantity:<8} | {format_currency(t.total_amount)}"
        )

    print("-" * 80)


def db_stats(data):
    """Quick volume summary of the backend."""
    print("Backend summary:")
    print(f"   Customers:    {len(data.customers)}")
    print(f"   Products:     {len(data.products)}")
    print(f"   Transactions: {len(data.transactions)}")
    print(f"   Total amount: {format_currency(data.aggregation.total_amount)}\n")


if __name__ == "__main__":
    print("\n--- TZ SCRAPS QUICK VIEWER ---")
    try:
        report_data = fetch_report_data(SupabaseClient())
    except StorageError as e:
        print(f"Failed to fetch data. Error: {e}")
        sys.exit(1)

    db_stats(report_data)

    print("Latest 5 transactions (newest first):")
    print_recent_transactions(report_data, 5)
