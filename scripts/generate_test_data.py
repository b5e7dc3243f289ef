import os
import random
import sys

sys.path.append(os.getcwd())

from tzscraps.config import Config
from tzscraps.logic.catalog import CustomerDirectory, ProductCatalog
from tzscraps.logic.sheet import TransactionSheet
from tzscraps.models.schemas import Unit
from tzscraps.supabase.client import SupabaseClient

CUSTOMERS = [
    {"name": "Adebayo Scrap Yard (Test)", "phone": "+234 801 234 5678"},
    {"name": "Chioma Metals (Test)", "phone": "0803-555-0101"},
    {"name": "Walk-in Seller (No Phone)", "phone": None},
]

PRODUCTS = [
    {"name": "Copper Wire", "description": "Stripped, clean"},
    {"name": "Aluminium Cans", "description": "Crushed"},
    {"name": "PET Bottles", "description": ""},
    {"name": "Car Battery", "description": "Lead acid"},
]


def generate_sample_data(transactions_per_customer: int = 3):
    """Seeds the configured backend with sample customers, products and sales."""
    if Config.is_prd():
        print("Refusing to seed sample data in the PRD environment.")
        return

    client = SupabaseClient()
    customers = CustomerDirectory(client)
    products = ProductCatalog(client)

    created_customers = [customers.save(**c) for c in CUSTOMERS]
    created_products = [products.save(**p) for p in PRODUCTS]
    created_customers = [c for c in created_customers if c]
    created_products = [p for p in created_products if p]
    if not created_products:
        print("No products could be created; skipping transactions.")
        return

    units = list(Unit)
    count = 0
    for customer in created_customers:
        sheet = TransactionSheet(customer, client)
        for _ in range(transactions_per_customer):
            product = random.choice(created_products)
            saved = sheet.add_transaction(
                product.id,
                quantity=round(random.uniform(0.5, 50), 2),
                price=round(random.uniform(50, 2500), 2),
                unit=random.choice(units),
            )
            if saved:
                count += 1

    print(
        f"Sample data generated: {len(created_customers)} customers, "
        f"{len(created_products)} products, {count} transactions."
    )


if __name__ == "__main__":
    generate_sample_data()
