import itertools
import pytest
from datetime import datetime, timedelta, timezone
from tzscraps.models.schemas import Customer, Product, Transaction
from tzscraps.reports.kinds import ReportData

BASE_TIME = datetime(2024, 5, 20, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_transaction():
    """Factory for joined transaction rows, newest first when created in order."""
    counter = itertools.count(1)

    def _make(
        customer_id="C1",
        customer_name="Alice",
        phone="08012345678",
        product_id="P1",
        product_name="Copper",
        serial="TZ-1-abc",
        quantity=1.0,
        unit="kg",
        price=None,
        total_amount=100.0,
        created_at=None,
    ):
        n = next(counter)
        return Transaction(
            id=f"T{n}",
            customer_id=customer_id,
            product_id=product_id,
            quantity=quantity,
            unit=unit,
            price=price if price is not None else total_amount,
            total_amount=total_amount,
            created_at=created_at or BASE_TIME - timedelta(minutes=n),
            customers={"name": customer_name, "phone": phone} if customer_id else None,
            products={"name": product_name, "serial_number": serial}
            if product_id
            else None,
        )

    return _make


@pytest.fixture
def customers():
    return [
        Customer(id="C1", name="Alice", phone="08012345678", created_at=BASE_TIME),
        Customer(id="C2", name="Bob", phone=None, created_at=BASE_TIME),
    ]


@pytest.fixture
def products():
    return [
        Product(
            id="P1",
            name="Copper",
            serial_number="TZ-1-abc",
            description="Clean wire",
            created_at=BASE_TIME,
        ),
        Product(id="P2", name="Cans", serial_number="TZ-2-def", created_at=BASE_TIME),
    ]


@pytest.fixture
def report_data(make_transaction, customers, products):
    transactions = [
        make_transaction(customer_id="C1", product_id="P1", quantity=2, total_amount=100.0),
        make_transaction(
            customer_id="C1",
            product_id="P2",
            product_name="Cans",
            serial="TZ-2-def",
            quantity=1.5,
            total_amount=50.0,
        ),
        make_transaction(
            customer_id="C2",
            customer_name="Bob",
            phone=None,
            product_id="P2",
            product_name="Cans",
            serial="TZ-2-def",
            quantity=3,
            total_amount=30.0,
        ),
    ]
    return ReportData.build(
        customers,
        products,
        transactions,
        generated_at=datetime(2024, 5, 21, 9, 15),
    )


@pytest.fixture
def empty_report_data():
    return ReportData.build([], [], [], generated_at=datetime(2024, 5, 21, 9, 15))
