from datetime import datetime
from typing import List, Optional
from jinja2 import Environment
from tzscraps.config import Config
from tzscraps.logic.formatting import (
    LONG_DATETIME_FORMAT,
    format_currency,
    format_datetime,
    format_quantity,
)
from tzscraps.models.schemas import Customer, Transaction
from tzscraps.reports.kinds import ReportData, ReportKind, display_rows

# HTML Templates
REPORT_TEMPLATE = """<html>
  <head>
    <title>{{ business_name }} Report</title>
    <style>
      body { font-family: Arial, sans-serif; padding: 20px; }
      .header { text-align: center; margin-bottom: 30px; }
      .summary-cards { display: flex; flex-wrap: wrap; gap: 20px; margin-bottom: 30px; }
      .card { flex: 1; min-width: 200px; border: 1px solid #ddd; padding: 20px; border-radius: 8px; }
      table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
      th, td { border: 1px solid #ddd; padding: 10px; text-align: left; }
      th { background-color: #f5f5f5; font-weight: bold; }
    </style>
  </head>
  <body>
    <div class="header">
      <h1>{{ business_name }} - Business Report</h1>
      <p>Report Period: {{ period_label }}</p>
      <p>Generated: {{ generated }}</p>
    </div>

    <div class="summary-cards">
    {%- for label, value in cards %}
      <div class="card">
        <h3>{{ label }}</h3>
        <p>{{ value }}</p>
      </div>
    {%- endfor %}
    </div>

    {% if rows -%}
    <h2>{{ heading }}</h2>
    <table>
      <thead>
        <tr>{% for column in columns %}<th>{{ column }}</th>{% endfor %}</tr>
      </thead>
      <tbody>
      {%- for row in rows %}
        <tr>{% for cell in row %}<td>{{ cell }}</td>{% endfor %}</tr>
      {%- endfor %}
      </tbody>
    </table>
    {%- else -%}
    <h2 class="no-data">{{ empty_message }}</h2>
    {%- endif %}
  </body>
</html>
"""

RECEIPT_TEMPLATE = """<html>
  <head>
    <title>{{ business_name }} Receipt - {{ customer.name }}</title>
    <style>
      body { font-family: Arial, sans-serif; padding: 20px; max-width: 800px; margin: 0 auto; }
      .header { text-align: center; margin-bottom: 30px; padding-bottom: 20px; border-bottom: 2px solid #333; }
      .customer-info { margin-bottom: 20px; display: flex; justify-content: space-between; }
      table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
      th, td { border: 1px solid #ddd; padding: 10px; text-align: left; }
      th { background-color: #f5f5f5; font-weight: bold; }
      .total { text-align: right; font-size: 20px; font-weight: bold; margin-top: 30px; padding-top: 20px; border-top: 2px solid #333; }
      .footer { text-align: center; margin-top: 40px; color: #666; font-size: 12px; padding-top: 20px; border-top: 1px solid #ddd; }
      .amount { font-weight: bold; color: #1976d2; }
    </style>
  </head>
  <body>
    <div class="header">
      <h1>{{ business_name }}</h1>
      <p>{{ tagline }}</p>
      <p>Contact: {{ contact }}</p>
    </div>

    <div class="customer-info">
      <div>
        <h3>Customer Details</h3>
        <p><strong>Name:</strong> {{ customer.name }}</p>
        <p><strong>Phone:</strong> {{ customer.phone or "Not provided" }}</p>
      </div>
      <div style="text-align: right;">
        <h3>Receipt Details</h3>
        <p><strong>Date:</strong> {{ printed_date }}</p>
        <p><strong>Time:</strong> {{ printed_time }}</p>
        <p><strong>Receipt No:</strong> {{ receipt_no }}</p>
      </div>
    </div>

    <table>
      <thead>
        <tr><th>Product</th><th>Serial No</th><th>Price</th><th>Quantity</th><th>Amount</th></tr>
      </thead>
      <tbody>
      {%- for line in lines %}
        <tr>
          <td>{{ line.product }}</td>
          <td>{{ line.serial }}</td>
          <td>{{ line.price }}</td>
          <td>{{ line.quantity }}</td>
          <td class="amount">{{ line.amount }}</td>
        </tr>
      {%- endfor %}
      </tbody>
    </table>

    <div class="total">Total Amount: {{ total }}</div>

    <div class="footer">
      <p>Thank you for choosing {{ business_name }}!</p>
      <p>This is a computer generated receipt. No signature required.</p>
    </div>
  </body>
</html>
"""

_env = Environment(autoescape=True)


def render_report_html(
    kind: ReportKind, data: ReportData, limit: Optional[int] = None
) -> str:
    """Print document for the active report kind. Always renders, even with no rows."""
    if limit is None:
        limit = Config.PRINT_ROW_LIMIT

    # Quantity is not one of the print cards
    cards = [
        (label, value)
        for label, value in data.formatted_summary()
        if label != "Total Quantity"
    ]

    return _env.from_string(REPORT_TEMPLATE).render(
        business_name=Config.BUSINESS_NAME,
        period_label=data.period_label,
        generated=format_datetime(data.generated_at, LONG_DATETIME_FORMAT),
        cards=cards,
        heading=kind.heading,
        columns=kind.columns,
        rows=display_rows(kind, data, limit=limit),
        empty_message=kind.empty_message,
    )


def receipt_number(printed_at: datetime) -> str:
    """TZ- followed by the last 8 digits of the epoch in milliseconds."""
    return f"TZ-{str(int(printed_at.timestamp() * 1000))[-8:]}"


def render_receipt_html(
    customer: Customer,
    transactions: List[Transaction],
    printed_at: Optional[datetime] = None,
) -> str:
    printed_at = printed_at or datetime.now()
    lines = []
    total = 0.0
    for t in transactions:
        total += t.total_amount or 0.0
        unit = t.unit or "unit"
        lines.append(
            {
                "product": (t.product.name if t.product and t.product.name else "N/A"),
                "serial": (
                    t.product.serial_number
                    if t.product and t.product.serial_number
                    else "N/A"
                ),
                "price": f"{format_currency(t.price)}/{unit}",
                "quantity": format_quantity(t.quantity, unit),
                "amount": format_currency(t.total_amount),
            }
        )

    return _env.from_string(RECEIPT_TEMPLATE).render(
        business_name=Config.BUSINESS_NAME,
        tagline=Config.BUSINESS_TAGLINE,
        contact=Config.BUSINESS_CONTACT,
        customer=customer,
        printed_date=printed_at.strftime("%d/%m/%Y"),
        printed_time=printed_at.strftime("%I:%M:%S %p"),
        receipt_no=receipt_number(printed_at),
        lines=lines,
        total=format_currency(total),
    )
