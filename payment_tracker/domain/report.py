"""Self-contained HTML payment report"""

import html
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from payment_tracker.domain.filtering import filter_payments, summarize
from payment_tracker.domain.models import FilterCriteria, PaymentMethod, PaymentRecord, Report, Summary
from payment_tracker.domain.timezone import format_date_key, format_display_datetime, format_long_date

NO_RECORDS_MESSAGE = "No payments recorded for this period"

_STYLE = """
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; max-width: 1000px;
           margin: 0 auto; padding: 40px 20px; background: #f5f5f5; }
    .report { background: white; padding: 40px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
    .header { text-align: center; border-bottom: 3px solid #2563eb; padding-bottom: 20px; margin-bottom: 30px; }
    .header h1 { margin: 0; color: #1e293b; font-size: 32px; }
    .header p { margin: 10px 0 0 0; color: #64748b; font-size: 16px; }
    .header p.note { font-size: 14px; margin-top: 5px; }
    .summary { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr));
               gap: 15px; margin-bottom: 40px; }
    .summary-card { background: #f8fafc; padding: 20px; border-radius: 8px; border-left: 4px solid #2563eb; }
    .summary-card.cash { border-left-color: #16a34a; }
    .summary-card.check { border-left-color: #f59e0b; }
    .summary-card.booker-cc { border-left-color: #8b5cf6; }
    .summary-card.total { border-left-color: #1e293b; background: #1e293b; color: white; }
    .summary-card h3 { margin: 0 0 10px 0; font-size: 14px; text-transform: uppercase; letter-spacing: 0.5px; }
    .summary-card .amount { font-size: 28px; font-weight: bold; margin: 0; }
    table { width: 100%; border-collapse: collapse; margin-top: 20px; }
    th { padding: 12px; text-align: left; font-weight: 600; color: #475569; border-bottom: 2px solid #e2e8f0;
         font-size: 14px; text-transform: uppercase; letter-spacing: 0.5px; background: #f8fafc; }
    td { padding: 12px; border-bottom: 1px solid #e2e8f0; color: #1e293b; }
    td.service, td.time { font-size: 14px; }
    td.service { color: #64748b; }
    td.amount, th.amount { text-align: right; }
    td.amount { font-weight: 600; }
    .method-badge { display: inline-block; padding: 4px 12px; border-radius: 12px; font-size: 12px; font-weight: 600; }
    .method-cash { background: #dcfce7; color: #166534; }
    .method-zelle { background: #dbeafe; color: #1e40af; }
    .method-check { background: #fef3c7; color: #92400e; }
    .method-booker-cc { background: #ede9fe; color: #5b21b6; }
    .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e2e8f0; text-align: center;
              color: #64748b; font-size: 14px; }
    .no-payments { text-align: center; padding: 60px 20px; color: #64748b; font-size: 18px; }
    @media print { body { background: white; padding: 0; } .report { box-shadow: none; padding: 20px; } }
"""


def _h(s: Any) -> str:
    return html.escape("" if s is None else str(s))


def _slug(method: PaymentMethod) -> str:
    return method.value.lower().replace(" ", "-")


def format_currency(amount: Decimal) -> str:
    """US dollar formatting: $1,234.56 and -$20.00"""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def report_title(date_from: date, date_to: date) -> str:
    if date_from == date_to:
        return format_long_date(date_from)
    return f"{format_long_date(date_from)} - {format_long_date(date_to)}"


def report_filename(date_from: date, date_to: date) -> str:
    if date_from == date_to:
        return f"report-{format_date_key(date_from)}.html"
    return f"report-{format_date_key(date_from)}-to-{format_date_key(date_to)}.html"


def method_filter_label(payment_method: Optional[PaymentMethod]) -> str:
    return f"({payment_method.value} only)" if payment_method else "(All Payment Methods)"


def _summary_cards(summary: Summary) -> str:
    cards = [(_slug(m), f"{m.value} Payments", summary.for_method(m)) for m in PaymentMethod]
    cards.append(("total", "Total Received", summary.total))
    return "\n".join(
        f'      <div class="summary-card {css}">\n'
        f"        <h3>{_h(label)}</h3>\n"
        f'        <p class="amount">{_h(format_currency(amount))}</p>\n'
        f"      </div>"
        for css, label, amount in cards
    )


def _payment_rows(records: Sequence[PaymentRecord]) -> str:
    rows: List[str] = []
    for r in records:
        rows.append(
            "        <tr>\n"
            f"          <td>{_h(r.client_name)}</td>\n"
            f'          <td class="service">{_h(r.service_type or "-")}</td>\n'
            f'          <td><span class="method-badge method-{_slug(r.payment_method)}">'
            f"{_h(r.payment_method.value)}</span></td>\n"
            f'          <td class="amount">{_h(format_currency(r.amount_paid))}</td>\n'
            f'          <td class="time">{_h(format_display_datetime(r.timestamp))}</td>\n'
            "        </tr>"
        )
    return "\n".join(rows)


def _payments_section(records: Sequence[PaymentRecord]) -> str:
    if not records:
        return f'    <div class="no-payments"><p>{_h(NO_RECORDS_MESSAGE)}</p></div>'
    return (
        "    <table>\n"
        "      <thead>\n"
        "        <tr>\n"
        "          <th>Client Name</th>\n"
        "          <th>Service Type</th>\n"
        "          <th>Payment Method</th>\n"
        '          <th class="amount">Amount</th>\n'
        "          <th>Time</th>\n"
        "        </tr>\n"
        "      </thead>\n"
        "      <tbody>\n"
        f"{_payment_rows(records)}\n"
        "      </tbody>\n"
        "    </table>"
    )


def render_report(
    records: Sequence[PaymentRecord],
    summary: Summary,
    date_from: date,
    date_to: date,
    payment_method: Optional[PaymentMethod],
    generated_at: datetime,
    business_name: str = "Payment Tracker",
) -> str:
    """
    Render a complete HTML document for the given subset and summary.

    The output inlines its stylesheet and references no external resources,
    so it can be saved and opened offline. An empty subset renders a
    "no payments" block instead of an empty table.
    """
    title = report_title(date_from, date_to)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Payment Report - {_h(title)}</title>
  <style>{_STYLE}  </style>
</head>
<body>
  <div class="report">
    <div class="header">
      <h1>{_h(business_name)}</h1>
      <p>Payment Report</p>
      <p><strong>{_h(title)}</strong></p>
      <p class="note">{_h(method_filter_label(payment_method))}</p>
      <p class="note">All times displayed in Eastern Time (ET)</p>
    </div>

    <div class="summary">
{_summary_cards(summary)}
    </div>

{_payments_section(records)}

    <div class="footer">
      <p>Report generated on {_h(format_display_datetime(generated_at))} ET</p>
      <p>{summary.count} payment(s) recorded</p>
    </div>
  </div>
</body>
</html>
"""


def build_report(
    records: Iterable[PaymentRecord],
    date_from: date,
    date_to: date,
    payment_method: Optional[PaymentMethod],
    generated_at: datetime,
    business_name: str = "Payment Tracker",
) -> Report:
    """
    Filter, summarize and render in one step.

    Records may be the full record set; the same date and method semantics as
    the dashboard are applied here so both totals agree.
    """
    criteria = FilterCriteria(date_from=date_from, date_to=date_to, payment_method=payment_method)
    visible = filter_payments(records, criteria)
    summary = summarize(visible)
    document = render_report(visible, summary, date_from, date_to, payment_method, generated_at, business_name)
    return Report(filename=report_filename(date_from, date_to), html=document, summary=summary)
