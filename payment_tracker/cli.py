"""
Payment Tracker CLI

Command-line dashboard over the payment store API. All dates are Eastern Time.

Usage:
    payment-tracker list [--search TEXT] [--from DATE] [--to DATE] [--method M] [--all-time]
    payment-tracker add NAME METHOD AMOUNT "YYYY-MM-DDTHH:MM" [--service TYPE]
    payment-tracker edit ID [--name NAME] [--method M] [--amount A] [--time T] [--service TYPE]
    payment-tracker delete ID --yes
    payment-tracker report [--from DATE] [--to DATE] [--method M] [--out DIR]
"""

import argparse
import asyncio
import sys
import uuid
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from payment_tracker.dashboard.session import (
    AddPayment,
    DashboardSession,
    DeletePayment,
    EditPayment,
    GenerateReport,
    PaymentForm,
    Reload,
    SetDateFrom,
    SetDateTo,
    SetPaymentMethod,
    SetSearch,
    ShowAllTime,
)
from payment_tracker.domain.models import PaymentMethod
from payment_tracker.domain.report import format_currency
from payment_tracker.domain.timezone import format_display_datetime, parse_date_key
from payment_tracker.infrastructure.clients.store import PaymentStoreClient


def _method(value: str) -> Optional[PaymentMethod]:
    if not value or value.lower() == "all":
        return None
    try:
        return PaymentMethod(value)
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise argparse.ArgumentTypeError(f"method must be one of: {allowed}")


def _date(value: str):
    try:
        return parse_date_key(value)
    except ValueError:
        raise argparse.ArgumentTypeError("dates must be YYYY-MM-DD")


def _print_notifications(session: DashboardSession) -> None:
    for note in session.notifications:
        print(f"❌ {note.message}", file=sys.stderr)


async def _apply_filters(session: DashboardSession, args) -> None:
    if args.all_time:
        await session.dispatch(ShowAllTime())
    if args.date_from:
        await session.dispatch(SetDateFrom(args.date_from))
    if args.date_to:
        await session.dispatch(SetDateTo(args.date_to))
    if args.method:
        await session.dispatch(SetPaymentMethod(args.method))
    if getattr(args, "search", None):
        await session.dispatch(SetSearch(args.search))


async def cmd_list(session: DashboardSession, args) -> int:
    """Filtered payments plus totals."""
    if not await session.dispatch(Reload()):
        return 1
    await _apply_filters(session, args)

    view = session.view
    print(f"{session.range_label()} - showing {len(view.records)} of {len(session.records)} payments")
    if not view.records:
        print("No payments found")
    for r in view.records:
        print(
            f"{r.id}  {format_display_datetime(r.timestamp):<28} {r.client_name:<24} "
            f"{r.payment_method.value:<10} {format_currency(r.amount_paid):>12}  {r.service_type or '-'}"
        )

    s = view.summary
    print()
    print(f"Cash {format_currency(s.cash)} | Zelle {format_currency(s.zelle)} | "
          f"Check {format_currency(s.check)} | Booker CC {format_currency(s.booker_cc)}")
    print(f"Total {format_currency(s.total)}")
    return 0


async def cmd_add(session: DashboardSession, args) -> int:
    form = PaymentForm(
        client_name=args.name,
        payment_method=args.method_name,
        amount_paid=args.amount,
        timestamp=args.time,
        service_type=args.service or "",
    )
    if not await session.dispatch(AddPayment(form)):
        return 1
    print(f"✓ Added payment for {args.name} ({len(session.records)} payments on file)")
    return 0


async def cmd_edit(session: DashboardSession, args) -> int:
    if not await session.dispatch(Reload()):
        return 1
    record = session.find(args.id)
    if record is None:
        print(f"❌ Payment {args.id} not found", file=sys.stderr)
        return 1

    form = PaymentForm.from_record(record)
    changes = {
        "client_name": args.name,
        "payment_method": args.method_name,
        "amount_paid": args.amount,
        "timestamp": args.time,
        "service_type": args.service,
    }
    form = replace(form, **{k: v for k, v in changes.items() if v is not None})
    if not await session.dispatch(EditPayment(args.id, form)):
        return 1
    print(f"✓ Updated payment {args.id}")
    return 0


async def cmd_delete(session: DashboardSession, args) -> int:
    if not args.yes:
        print("Refusing to delete without --yes", file=sys.stderr)
        return 1
    if not await session.dispatch(DeletePayment(args.id, confirmed=True)):
        return 1
    print(f"✓ Deleted payment {args.id}")
    return 0


async def cmd_report(session: DashboardSession, args) -> int:
    await _apply_filters(session, args)
    if not await session.dispatch(GenerateReport()):
        return 1
    report = session.last_report
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    out = out_dir / report.filename
    out.write_text(report.html, encoding="utf-8")
    print(f"✓ Report saved to {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="payment-tracker", description="Payment Tracker CLI")
    parser.add_argument("--api-url", help="Payment store base URL")
    parser.add_argument("--token", help="Bearer token")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_filter_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--from", dest="date_from", type=_date, help="First day (YYYY-MM-DD, ET)")
        p.add_argument("--to", dest="date_to", type=_date, help="Last day (YYYY-MM-DD, ET)")
        p.add_argument("--method", type=_method, help="Payment method or 'all'")
        p.add_argument("--all-time", action="store_true", help="Drop the default today-only range")

    p = sub.add_parser("list", help="List payments and totals")
    add_filter_args(p)
    p.add_argument("--search", help="Client name contains")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("add", help="Record a payment")
    p.add_argument("name")
    p.add_argument("method_name", metavar="method")
    p.add_argument("amount")
    p.add_argument("time", help="YYYY-MM-DDTHH:MM in Eastern Time")
    p.add_argument("--service", help="Service type")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("edit", help="Edit a payment")
    p.add_argument("id", type=uuid.UUID)
    p.add_argument("--name")
    p.add_argument("--method", dest="method_name")
    p.add_argument("--amount")
    p.add_argument("--time")
    p.add_argument("--service")
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("delete", help="Delete a payment")
    p.add_argument("id", type=uuid.UUID)
    p.add_argument("--yes", action="store_true", help="Confirm deletion")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("report", help="Download an HTML report")
    add_filter_args(p)
    p.add_argument("--out", default=".", help="Directory to save into")
    p.set_defaults(func=cmd_report)

    return parser


async def _run(args) -> int:
    session = DashboardSession(PaymentStoreClient(base_url=args.api_url, token=args.token))
    code = await args.func(session, args)
    _print_notifications(session)
    return code


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
