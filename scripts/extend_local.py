#!/usr/bin/env python3
"""
Local extension walkthrough (no HTTP server).

Usage:
  python3 scripts/extend_local.py --booking 1 --days 2 --method agency

Runs one extend-booking flow through the same wiring the API uses: against
the in-memory mock API when PORTAL_API_URL is unset in dev, or against the
configured portal API otherwise. Prints every step and the final summary.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

load_dotenv()

from portal.application.use_cases.extend_booking import ExtensionWorkflow  # noqa: E402
from portal.application.utils.booking_state import evaluate  # noqa: E402
from portal.domain.entities.extension_session import ExtensionSession, ExtensionStep, PaymentMethod  # noqa: E402
from portal.wiring.dependencies import get_portal_api  # noqa: E402


def _print_step(session: ExtensionSession) -> None:
    line = f"  step={session.step.value:<12} submitting={session.submitting}"
    if session.error:
        line += f" error={session.error!r}"
    print(line)


async def run(booking_id: str, days: int, method: PaymentMethod) -> int:
    api = get_portal_api()
    booking = await api.get_booking(booking_id)
    permissions = evaluate(booking)
    print(f"Booking {booking.reference}: {permissions.effective_status}")
    if not permissions.can_extend:
        print("Booking cannot be extended.")
        return 1

    workflow = ExtensionWorkflow(api, booking, on_change=_print_step)
    end_date, end_time = workflow.current_end
    workflow.edit(end_date + timedelta(days=days), end_time)
    print(f"Estimate for {workflow.additional_days} extra day(s): {workflow.estimated_price}€")

    session = await workflow.check_availability()
    if session.error or session.step != ExtensionStep.AVAILABLE:
        print("Extension not available.")
        return 1
    print(f"Backend price: {workflow.amount_due}€, options: {[m.value for m in workflow.payment_options]}")

    if method not in workflow.payment_options:
        method = PaymentMethod.CARD_NOW
    workflow.select_payment_method(method)
    session = await workflow.confirm()
    if session.error:
        print(f"Confirmation failed: {session.error}")
        return 1

    summary = workflow.summary()
    print("-" * 60)
    print(f"Extension #{summary.extension_number}: until {summary.new_end_date} {summary.new_end_time:%H:%M}")
    print(f"Total days: {summary.total_days}  amount: {summary.total_amount}€  paid: {summary.paid}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Walk through a booking extension locally.")
    parser.add_argument("--booking", default="1")
    parser.add_argument("--days", type=int, default=1)
    parser.add_argument("--method", choices=[m.value for m in PaymentMethod], default=PaymentMethod.CARD_NOW.value)
    args = parser.parse_args()
    return asyncio.run(run(args.booking, args.days, PaymentMethod(args.method)))


if __name__ == "__main__":
    raise SystemExit(main())
