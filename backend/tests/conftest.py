from __future__ import annotations

import pytest

from studio_dashboard.schemas.dashboard import StudioExports


MEMBERSHIP_HEADERS = ["Purchase ID", "Customer Email", "Membership Name", "Bought Date/Time (GMT)", "Paid Amount"]
INTRO_SALES_HEADERS = ["Purchase ID", "Customer Email", "Intro Offer Name", "Purchase date", "Paid Amount"]
LEADS_HEADERS = ["Customer ID", "Email", "Join date", "First purchase"]
CONVERSIONS_HEADERS = ["Purchase ID", "Customer Email", "Intro Offer Name", "Purchase date", "Converted to"]
PAYMENTS_HEADERS = ["Category", "Item", "Date", "Sale value", "Refunded", "Payment status", "Customer email"]


def _quote(value: object) -> str:
    return f'"{value}"'


@pytest.fixture
def make_csv():
    def _make(headers: list[str], rows: list[list[object]]) -> str:
        lines = [",".join(_quote(header) for header in headers)]
        lines.extend(",".join(_quote(value) for value in row) for row in rows)
        return "\n".join(lines)

    return _make


@pytest.fixture
def september_exports(make_csv) -> StudioExports:
    """Small but complete set of exports for September 2025."""
    membership_rows = [
        [5000 + i, f"member{i}@example.com", "4-Class Monthly Membership", f"2025-09-{i + 1:02d}T10:00:00.000Z", "99.00"]
        for i in range(28)
    ]
    renewal_rows = [
        [6000 + i, f"renewal{i}@example.com", "Unlimited Monthly Membership", "2025-08-05T10:00:00.000Z", "315.00"]
        for i in range(5)
    ]
    renewal_rows += [
        [6100 + i, f"renewal{i}@example.com", "Unlimited Monthly Membership", "2025-09-05T10:00:00.000Z", "315.00"]
        for i in range(3)
    ]
    intro_rows = [
        [7000 + i, f"intro{i}@example.com", "New Flyer 3 Class Pack", f"2025-0{7 + i % 3}-10T09:00:00.000Z", "59.00"]
        for i in range(12)
    ]
    lead_rows = [
        [8000 + i, f"lead{i}@example.com", f"2025-09-{i % 28 + 1:02d}T08:00:00.000Z", "New Flyer 3 Class Pack" if i % 2 else ""]
        for i in range(60)
    ]
    conversion_rows = [
        [7000, "intro0@example.com", "New Flyer 3 Class Pack", "2025-07-10T09:00:00.000Z", "4-Class Monthly Membership"],
        [7001, "intro1@example.com", "New Flyer 3 Class Pack", "2025-08-10T09:00:00.000Z", "10 Class Package"],
        [7002, "intro2@example.com", "New Flyer 3 Class Pack", "2025-09-10T09:00:00.000Z", "Unlimited Membership"],
    ]
    payment_rows = [
        ["Subscription", "4-Class Monthly Membership", "2025-09-03, 6:49 PM", "99.00", "0.00", "Succeeded", "a@example.com"],
        ["Pack", "10 Class Package", "2025-09-04, 9:15 AM", "280.00", "0.00", "Succeeded", "b@example.com"],
        ["Pack", "New Flyer 3 Class Pack", "2025-09-05, 11:00 AM", "59.00", "0.00", "Succeeded", "c@example.com"],
        ["Class", "Pole Level 1", "2025-09-06, 7:30 PM", "35.00", "5.00", "Succeeded", "d@example.com"],
        ["Product", "Grip Aid", "2025-09-07, 12:00 PM", "15.00", "0.00", "Failed", "e@example.com"],
        ["Subscription", "4-Class Monthly Membership", "2025-08-03, 6:49 PM", "99.00", "0.00", "Succeeded", "a@example.com"],
    ]

    return StudioExports(
        membership_sales=make_csv(MEMBERSHIP_HEADERS, membership_rows),
        membership_sales_with_renewals=make_csv(MEMBERSHIP_HEADERS, membership_rows + renewal_rows),
        intro_sales=make_csv(INTRO_SALES_HEADERS, intro_rows),
        leads_customers=make_csv(LEADS_HEADERS, lead_rows),
        intro_conversions=make_csv(CONVERSIONS_HEADERS, conversion_rows),
        payments=make_csv(PAYMENTS_HEADERS, payment_rows),
    )


@pytest.fixture
def export_headers() -> dict[str, list[str]]:
    return {
        "membership": MEMBERSHIP_HEADERS,
        "intro_sales": INTRO_SALES_HEADERS,
        "leads": LEADS_HEADERS,
        "conversions": CONVERSIONS_HEADERS,
        "payments": PAYMENTS_HEADERS,
    }
