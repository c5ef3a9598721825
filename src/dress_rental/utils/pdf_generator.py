"""PDF generation utilities for payment receipts."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from dress_rental.config import CURRENCY_SYMBOL, SHOP_INFO, ShopInfo
from dress_rental.domain.models import Customer, Payment, Rental, RentalItem


def format_currency(value: float) -> str:
    return f"{CURRENCY_SYMBOL} {value:,.2f}"


def format_date(value: str | None) -> str:
    if not value:
        return "-"
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").strftime("%d/%m/%Y")
    except ValueError:
        return value


def _build_rental_rows(rental: Rental) -> list[list[str]]:
    return [
        ["Rental ID", str(rental.id)],
        ["Rental date", format_date(rental.rental_date)],
        ["Due date", format_date(rental.due_date)],
        ["Returned", format_date(rental.return_date)],
        ["Status", rental.status.value],
    ]


def generate_receipt_pdf(
    payment: Payment,
    rental: Rental,
    items: Iterable[tuple[RentalItem, str]],
    customer: Optional[Customer],
    output_path: Path,
    *,
    paid_total: float,
    shop: ShopInfo = SHOP_INFO,
) -> Path:
    """Write a receipt for ``payment``; ``items`` pairs each line with its dress name."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    title = "DRESS RENTAL RECEIPT"
    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=18 * mm,
        bottomMargin=18 * mm,
        title=title,
        author=shop.name,
    )

    styles = getSampleStyleSheet()
    styles.add(
        ParagraphStyle(
            name="SectionTitle",
            parent=styles["Heading3"],
            spaceBefore=12,
            spaceAfter=6,
        )
    )
    styles.add(
        ParagraphStyle(
            name="SmallText",
            parent=styles["Normal"],
            fontSize=9,
            leading=12,
        )
    )

    elements: list[object] = []
    elements.append(Paragraph(f"<b>{shop.name}</b>", styles["Title"]))
    elements.append(Paragraph(title, styles["Heading2"]))
    elements.append(Spacer(1, 8))

    shop_lines = [
        f"<b>Phone:</b> {shop.phone}",
        f"<b>Address:</b> {shop.address}",
    ]
    elements.append(Paragraph("<br/>".join(shop_lines), styles["Normal"]))
    elements.append(Spacer(1, 10))

    if customer is not None:
        customer_lines = [
            "<b>Customer</b>",
            f"Name: {customer.name}",
            f"IC Number: {customer.ic_number}",
            f"Phone: {customer.phone or '-'}",
        ]
        elements.append(Paragraph("<br/>".join(customer_lines), styles["Normal"]))
        elements.append(Spacer(1, 10))

    rental_table = Table(_build_rental_rows(rental), colWidths=[40 * mm, 120 * mm])
    rental_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ]
        )
    )
    elements.append(Paragraph("Rental", styles["SectionTitle"]))
    elements.append(rental_table)
    elements.append(Spacer(1, 12))

    items_data = [["Dress", "Daily price"]]
    for item, dress_name in items:
        items_data.append(
            [dress_name or f"Dress {item.dress_id}", format_currency(item.rental_price)]
        )
    items_table = Table(items_data, colWidths=[120 * mm, 40 * mm])
    items_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    elements.append(Paragraph("Dresses", styles["SectionTitle"]))
    elements.append(items_table)
    elements.append(Spacer(1, 12))

    payment_rows = [
        ["Payment ID", str(payment.id)],
        ["Payment date", format_date(payment.payment_date)],
        ["Method", payment.payment_method.value],
        ["Status", payment.status.value],
        ["Amount", format_currency(payment.amount)],
    ]
    if payment.transaction_reference:
        payment_rows.append(["Transaction ref.", payment.transaction_reference])
    payment_table = Table(payment_rows, colWidths=[40 * mm, 120 * mm])
    payment_table.setStyle(
        TableStyle([("GRID", (0, 0), (-1, -1), 0.25, colors.grey)])
    )
    elements.append(Paragraph("Payment", styles["SectionTitle"]))
    elements.append(payment_table)
    elements.append(Spacer(1, 12))

    balance = max(0.0, rental.amount_due - paid_total)
    values_table = Table(
        [
            ["Rental total", format_currency(rental.total_amount)],
            ["Late fee", format_currency(rental.late_fee)],
            ["Paid to date", format_currency(paid_total)],
            ["Balance", format_currency(balance)],
        ],
        colWidths=[40 * mm, 50 * mm],
    )
    values_table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("BACKGROUND", (0, -1), (-1, -1), colors.whitesmoke),
            ]
        )
    )
    elements.append(Paragraph("Summary", styles["SectionTitle"]))
    elements.append(values_table)

    footer = f"Generated on {datetime.now().strftime('%d/%m/%Y %H:%M')}"
    elements.append(Spacer(1, 18))
    elements.append(Paragraph(footer, styles["SmallText"]))

    doc.build(elements)
    return output_path
