from __future__ import annotations

import io
from decimal import Decimal
from typing import Sequence

from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from ..organization.model import Company
from .model import PayrollRecord

_COLUMNS = (
    ("Emp ID", 40),
    ("Name", 100),
    ("Department", 200),
    ("Gross", 300),
    ("Unpaid", 370),
    ("PF", 440),
    ("ESIC", 500),
    ("PT", 560),
    ("Tax", 610),
    ("Net", 680),
    ("Status", 760),
)


def _fmt(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def render_payroll_report(*, company: Company, month: str, records: Sequence[PayrollRecord]) -> bytes:
    """One line per employee plus a totals row, landscape A4."""
    buf = io.BytesIO()
    page_size = landscape(A4)
    c = canvas.Canvas(buf, pagesize=page_size)
    width, height = page_size

    def header() -> float:
        y = height - 40
        c.setFont("Helvetica-Bold", 14)
        c.drawString(40, y, company.name)
        c.setFont("Helvetica", 9)
        y -= 14
        c.drawString(40, y, f"{company.address or ''}  PAN: {company.pan or '-'}  GSTIN: {company.gstin or '-'}")
        y -= 20
        c.setFont("Helvetica-Bold", 12)
        c.drawString(40, y, f"Payroll Report - {month}")
        y -= 20
        c.setFont("Helvetica-Bold", 8)
        for title, x in _COLUMNS:
            c.drawString(x, y, title)
        c.line(40, y - 4, width - 40, y - 4)
        c.setFont("Helvetica", 8)
        return y - 16

    y = header()
    totals = {"gross": Decimal("0"), "net": Decimal("0")}
    for r in records:
        if y < 50:
            c.showPage()
            y = header()
        b = r.breakdown
        values = (
            r.employee_id,
            r.employee_name[:18],
            (r.department or "-")[:18],
            _fmt(b.gross_salary),
            _fmt(b.unpaid_deduction),
            _fmt(b.pf_deduction),
            _fmt(b.esic_deduction),
            _fmt(b.professional_tax),
            _fmt(b.tax_deduction),
            _fmt(b.net_salary),
            r.status.value,
        )
        for (_, x), value in zip(_COLUMNS, values):
            c.drawString(x, y, value)
        totals["gross"] += b.gross_salary
        totals["net"] += b.net_salary
        y -= 14

    c.line(40, y + 6, width - 40, y + 6)
    c.setFont("Helvetica-Bold", 9)
    c.drawString(40, y - 8, f"Employees: {len(records)}")
    c.drawString(300, y - 8, f"Total gross: {_fmt(totals['gross'])}")
    c.drawString(560, y - 8, f"Total net: {_fmt(totals['net'])}")
    c.showPage()
    c.save()
    return buf.getvalue()
