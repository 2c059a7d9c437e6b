from __future__ import annotations

import io
from datetime import datetime
from decimal import Decimal

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..employees.model import Employee
from ..organization.model import Company
from ..payroll.model import PayrollRecord
from .words import amount_in_words


def _fmt(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def render_payslip(*, company: Company, employee: Employee, record: PayrollRecord) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    b = record.breakdown
    s = record.summary

    y = height - 60
    c.setFont("Helvetica-Bold", 16)
    c.drawCentredString(width / 2, y, company.name)
    c.setFont("Helvetica", 9)
    y -= 14
    c.drawCentredString(width / 2, y, company.address or "")
    y -= 12
    c.drawCentredString(width / 2, y, f"PAN: {company.pan or '-'}   GSTIN: {company.gstin or '-'}")
    y -= 26
    month_label = datetime.strptime(record.month, "%Y-%m").strftime("%B %Y")
    c.setFont("Helvetica-Bold", 13)
    c.drawCentredString(width / 2, y, f"Payslip for {month_label}")

    y -= 30
    c.setFont("Helvetica", 10)
    info = (
        ("Employee ID", employee.employee_id, "Name", employee.name),
        ("Department", record.department or "-", "Designation", record.designation_name or "-"),
        ("Working Days", str(s.total_working_days), "Present Days", str(s.present_days)),
        ("Paid Leave", f"{s.paid_leave_days:g}", "Unpaid Leave", f"{s.unpaid_leave_days:g}"),
        ("Payment Method", record.payment_method, "Status", record.status.value),
    )
    for left_label, left_value, right_label, right_value in info:
        c.drawString(50, y, f"{left_label}:")
        c.drawString(150, y, left_value)
        c.drawString(310, y, f"{right_label}:")
        c.drawString(410, y, right_value)
        y -= 16

    y -= 14
    c.setFont("Helvetica-Bold", 11)
    c.drawString(50, y, "Earnings")
    c.drawRightString(280, y, "Amount")
    c.drawString(310, y, "Deductions")
    c.drawRightString(545, y, "Amount")
    c.line(50, y - 4, 545, y - 4)

    earnings = (
        ("Basic Salary", b.basic_salary),
        ("HRA", b.hra),
        ("DA", b.da),
        ("Other Allowances", b.other_allowances),
        ("Bonuses", b.bonuses),
    )
    deductions = (
        ("Unpaid Leave", b.unpaid_deduction),
        ("Provident Fund", b.pf_deduction),
        ("ESIC", b.esic_deduction),
        ("Professional Tax", b.professional_tax),
        ("Income Tax", b.tax_deduction),
    )
    c.setFont("Helvetica", 10)
    row_y = y - 20
    for (e_label, e_amount), (d_label, d_amount) in zip(earnings, deductions):
        c.drawString(50, row_y, e_label)
        c.drawRightString(280, row_y, _fmt(e_amount))
        c.drawString(310, row_y, d_label)
        c.drawRightString(545, row_y, _fmt(d_amount))
        row_y -= 16

    c.line(50, row_y + 8, 545, row_y + 8)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(50, row_y - 6, "Gross Earnings")
    c.drawRightString(280, row_y - 6, _fmt(b.gross_salary))
    c.drawString(310, row_y - 6, "Total Deductions")
    c.drawRightString(545, row_y - 6, _fmt(b.total_deductions))

    row_y -= 36
    c.setFont("Helvetica-Bold", 12)
    c.drawString(50, row_y, f"Net Pay: INR {_fmt(b.net_salary)}")
    c.setFont("Helvetica-Oblique", 10)
    c.drawString(50, row_y - 16, amount_in_words(b.net_salary))

    c.setFont("Helvetica", 8)
    c.drawCentredString(width / 2, 40, "This is a computer-generated payslip and does not require a signature.")
    c.showPage()
    c.save()
    return buf.getvalue()
