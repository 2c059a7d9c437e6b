"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import LeaveType

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_TOKEN_HOURS = 24
MIN_PASSWORD_LENGTH = 8
TEMP_PASSWORD_LENGTH = 10
DEFAULT_AUDIT_RETENTION_DAYS = 180

# Days credited to every active employee on the 1st of each month.
MONTHLY_LEAVE_ALLOCATION = {
    LeaveType.CASUAL: Decimal("1.0"),
    LeaveType.SICK: Decimal("1.0"),
    LeaveType.EARNED: Decimal("1.5"),
}

HALF_DAY = Decimal("0.5")

# Payroll statutory figures (INR).
PF_RATE = Decimal("0.12")
PF_CAP = Decimal("1800")
ESIC_RATE = Decimal("0.0075")
ESIC_CEILING = Decimal("21000")
PROFESSIONAL_TAX = Decimal("200")
PROFESSIONAL_TAX_THRESHOLD = Decimal("15000")
INCOME_TAX_SLABS = (
    (Decimal("250000"), Decimal("0")),
    (Decimal("500000"), Decimal("0.05")),
    (Decimal("1000000"), Decimal("0.20")),
)
INCOME_TAX_TOP_RATE = Decimal("0.30")

HRA_SHARE = Decimal("0.4")
DA_SHARE = Decimal("0.5")
OTHER_ALLOWANCE_SHARE = Decimal("0.1")

RECEIPT_EXTENSIONS = (".jpg", ".jpeg", ".png", ".pdf")
PHOTO_EXTENSIONS = (".jpg", ".jpeg", ".png")
DOCUMENT_TYPES = {
    "photo": PHOTO_EXTENSIONS,
    "aadhar": (".pdf", ".jpg", ".jpeg", ".png"),
    "pan": (".pdf", ".jpg", ".jpeg", ".png"),
    "resume": (".pdf", ".doc", ".docx"),
    "offer_letter": (".pdf",),
}

CARD_STYLES = ("modern", "classic", "minimal", "corporate")

JOB_MONTHLY_LEAVE_ALLOCATION = "monthly_leave_allocation"
JOB_PAYROLL_AGGREGATION = "payroll_aggregation"
JOB_LOG_CLEANUP = "log_cleanup"
