from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Callable, Dict

from reportlab.lib import colors
from reportlab.pdfgen import canvas

# 3.5in x 2in at 72 points per inch.
CARD_SIZE = (252, 144)


@dataclass(frozen=True)
class CardContent:
    company_name: str
    name: str
    designation: str
    phone: str
    email: str
    address: str
    website: str


@dataclass(frozen=True)
class CardPalette:
    background: colors.Color
    accent: colors.Color
    text: colors.Color
    muted: colors.Color
    align_right: bool = False


PALETTES: Dict[str, CardPalette] = {
    "modern": CardPalette(
        background=colors.HexColor("#f8fafc"),
        accent=colors.HexColor("#0f766e"),
        text=colors.HexColor("#1e293b"),
        muted=colors.HexColor("#475569"),
        align_right=True,
    ),
    "classic": CardPalette(
        background=colors.HexColor("#fffbeb"),
        accent=colors.HexColor("#7c2d12"),
        text=colors.HexColor("#1c1917"),
        muted=colors.HexColor("#57534e"),
    ),
    "minimal": CardPalette(
        background=colors.white,
        accent=colors.HexColor("#111827"),
        text=colors.HexColor("#111827"),
        muted=colors.HexColor("#6b7280"),
    ),
    "corporate": CardPalette(
        background=colors.HexColor("#eff6ff"),
        accent=colors.HexColor("#1e3a8a"),
        text=colors.HexColor("#0f172a"),
        muted=colors.HexColor("#334155"),
    ),
}


def _front(c: canvas.Canvas, content: CardContent, palette: CardPalette) -> None:
    width, height = CARD_SIZE
    c.setFillColor(palette.accent)
    c.rect(0, 0, width, height, stroke=0, fill=1)
    c.setFillColor(colors.white)
    c.circle(width / 2, height / 2 + 10, 28, stroke=0, fill=1)
    c.setFillColor(palette.accent)
    c.setFont("Helvetica-Bold", 20)
    initials = "".join(part[:1] for part in content.company_name.split()[:2]).upper() or "HR"
    c.drawCentredString(width / 2, height / 2 + 3, initials)
    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 11)
    c.drawCentredString(width / 2, 28, content.company_name)


def _back(c: canvas.Canvas, content: CardContent, palette: CardPalette) -> None:
    width, height = CARD_SIZE
    c.setFillColor(palette.background)
    c.rect(0, 0, width, height, stroke=0, fill=1)
    c.setFillColor(palette.accent)
    c.rect(0, 0, 6, height, stroke=0, fill=1)

    draw: Callable[[float, float, str], None]
    if palette.align_right:
        x = width - 20
        draw = c.drawRightString
    else:
        x = 20
        draw = c.drawString

    c.setFillColor(palette.text)
    c.setFont("Helvetica-Bold", 12)
    draw(x, height - 28, content.name)
    c.setFillColor(palette.accent)
    c.setFont("Helvetica", 10)
    draw(x, height - 43, content.designation)

    c.setFillColor(palette.muted)
    c.setFont("Helvetica", 8)
    y = height - 66
    for line in (
        f"Phone: {content.phone}",
        f"Email: {content.email}",
        f"Address: {content.address}",
        f"Website: {content.website}",
    ):
        c.drawString(20, y, line[:60])
        y -= 11


def render_card(content: CardContent, style: str) -> bytes:
    """Two-page PDF: company front, contact back."""
    palette = PALETTES[style]
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=CARD_SIZE)
    c.setTitle(f"{content.name} - {style} card")
    _front(c, content, palette)
    c.showPage()
    _back(c, content, palette)
    c.showPage()
    c.save()
    return buf.getvalue()
