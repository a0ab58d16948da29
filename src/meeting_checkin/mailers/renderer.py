"""Letter-size mailer pages rendered with Pillow, one per shareholder."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import qrcode
from PIL import Image, ImageDraw, ImageFont

DPI = 100
PAGE_SIZE = (int(8.5 * DPI), int(11 * DPI))
MARGIN = 75


@dataclass(frozen=True)
class MailerRecipient:
    shareholder_id: str
    name: str
    mailing_address: Optional[str]
    city_state_zip: Optional[str]


def qr_image(data: str, *, box_size: int = 6) -> Image.Image:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr.make_image(fill_color="black", back_color="white").convert("RGB")


def render_page(recipient: MailerRecipient, *, meeting_label: str = "") -> Image.Image:
    page = Image.new("RGB", PAGE_SIZE, "white")
    draw = ImageDraw.Draw(page)
    font = ImageFont.load_default()

    y = MARGIN
    if meeting_label:
        draw.text((MARGIN, y), meeting_label, fill="black", font=font)
        y += 40

    for line in (recipient.name, recipient.mailing_address or "", recipient.city_state_zip or ""):
        if line:
            draw.text((MARGIN, y), line, fill="black", font=font)
            y += 20

    draw.text((MARGIN, y + 20), f"Shareholder ID: {recipient.shareholder_id}", fill="black", font=font)

    code = qr_image(recipient.shareholder_id)
    page.paste(code, (PAGE_SIZE[0] - MARGIN - code.width, MARGIN))
    return page


def write_pdf(pages: Sequence[Image.Image], path: Path) -> Path:
    if not pages:
        raise ValueError("At least one page is required")
    path.parent.mkdir(parents=True, exist_ok=True)
    first, *rest = pages
    first.save(path, "PDF", save_all=True, append_images=rest, resolution=float(DPI))
    return path
