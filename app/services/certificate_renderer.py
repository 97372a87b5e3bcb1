"""
Certificate Renderer
Draws participation certificates with Pillow and wraps them as A4 PDFs
"""

from io import BytesIO
from typing import Tuple

import img2pdf
from PIL import Image, ImageDraw, ImageFont

from app.config import settings
from app.utils.datetime_utils import as_datetime


# A4 landscape at 150 dpi
PAGE_SIZE = (1754, 1240)
A4_LANDSCAPE_PT = (img2pdf.mm_to_pt(297), img2pdf.mm_to_pt(210))

TEMPLATES = ("classic", "modern")

FONT_CANDIDATES = {
    "regular": ("DejaVuSerif.ttf", "DejaVuSans.ttf", "arial.ttf"),
    "bold": ("DejaVuSerif-Bold.ttf", "DejaVuSans-Bold.ttf", "arialbd.ttf"),
}

PALETTES = {
    "classic": {
        "background": (253, 250, 240),
        "border": (120, 90, 30),
        "title": (90, 60, 10),
        "text": (40, 40, 40),
        "accent": (160, 120, 40),
    },
    "modern": {
        "background": (255, 255, 255),
        "border": (30, 60, 120),
        "title": (30, 60, 120),
        "text": (45, 45, 55),
        "accent": (0, 150, 200),
    },
}


def _load_font(size: int, weight: str = "regular") -> ImageFont.ImageFont:
    for candidate in FONT_CANDIDATES[weight]:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _draw_centered(draw: ImageDraw.ImageDraw, y: int, text: str, font, fill: Tuple[int, int, int], center_x: int) -> int:
    """Draw text centred on center_x and return the y below it"""
    bbox = draw.textbbox((0, 0), text, font=font)
    width = bbox[2] - bbox[0]
    height = bbox[3] - bbox[1]
    draw.text((center_x - width // 2, y), text, fill=fill, font=font)
    return y + height


def _draw_frame(draw: ImageDraw.ImageDraw, template: str, palette: dict) -> int:
    """Template decoration; returns the horizontal centre of the writing area"""
    width, height = PAGE_SIZE

    if template == "modern":
        band = 150
        draw.rectangle([0, 0, band, height], fill=palette["border"])
        draw.rectangle([band, 0, band + 14, height], fill=palette["accent"])
        draw.rectangle([band + 14, height - 40, width, height], fill=palette["border"])
        return (band + width) // 2

    draw.rectangle([30, 30, width - 30, height - 30], outline=palette["border"], width=10)
    draw.rectangle([55, 55, width - 55, height - 55], outline=palette["accent"], width=3)
    return width // 2


def render_certificate_png(certificate: dict, template: str = "classic") -> bytes:
    """
    Render the certificate page as PNG bytes

    Args:
        certificate: Row with recipient, event and certificate fields
        template: 'classic' or 'modern'
    """
    template = template if template in TEMPLATES else "classic"
    palette = PALETTES[template]

    image = Image.new("RGB", PAGE_SIZE, palette["background"])
    draw = ImageDraw.Draw(image)
    center_x = _draw_frame(draw, template, palette)

    event_date = as_datetime(certificate["event_date"])
    issue_date = as_datetime(certificate["issue_date"])

    y = 170
    y = _draw_centered(draw, y, settings.UNIVERSITY_NAME.upper(), _load_font(34, "bold"), palette["accent"], center_x) + 50
    y = _draw_centered(draw, y, "CERTIFICATE OF PARTICIPATION", _load_font(72, "bold"), palette["title"], center_x) + 70
    y = _draw_centered(draw, y, "This is to certify that", _load_font(34), palette["text"], center_x) + 45
    y = _draw_centered(draw, y, certificate["user_name"], _load_font(80, "bold"), palette["title"], center_x) + 30

    draw.line([center_x - 420, y, center_x + 420, y], fill=palette["accent"], width=3)
    y += 45

    y = _draw_centered(draw, y, "has successfully participated in", _load_font(34), palette["text"], center_x) + 35
    y = _draw_centered(draw, y, certificate["event_title"], _load_font(52, "bold"), palette["text"], center_x) + 35
    y = _draw_centered(
        draw, y, f"held on {event_date.strftime('%B %d, %Y')}", _load_font(32), palette["text"], center_x
    ) + 70

    # Details table
    rows = (
        ("Certificate No.", certificate["certificate_number"]),
        ("Issued", issue_date.strftime("%B %d, %Y")),
        ("Volunteer Hours", str(certificate.get("volunteer_hours") or 0)),
    )
    label_font = _load_font(26, "bold")
    value_font = _load_font(26)
    cell_w, cell_h = 340, 50
    left = center_x - (cell_w * len(rows)) // 2
    for index, (label, value) in enumerate(rows):
        x0 = left + index * cell_w
        draw.rectangle([x0, y, x0 + cell_w, y + cell_h * 2], outline=palette["border"], width=2)
        draw.line([x0, y + cell_h, x0 + cell_w, y + cell_h], fill=palette["border"], width=1)
        _draw_centered(draw, y + 10, label, label_font, palette["title"], x0 + cell_w // 2)
        _draw_centered(draw, y + cell_h + 10, value, value_font, palette["text"], x0 + cell_w // 2)
    y += cell_h * 2 + 90

    # Signature line
    draw.line([center_x - 200, y, center_x + 200, y], fill=palette["text"], width=2)
    _draw_centered(draw, y + 12, "Events Office", _load_font(26), palette["text"], center_x)

    footer = f"{settings.UNIVERSITY_NAME} Events Management System"
    _draw_centered(draw, PAGE_SIZE[1] - 110, footer, _load_font(22), palette["accent"], center_x)

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_certificate_pdf(certificate: dict, template: str = "classic") -> bytes:
    """Single-page A4 landscape PDF"""
    png = render_certificate_png(certificate, template)
    layout = img2pdf.get_layout_fun(A4_LANDSCAPE_PT)
    return img2pdf.convert(png, layout_fun=layout)
