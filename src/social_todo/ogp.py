"""
Social preview (OGP) image for a Todo.

The card is a fixed 1200x630 PNG, the size link unfurlers expect, with the
Todo content, its due date and the deadline notice drawn on a flat background.
"""
from __future__ import annotations

import logging
import textwrap
from io import BytesIO
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from .deadline import deadline_message
from .models import Deadline, TodoEntity

logger = logging.getLogger(__name__)

OGP_SIZE = (1200, 630)
MARGIN = 80
BACKGROUND = {Deadline.WITHIN: "#f5f7fa", Deadline.OVERDUE: "#fdecea"}
ACCENT = {Deadline.WITHIN: "#2e7d32", Deadline.OVERDUE: "#c62828"}
TEXT_COLOR = "#212121"
CONTENT_WRAP = 28


def _load_font(path: Optional[str], size: int):
    if path:
        try:
            return ImageFont.truetype(path, size=size)
        except OSError:
            logger.warning("Could not load OGP font %s, using the default font", path)
    return ImageFont.load_default(size=size)


# PUBLIC_INTERFACE
def render_todo_card(todo: TodoEntity, deadline: Deadline, font_path: Optional[str] = None) -> bytes:
    """
    Draw the preview card for ``todo`` and return it as PNG bytes.

    Args:
        todo: The Todo to summarize.
        deadline: Its classification for the day the card is rendered.
        font_path: Optional TrueType font. Needed for non-Latin content to
            render as glyphs; the default font is used otherwise.
    """
    canvas = Image.new("RGB", OGP_SIZE, BACKGROUND[deadline])
    draw = ImageDraw.Draw(canvas)

    title_font = _load_font(font_path, 56)
    body_font = _load_font(font_path, 36)

    draw.rectangle([(0, 0), (OGP_SIZE[0], 16)], fill=ACCENT[deadline])

    y = MARGIN
    for line in textwrap.wrap(todo["content"], width=CONTENT_WRAP)[:4] or [""]:
        draw.text((MARGIN, y), line, font=title_font, fill=TEXT_COLOR)
        y += 72

    draw.text((MARGIN, OGP_SIZE[1] - MARGIN - 96), f"Due: {todo['due_date']}", font=body_font, fill=TEXT_COLOR)
    draw.text((MARGIN, OGP_SIZE[1] - MARGIN - 48), deadline_message(deadline), font=body_font, fill=ACCENT[deadline])

    buffer = BytesIO()
    canvas.save(buffer, format="PNG")
    return buffer.getvalue()
