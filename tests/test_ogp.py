from io import BytesIO

from PIL import Image

from social_todo.models import Deadline, TodoStatus
from social_todo.ogp import BACKGROUND, OGP_SIZE, render_todo_card


def make_todo(content="write the report", due_date="2020-01-01"):
    return {"id": 7, "user_id": 1, "content": content, "due_date": due_date, "status": TodoStatus.INCOMPLETE}


def test_card_is_png_of_ogp_size():
    image = Image.open(BytesIO(render_todo_card(make_todo(), Deadline.OVERDUE)))
    assert image.format == "PNG"
    assert image.size == OGP_SIZE


def test_background_follows_deadline():
    within = Image.open(BytesIO(render_todo_card(make_todo(), Deadline.WITHIN))).convert("RGB")
    overdue = Image.open(BytesIO(render_todo_card(make_todo(), Deadline.OVERDUE))).convert("RGB")
    corner = (OGP_SIZE[0] - 1, OGP_SIZE[1] - 1)
    assert within.getpixel(corner) == Image.new("RGB", (1, 1), BACKGROUND[Deadline.WITHIN]).getpixel((0, 0))
    assert overdue.getpixel(corner) == Image.new("RGB", (1, 1), BACKGROUND[Deadline.OVERDUE]).getpixel((0, 0))


def test_missing_font_falls_back_to_default(tmp_path):
    png = render_todo_card(make_todo(content="x" * 300), Deadline.WITHIN, font_path=str(tmp_path / "nope.ttf"))
    assert png.startswith(b"\x89PNG")
