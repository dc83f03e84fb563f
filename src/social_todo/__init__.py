"""
Social Todo package.

Personal Todo lists behind social login. Overdue Todos can be shared with a
generated preview card. Build the ASGI app with ``create_app``, e.g.
``uvicorn --factory social_todo.main:create_app``.
"""

from .main import create_app  # noqa: F401
