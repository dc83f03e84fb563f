from __future__ import annotations

from datetime import date


# PUBLIC_INTERFACE
def get_today() -> date:
    """
    Current calendar date. Routes receive it through Depends so tests can pin
    it with app.dependency_overrides.
    """
    return date.today()
