from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence, Union
from urllib.parse import urlencode

TWEET_INTENT_URL = "https://twitter.com/intent/tweet"


# PUBLIC_INTERFACE
def pagination_envelope(
    items: Union[Sequence[Any], Iterable[Any]],
    total: int,
    limit: int,
    offset: int,
) -> Dict[str, Any]:
    """
    Build a standard pagination envelope for list endpoints.

    Args:
        items: The list/iterable of items for the current page.
        total: Total number of items that match the query (ignoring pagination).
        limit: The limit used for pagination.
        offset: The offset used for pagination.

    Returns:
        Dict with keys: items, total, limit, offset.
    """
    materialized: List[Any] = list(items) if not isinstance(items, list) else items
    return {
        "items": materialized,
        "total": int(total),
        "limit": int(max(limit, 0)),
        "offset": int(max(offset, 0)),
    }


# PUBLIC_INTERFACE
def todo_url(app_url: str, todo_id: int) -> str:
    return f"{app_url.rstrip('/')}/todos/{todo_id}"


# PUBLIC_INTERFACE
def tweet_intent_url(content: str, page_url: str) -> str:
    """
    Link that opens a prefilled tweet confessing the lapsed Todo. The page
    URL carries the OGP card.
    """
    text = f"「{content}」の期限を過ぎてしまいました…"
    return f"{TWEET_INTENT_URL}?{urlencode({'text': text, 'url': page_url, 'hashtags': 'Todo'})}"
