"""URL builders for the three chain endpoints.

The transport receives fully formed URLs; query parameters are embedded here.
"""

from __future__ import annotations

from urllib.parse import urlencode


def _join(base_url: str, path: str, params: dict[str, object] | None = None) -> str:
    url = f"{base_url.rstrip('/')}/{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url


def users_url(base_url: str) -> str:
    return _join(base_url, "users")


def posts_url(base_url: str, *, user_id: int) -> str:
    return _join(base_url, "posts", {"userId": user_id})


def comments_url(base_url: str, *, post_id: int) -> str:
    return _join(base_url, "comments", {"postId": post_id})
