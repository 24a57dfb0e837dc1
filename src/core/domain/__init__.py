"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) and the small value types of
  the chain live here.
- The domain knows nothing about HTTP, CLI or event loops.
"""

from core.domain.errors import ChainError, EmptyCollectionError, TransportError
from core.domain.models import Comment, Post, User
from core.domain.selection import SelectionPolicy
from core.domain.stage import Stage

__all__ = [
    "ChainError",
    "Comment",
    "EmptyCollectionError",
    "Post",
    "SelectionPolicy",
    "Stage",
    "TransportError",
    "User",
]
