"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-contained documentation (Field) without coupling
  the Core to I/O libraries.
- Aliases map the API's camelCase JSON onto the domain names.

Note:
- These models describe *what* the data is, not *how* it is fetched.
- All models are frozen: nothing is mutated after decode.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

_ENTITY_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class User(BaseModel):
    """Top-level resource; the first stage of the chain."""

    model_config = _ENTITY_CONFIG

    id: int = Field(..., description="User identifier; scopes the posts fetch.")
    name: str = Field(..., description="Display name.")


class Post(BaseModel):
    """A post owned by one user."""

    model_config = _ENTITY_CONFIG

    id: int = Field(..., description="Post identifier; scopes the comments fetch.")
    owner_id: int = Field(..., alias="userId", description="Owning user id.")
    title: str = Field(..., description="Post title.")


class Comment(BaseModel):
    """A comment on one post.

    `id` is stable and used as the list key by the presenter.
    """

    model_config = _ENTITY_CONFIG

    id: int = Field(..., description="Comment identifier.")
    parent_id: int = Field(..., alias="postId", description="Parent post id.")
    contact_field: str = Field(..., alias="email", description="Field shown in the list view.")
