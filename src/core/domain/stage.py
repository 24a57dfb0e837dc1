"""Stages of the dependent fetch chain."""

from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    """One transport call plus its selection step."""

    USERS = "users"
    POSTS = "posts"
    COMMENTS = "comments"

    @property
    def empty_tag(self) -> str:
        """Tag used when this stage returns nothing to select from."""

        return f"no-{self.value}"
