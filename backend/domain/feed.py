from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel


class FeedItem(BaseModel):
    """System-authored social feed entry emitted by the match lifecycle."""

    id: str
    type: Literal["match_update", "achievement"]
    title: str
    content: str
    related_entity_id: Optional[str] = None
    published_at: str
    visibility: Literal["public", "institution", "private"] = "public"
    author_id: str = "system"
    author_name: str = "System"
    author_type: Literal["system"] = "system"
