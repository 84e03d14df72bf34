from __future__ import annotations

from models.feed_item import FeedItemRow
from .base import BaseRepository


class FeedRepository(BaseRepository[FeedItemRow]):
    """Write-only here: the feed is read by the social surface, not by the match core."""

    model = FeedItemRow
