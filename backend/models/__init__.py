"""SQLAlchemy models for the ScoreHeroes match store.

Nested match state (participants, event log, live state, toss) and certificate
metadata are kept as JSON text columns; the domain models own their shape.
"""

from .base import Base
from .achievement import AchievementRow
from .certificate import CertificateRow
from .feed_item import FeedItemRow
from .match import MatchRow
from .match_scorer import MatchScorerRow
from .notification import NotificationKeyRow, NotificationPreferenceRow, NotificationRow

__all__ = [
    "Base",
    "AchievementRow",
    "CertificateRow",
    "FeedItemRow",
    "MatchRow",
    "MatchScorerRow",
    "NotificationKeyRow",
    "NotificationPreferenceRow",
    "NotificationRow",
]
