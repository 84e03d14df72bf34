"""Repository layer for DB access only (CRUD + simple queries).

Repositories operate on the models in backend/models/ and contain no business
logic. All repositories accept AsyncSession explicitly; sessions come from the
DatabaseManager in core/database.py.
"""

from .base import BaseRepository
from .achievement_repo import AchievementRepository
from .certificate_repo import CertificateRepository
from .feed_repo import FeedRepository
from .match_repo import MatchRepository
from .notification_repo import (
    NotificationKeyRepository,
    NotificationPreferenceRepository,
    NotificationRepository,
)
from .scorer_repo import MatchScorerRepository

__all__ = [
    "BaseRepository",
    "AchievementRepository",
    "CertificateRepository",
    "FeedRepository",
    "MatchRepository",
    "MatchScorerRepository",
    "NotificationKeyRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
]
