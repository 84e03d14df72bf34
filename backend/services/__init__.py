"""Services: SQLAlchemy-backed stores behind the match and notification ports."""

from .sql_match_store import SqlMatchStore
from .sql_notification_store import SqlNotificationStore

__all__ = [
    "SqlMatchStore",
    "SqlNotificationStore",
]
