import logging

from .config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Library loggers that are only useful when debugging.
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite")


def setup_logging(settings: Settings) -> None:
    """Configure root logging once from settings.

    ops_events and the uvicorn loggers follow the application level. SQL and
    driver chatter stays at WARNING unless the level is DEBUG.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    logging.getLogger("ops_events").setLevel(level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
