"""
Server entrypoint: starts uvicorn with the FastAPI app.

Run from the backend dir: python backend_entry.py [--host 127.0.0.1] [--port 8000]
Port: --port, else PORT env, else the first free port in 8000..8010.
"""

from __future__ import annotations

import argparse
import logging
import os
import socket
import sys
from pathlib import Path

# Ensure backend dir is on path so "from main import app" works when run as a script
_backend_dir = Path(__file__).resolve().parent
if str(_backend_dir) not in sys.path:
    sys.path.insert(0, str(_backend_dir))


def _pick_port(host: str) -> int:
    """Return first free port in 8000..8010. Bind test then close."""
    for port in range(8000, 8011):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind((host, port))
                return port
        except OSError:
            continue
    return 8000  # may fail later if all busy


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="ScoreHeroes match core server")
    parser.add_argument("--host", default=os.environ.get("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=None)
    args = parser.parse_args(argv)

    port = args.port or int(os.environ.get("PORT", "0") or 0) or _pick_port(args.host)

    from main import app, settings
    import uvicorn

    logging.getLogger(__name__).info("Starting %s on %s:%s", settings.app_name, args.host, port)
    uvicorn.run(app, host=args.host, port=port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
