# log_config.py
# Sets up root logging for the planner API: console always, a rotating file in production.

import logging
import logging.handlers
from pathlib import Path
from typing import List

BASE_DIR = Path(__file__).resolve().parent
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def setup_logging(*, environment: str, logs_dir: Path = BASE_DIR / "logs") -> None:
    root = logging.getLogger()
    if root.handlers:
        return  # Already configured (or a test runner owns the root logger).

    production = (environment or "").strip().lower() == "production"
    level = logging.INFO if production else logging.DEBUG
    formatter = logging.Formatter(LOG_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if production:
        logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            logs_dir / "app.log", maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8",
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers)

    # Request lines from the dev server follow our level.
    logging.getLogger("werkzeug").setLevel(level)
