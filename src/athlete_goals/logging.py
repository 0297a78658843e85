from __future__ import annotations

import datetime
import sys

from loguru import logger

from athlete_goals.config import GoalsConfig, load_config

_CONFIGURED = False

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"


def configure_logging(config: GoalsConfig | None = None) -> None:
    """Install stderr + daily rotating file sinks. Safe to call repeatedly."""
    global _CONFIGURED
    cfg = config or load_config()

    logger.remove()  # remove default
    logger.add(sys.stderr, level=cfg.log_level, format=LOG_FORMAT)

    if cfg.log_to_file:
        cfg.log_dir.mkdir(parents=True, exist_ok=True)
        date_str = datetime.date.today().isoformat()
        log_path = cfg.log_dir / f"athlete_goals_{date_str}.log"
        logger.add(
            log_path,
            rotation="1 day",
            retention=f"{cfg.log_retention_days} days",
            compression="zip",
            level=cfg.log_level,
            format=LOG_FORMAT,
        )
    _CONFIGURED = True


def get_logger():
    if not _CONFIGURED:
        configure_logging()
    return logger
