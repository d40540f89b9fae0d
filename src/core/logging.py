"""
Logging setup.

Modules log through logging.getLogger(__name__); this configures the root
handler once at startup from the `logging` section of default.yaml.
"""

import logging
from typing import Any

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Third-party loggers that are noisy at INFO
_QUIET_LOGGERS = ("httpx", "google.auth", "urllib3")


def setup_logging(config: dict[str, Any] | None = None) -> None:
    """
    Configure the root logger.

    Args:
        config: Full app config (reads config["logging"]["level"|"format"])
    """
    log_config = (config or {}).get("logging", {})
    level_name = str(log_config.get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=log_config.get("format", DEFAULT_FORMAT),
        force=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
