"""
Logging for Pantrify.

Everything logs under the ``pantrify`` namespace. The file handler records at
the configured level; the console only shows warnings unless debug mode is on.
Remote calls (recipe search, unit classification) are wrapped in
``log_remote_call`` so each one leaves a single line with its parameters,
outcome and duration.
"""

import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .config import Config, get_config

ROOT_LOGGER = "pantrify"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_FILE_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# chatty libraries used by the app and its HTTP clients
QUIET_LOGGERS = ("urllib3", "requests", "streamlit", "watchdog")


def setup_logging(config: Optional[Config] = None) -> logging.Logger:
    """
    Configure the pantrify logger from Config.

    log_level and log_file drive the rotating file handler; debug_mode lowers
    both handlers to DEBUG. Safe to call on every Streamlit rerun.
    """
    config = config or get_config()
    level = logging.DEBUG if config.debug_mode else logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if config.debug_mode else logging.WARNING)
    console.setFormatter(formatter)
    root.addHandler(console)

    log_path = Path(config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=LOG_FILE_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug(f"Logging to {log_path} at {logging.getLevelName(level)}")
    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger under the pantrify namespace"""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


@dataclass
class RemoteCall:
    """Context and outcome of one remote call, filled in while it runs"""
    service: str
    params: Dict[str, Any]
    outcome: Dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)

    def note(self, **details):
        """Attach outcome details (result counts, status codes) to the log line"""
        self.outcome.update(details)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000

    def describe(self) -> str:
        params = " ".join(f"{key}={value!r}" for key, value in self.params.items())
        return f"{self.service} {params}".strip()


@contextmanager
def log_remote_call(logger: logging.Logger, service: str, **params) -> Iterator[RemoteCall]:
    """
    Log a remote call with its parameters and duration.

    Failures are logged at WARNING and re-raised; callers decide the fallback.

    >>> with log_remote_call(logger, "recipe search", query="soup") as call:
    ...     call.note(results=3)
    """
    call = RemoteCall(service, params)
    logger.debug(f"{call.describe()} started")
    try:
        yield call
    except Exception as e:
        logger.warning(f"{call.describe()} failed after {call.elapsed_ms:.0f} ms: {e}")
        raise

    details = " ".join(f"{key}={value}" for key, value in call.outcome.items())
    logger.info(f"{call.describe()} done in {call.elapsed_ms:.0f} ms {details}".rstrip())
