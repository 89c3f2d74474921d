"""Logging configuration for the openrtb_compat logger namespace."""

import logging
import threading
import time
from collections.abc import Callable

from openrtb_compat.core.config import LogSamplingConfig, get_log_level, get_log_sampling_config

LOGGER_NAME = "openrtb_compat"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

package_logger = logging.getLogger(LOGGER_NAME)


class SamplingFilter(logging.Filter):
    """Throttle repetitive records.

    Records are bucketed by call site (logger, file, line) and level, so an
    f-string message counts as one bucket whatever values it interpolates.
    Within each one-second tick the first ``initial`` records of a bucket pass,
    after that only every ``thereafter``-th one does. Counts reset when the
    tick changes.
    """

    def __init__(
        self,
        initial: int,
        thereafter: int,
        tick: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        self.initial = initial
        self.thereafter = thereafter
        self.tick = tick
        self._clock = clock
        self._lock = threading.Lock()
        self._window: int | None = None
        self._counts: dict[tuple[int, str, str, int], int] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        key = (record.levelno, record.name, record.pathname, record.lineno)
        window = int(self._clock() // self.tick)

        with self._lock:
            if window != self._window:
                self._window = window
                self._counts.clear()
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count

        if count <= self.initial:
            return True
        return (count - self.initial) % self.thereafter == 0


def setup_logging(level: str | int | None = None, sampling: LogSamplingConfig | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Safe to call more than once: an existing handler is reused and only its
    level and sampling filter are refreshed.

    Args:
        level: Log level; defaults to OPENRTB_COMPAT_LOG_LEVEL.
        sampling: Sampling settings; defaults to the OPENRTB_COMPAT_LOG_SAMPLING_* variables.

    Returns:
        The configured ``openrtb_compat`` logger.
    """
    if level is None:
        level = get_log_level()
    if sampling is None:
        sampling = get_log_sampling_config()

    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)

    for handler in package_logger.handlers:
        for existing in [f for f in handler.filters if isinstance(f, SamplingFilter)]:
            handler.removeFilter(existing)
        if sampling.enabled:
            handler.addFilter(SamplingFilter(sampling.initial, sampling.thereafter))

    level_name = logging.getLevelName(package_logger.level)
    package_logger.debug(f"Logging initialized (level={level_name}, sampling={sampling.enabled})")
    return package_logger
