import logging
from docparse.core.interfaces.logging import LoggingPort

class LoggingAdapter(LoggingPort):
    """Concrete logging adapter.

    Delegates to Python's logging without adding handlers of its own, so
    `configure_logging` in the composition root controls the sinks. The
    correlation id is injected by the root handler filter.
    """

    def __init__(self, name: str = "docparse", log_level: int | str = logging.INFO):
        self.logger = logging.getLogger(name)
        if isinstance(log_level, str):
            level_key = log_level.upper().strip()
            numeric = logging.getLevelNamesMapping().get(level_key, logging.INFO)
            log_level = numeric
        self.logger.setLevel(log_level)
        self.logger.propagate = True
        self.logger.debug("Initialized logger name=%s level=%s", name, self.logger.level)

    def info(self, msg: str, *args):
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args):
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args):
        self.logger.error(msg, *args)

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)
