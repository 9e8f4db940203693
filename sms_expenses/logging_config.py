import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(log_level: str = "INFO") -> None:
    """Configure the root logger once with a console handler.

    Calling it again (e.g. when a test builds a second app) keeps the
    existing handlers and only adjusts the level.
    """

    root_logger = logging.getLogger()
    level = getattr(logging, log_level.upper(), logging.INFO)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)

    root_logger.setLevel(level)
