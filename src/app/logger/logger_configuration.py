import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ColorFormatter(logging.Formatter):
    LEVEL_COLORS = {
        logging.INFO: '\033[32m',    # Green
        logging.WARNING: '\033[33m', # Yellow
        logging.ERROR: '\033[31m',   # Red
        logging.CRITICAL: '\033[41m', # Red background
    }
    RESET_COLOR = '\033[0m'

    def format(self, record):
        log_color = self.LEVEL_COLORS.get(record.levelno, self.RESET_COLOR)
        message = super().format(record)
        return f"{log_color}{message}{self.RESET_COLOR}"


def configure_logging(level: str = "INFO"):
    """Configure logging for the relay; safe to call again with another level."""
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # httpx logs every request URL at INFO, and the URL carries the API key.
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging()
logger = logging.getLogger("src.app")
