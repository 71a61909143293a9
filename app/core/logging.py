import logging
from colorlog import ColoredFormatter


def setup_logger(level=logging.INFO):
    # Root logger: every module's getLogger(__name__) inherits this handler
    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers (uvicorn --reload imports twice)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = ColoredFormatter(
        "%(log_color)s%(levelname)-8s%(reset)s | "
        "%(blue)s%(asctime)s%(reset)s | "
        "%(green)s%(name)s:%(lineno)d%(reset)s | "
        "%(white)s%(message)s",
        datefmt="%d-%m-%Y %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red,bg_white",
        },
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    # Engine echo is controlled by the Database, not by the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logger
