import logging
from loguru import logger


# Remove existing handlers
for handler in logging.root.handlers[:]:
    logging.root.removeHandler(handler)


class InterceptHandler(logging.Handler):
    def emit(self, record):
        # Get corresponding Loguru level
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller to get correct stack depth
        frame, depth = logging.currentframe(), 2
        while frame.f_back and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(log_file: str = "logs/application.log"):
    # uvicorn and SQLAlchemy log through the stdlib
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)
    logger.add(
        log_file,
        rotation="500 MB",
        compression="zip",
        level="INFO",
        backtrace=True,
        diagnose=True,
    )
