import sys
import os
from loguru import logger


def configure_logger(level: str | None = None, log_file: str | None = None):
    level = str(level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_file = log_file if log_file is not None else os.getenv("LOG_FILE", "")

    # 重复调用时先清理已有 sink
    logger.remove()

    logger.add(
        sys.stdout,
        level=level,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> - <level>{level}</level> - <cyan>{name}</cyan> - <level>{message}</level>",
    )

    if log_file:
        logger.add(
            log_file if log_file.endswith(".log") else f"{log_file}.log",
            level=level,
            rotation="1 MB",
            retention=7,
            encoding="utf-8",
            format="{time:YYYY-MM-DD HH:mm:ss} - {level} - {name} - {message}",
        )

    return logger


logger = configure_logger()
