from loguru import logger
import sys

LOG_FORMAT = ("<green>{time:HH:mm:ss}</green> | "
              "<level>{level: <8}</level> | "
              "{name}:{line} - <level>{message}</level>")


def init_logger(level: str = "INFO", sink=sys.stdout) -> None:
    logger.remove()
    logger.add(
        sink,
        level=level.upper(),
        format=LOG_FORMAT,
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
