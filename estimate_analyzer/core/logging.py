import sys
from loguru import logger
from .config import settings


def setup_logging():
    """
    Configure the shared loguru logger once for the whole service.

    Structured context passed as keyword arguments (logger.info("msg", key=value))
    lands in record["extra"] and is rendered after the message.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
            "<level>{message}</level> {extra}"
        ),
        backtrace=False,
        diagnose=settings.app_env == "dev",
    )
    logger.info("Logging configured", app=settings.app_name, env=settings.app_env)
    return logger
