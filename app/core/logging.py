import sys
from pathlib import Path
from loguru import logger

LOG_DIR = Path("logs")


def setup_logging(
    log_level: str = "INFO",
    enable_file_logging: bool = True,
    enable_console_logging: bool = True,
    log_rotation: str = "10 MB",
    log_retention: str = "30 days",
    json_format: bool = False,
):
    """
    Configure Loguru sinks for the API.

    Args:
        log_level: Minimum level for the console sink (DEBUG, INFO, WARNING, ...)
        enable_file_logging: Write rotating log files under ``logs/``
        enable_console_logging: Write to stdout
        log_rotation: Rotation threshold for log files
        log_retention: How long rotated files are kept
        json_format: Emit one JSON object per line instead of the dev format
    """

    # Drop loguru's default stderr handler
    logger.remove()

    dev_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    json_format_template = (
        "{{"
        '"time": "{time}", '
        '"level": "{level}", '
        '"module": "{name}", '
        '"function": "{function}", '
        '"line": {line}, '
        '"request_id": "{extra[request_id]}", '
        '"message": "{message}"'
        "}}"
    )

    format_template = json_format_template if json_format else dev_format

    # request_id is bound by the middleware; default it for everything else
    logger.configure(extra={"request_id": "-"})

    if enable_console_logging:
        logger.add(
            sys.stdout,
            format=format_template,
            level=log_level,
            colorize=not json_format,
            backtrace=True,
            diagnose=log_level == "DEBUG",
        )

    if enable_file_logging:
        LOG_DIR.mkdir(exist_ok=True)

        logger.add(
            LOG_DIR / "app_{time:YYYY-MM-DD}.log",
            format=format_template,
            level="INFO",
            rotation=log_rotation,
            retention=log_retention,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )

        logger.add(
            LOG_DIR / "errors_{time:YYYY-MM-DD}.log",
            format=format_template,
            level="WARNING",
            rotation=log_rotation,
            retention=log_retention,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )

        if log_level == "DEBUG":
            logger.add(
                LOG_DIR / "debug_{time:YYYY-MM-DD}.log",
                format=format_template,
                level="DEBUG",
                rotation=log_rotation,
                retention=log_retention,
                encoding="utf-8",
                backtrace=True,
                diagnose=True,
            )
