"""
Logging configuration shared by the MCP server and the HTTP API.
"""

import logging
import sys

from dex_mcp.config.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings, level: str | None = None) -> None:
    """
    Configure root logging with console and optional file output.

    Console output goes to stderr because stdout carries the MCP stdio
    transport.

    Args:
        settings: Application settings (log level and log file).
        level: Optional level overriding settings.log_level.
    """
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    handlers: list[logging.Handler] = [console_handler]

    if settings.log_file:
        settings.ensure_directories()
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Suppress overly verbose third-party loggers
    logging.getLogger("aiohttp").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.INFO)
    logging.getLogger("httpcore").setLevel(logging.INFO)
    logging.getLogger("mcp").setLevel(logging.INFO)

    # Route uvicorn loggers through the root handlers
    for name in ("uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True
