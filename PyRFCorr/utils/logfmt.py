"""Colored logging formatter for terminal output.

Key components:
- set_rootlogger(): Configures the root logger on stderr
- ColorfulFormatter: Formatter coloring the level name by severity
"""
import logging
from typing import Dict, Optional, TextIO

LOGGING_FORMAT: str = "[%(asctime)s | %(levelname)s] %(name)10s : %(message)s"


def set_rootlogger(colorize: bool, log_level: int, stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure root logger with color support.

    Args:
        colorize: Whether to emit ANSI color codes
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)
        stream: Output stream (Default: stderr)

    Returns:
        Configured root logger instance
    """
    rl = logging.getLogger('')

    h = logging.StreamHandler(stream)
    h.setFormatter(ColorfulFormatter(fmt=LOGGING_FORMAT, colorize=colorize))

    rl.addHandler(h)
    rl.setLevel(log_level)

    return rl


class ColorfulFormatter(logging.Formatter):
    """ANSI color formatter for log messages.

    Level names are padded to a fixed width and, when colorized, painted
    by severity: INFO cyan, WARNING yellow, ERROR red, CRITICAL magenta.
    Messages of ERROR and above are also printed in bold.
    """
    DEFAULT_COLOR: int = 39
    LOGLEVEL2COLOR: Dict[int, int] = {
        logging.INFO: 36,
        logging.WARNING: 33,
        logging.ERROR: 31,
        logging.CRITICAL: 35
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, colorize: bool = True) -> None:
        super(ColorfulFormatter, self).__init__(fmt=fmt, datefmt=datefmt)
        self.colorize = colorize

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        record.levelname = "{:>8}".format(levelname)
        if self.colorize:
            color = self.LOGLEVEL2COLOR.get(record.levelno, self.DEFAULT_COLOR)
            weight = 1 if record.levelno >= logging.ERROR else 0
            record.levelname = "\033[{}m{}\033[0m".format(color, record.levelname)
            original_msg, original_args = record.msg, record.args
            record.msg = "\033[{}m{}\033[0m".format(weight, record.getMessage())
            record.args = None
            try:
                return super(ColorfulFormatter, self).format(record)
            finally:
                record.levelname = levelname
                record.msg, record.args = original_msg, original_args
        try:
            return super(ColorfulFormatter, self).format(record)
        finally:
            record.levelname = levelname
