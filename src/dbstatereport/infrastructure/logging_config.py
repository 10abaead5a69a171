"""
Logging configuration module.

Console logging goes to stderr so report output on stdout can be piped.
Quiet runs show only warnings (unreachable instances) in a short form;
verbose runs show per-instance progress with timestamps and logger names.
A log file, when requested, always receives the full DEBUG trace.
"""

import logging
import sys
from pathlib import Path


PACKAGE_LOGGER = "dbstatereport"

QUIET_FORMAT = "%(levelname)s %(message)s"
VERBOSE_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
FILE_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s"


# ANSI color codes for Windows 10+ and Unix terminals
class Colors:
    RESET = "\033[0m"
    DIM = "\033[2m"
    CYAN = "\033[36m"
    YELLOW = "\033[33m"
    BRIGHT_RED = "\033[91m"


class ColoredFormatter(logging.Formatter):
    """
    Console formatter: colored level names and short logger names.

    "dbstatereport.application.state_reporter" is shown as
    "application.state_reporter". Library loggers keep their full name.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.CYAN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.BRIGHT_RED,
        logging.CRITICAL: Colors.BRIGHT_RED,
    }

    def __init__(self, fmt: str, datefmt: str | None = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    @staticmethod
    def short_name(name: str) -> str:
        prefix = PACKAGE_LOGGER + "."
        return name[len(prefix):] if name.startswith(prefix) else name

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname
        original_name = record.name

        record.name = self.short_name(record.name)
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{Colors.RESET}"
            record.name = f"{Colors.DIM}{record.name}{Colors.RESET}"

        try:
            return super().format(record)
        finally:
            # Other handlers (file) see the untouched record
            record.levelname = original_levelname
            record.name = original_name


def _enable_windows_ansi():
    if sys.platform == "win32":
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(
                kernel32.GetStdHandle(-12),  # STD_ERROR_HANDLE
                7  # ENABLE_PROCESSED_OUTPUT | ENABLE_WRAP_AT_EOL_OUTPUT | ENABLE_VIRTUAL_TERMINAL_PROCESSING
            )
        except (AttributeError, OSError):
            pass  # Older Windows: no colors


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """
    Configure application-wide logging.

    Args:
        verbose: Show DEBUG progress on the console instead of warnings only
        log_file: Optional path to log file (always written at DEBUG)
    """
    use_colors = sys.stderr.isatty()
    if use_colors:
        _enable_windows_ansi()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(
        fmt=VERBOSE_FORMAT if verbose else QUIET_FORMAT,
        datefmt='%H:%M:%S',
        use_colors=use_colors,
    ))
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)

    handlers = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG,  # Capture all levels, handlers filter
        handlers=handlers,
        force=True
    )

    # Reduce noise from libraries
    logging.getLogger('pyodbc').setLevel(logging.WARNING)
    logging.getLogger('openpyxl').setLevel(logging.WARNING)

    if log_file:
        logging.getLogger(__name__).debug("Log file: %s", log_file)
