"""Structured logging for pick-cn.

Library modules log through ``logging.getLogger(__name__)``; every such logger
is a child of the ``pick_cn`` logger that :class:`Logger` configures, so the
console/file handlers installed here apply package-wide.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .colors import Colors

ROOT_LOGGER_NAME = 'pick_cn'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors console output by level.

    Warnings and errors also get a short textual prefix so that they remain
    recognisable when colors are disabled (CI logs, redirected output).
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: '',
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.FAIL,
        logging.CRITICAL: Colors.FAIL + Colors.BOLD,
    }

    LEVEL_PREFIXES = {
        logging.WARNING: 'warning:',
        logging.ERROR: 'error:',
        logging.CRITICAL: 'critical:',
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, use_prefixes: bool = True):
        """
        Initialize the formatter.

        Args:
            fmt: Format string for log messages
            use_colors: Whether to use ANSI colors
            use_prefixes: Whether to prefix warnings/errors with their level
        """
        super().__init__(fmt)
        self.use_colors = use_colors
        self.use_prefixes = use_prefixes

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if self.use_prefixes:
            prefix = self.LEVEL_PREFIXES.get(record.levelno)
            if prefix:
                message = f"{prefix} {message}"

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, '')
            if color:
                message = f"{color}{message}{Colors.ENDC}"

        return message


class Logger:
    """
    Process-wide logger wrapper.

    Owns the handlers of the ``pick_cn`` logger:
    - console output (stderr) with optional colors
    - optional log file with timestamps
    - verbose / quiet levels
    """

    _instance: Optional['Logger'] = None
    _initialized: bool = False

    def __new__(cls) -> 'Logger':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if Logger._initialized:
            return

        self._logger = logging.getLogger(ROOT_LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.handlers = []

        self._console_handler = self._create_console_handler()
        self._logger.addHandler(self._console_handler)

        self._file_handler: Optional[logging.FileHandler] = None

        Logger._initialized = True

    def _create_console_handler(
        self,
        level: int = logging.INFO,
        use_colors: bool = True
    ) -> logging.StreamHandler:
        """
        Create the console handler.

        Progress bars (tqdm) write to stderr as well, so log lines share
        the same stream and do not interleave with stdout data.
        """
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(ColoredFormatter(fmt='%(message)s', use_colors=use_colors))
        return handler

    def _create_file_handler(
        self,
        file_path: Path,
        level: int = logging.DEBUG
    ) -> logging.FileHandler:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(file_path, encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        return handler

    def configure(
        self,
        verbose: bool = False,
        quiet: bool = False,
        log_file: Optional[Path] = None,
        use_colors: bool = True
    ) -> None:
        """
        Configure the logger settings.

        Args:
            verbose: Enable verbose (DEBUG) console output
            quiet: Enable quiet mode (WARNING+ only)
            log_file: Optional file path for logging
            use_colors: Whether to use colors in console
        """
        if quiet:
            console_level = logging.WARNING
        elif verbose:
            console_level = logging.DEBUG
        else:
            console_level = logging.INFO

        self._logger.removeHandler(self._console_handler)
        self._console_handler = self._create_console_handler(
            level=console_level,
            use_colors=use_colors
        )
        self._logger.addHandler(self._console_handler)

        if log_file:
            if self._file_handler:
                self._logger.removeHandler(self._file_handler)
                self._file_handler.close()
            self._file_handler = self._create_file_handler(Path(log_file))
            self._logger.addHandler(self._file_handler)

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """
        Get a stdlib logger below the package logger.

        Args:
            name: Dotted suffix, e.g. ``'extractors.tree'``

        Returns:
            Logger instance
        """
        if name:
            return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
        return self._logger


_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Return the global :class:`Logger`, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True
) -> None:
    """Configure the global logger (see :meth:`Logger.configure`)."""
    get_logger().configure(
        verbose=verbose,
        quiet=quiet,
        log_file=log_file,
        use_colors=use_colors
    )


def reset_logger() -> None:
    """Reset the global logger (mainly for testing)."""
    global _logger
    if _logger is not None:
        for handler in _logger._logger.handlers[:]:
            handler.close()
            _logger._logger.removeHandler(handler)
    _logger = None
    Logger._instance = None
    Logger._initialized = False
