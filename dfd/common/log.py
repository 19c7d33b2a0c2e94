# -*- coding: utf-8 -*-

"""Configuration of the logs.

The library itself only attaches a ``NullHandler`` to the 'dfd' logger.
Applications and test harnesses who want to see what happens in the
dispatch threads can use ``Context``: log entries are then written in a file
and displayed to the console.

On console output, if the system supports it, logs entries will be colorized.
"""

import logging
import logging.handlers
import os.path
import sys

from . import path as dfd_path


def _support_color_output():
    """Try to guess if the standard output supports color term code.

    Returns:
        boolean: True if we are sure the output supports color; False otherwise
    """
    if hasattr(sys.stdout, 'isatty') and sys.stdout.isatty():
        if not sys.platform.startswith('win'):
            return True
    return False


def _get_file_handler(filename):
    """Open a new file for using as a log output.

    The file is rotated each day at midnight, and only the 7 last files are
    kept.

    Args:
        filename (str): name of the log file. Ex: 'dfd.log'
    Returns:
        FileHandler: a valid handler using the log file, or None if the
            file creation has failed.
    """
    try:
        log_path = os.path.join(dfd_path.get_log_dir(), filename)
        return logging.handlers.TimedRotatingFileHandler(
            log_path, when='midnight', backupCount=7)
    except (OSError, IOError):
        logging.getLogger(__name__).warning('Unable to create the log file',
                                            exc_info=True)
        return None


class ColoredFormatter(logging.Formatter):
    """Formatter who display colored messages using ANSI escape codes."""

    _colors = {
        'RESET': '\033[0m',
        'DEBUG': '\033[34m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[31m',
        'NAME': '\033[36m',
        'DATE': '\033[30;1m',
    }

    def _colorize(self, msg, color):
        return self._colors.get(color, '') + msg + self._colors.get('RESET')

    def formatTime(self, record, datefmt=None):
        result = logging.Formatter.formatTime(self, record, datefmt)
        return self._colorize(result, 'DATE')

    def format(self, record):
        # The record is shared by all the handlers.
        name, levelname = record.name, record.levelname
        record.name = self._colorize(name, 'NAME')
        record.levelname = self._colorize(levelname, levelname)
        try:
            return logging.Formatter.format(self, record)
        finally:
            record.name, record.levelname = name, levelname


class Context(object):
    """Context class used to open and close log handlers."""

    date_format = '%Y-%m-%d %H:%M:%S'
    string_format = '%(asctime)s %(levelname)-7s %(name)s - %(message)s'

    def __init__(self, filename='dfd.log'):
        """Prepare a new log context.

        Args:
            filename (str, optional): name of the log file. If None, logs are
                only displayed on the console.
        """
        self._filename = filename
        self._handlers = []

    def __enter__(self):
        """Open the log file and prepare the logging module."""
        logging.captureWarnings(True)
        root_logger = logging.getLogger()

        formatter = logging.Formatter(fmt=self.string_format,
                                      datefmt=self.date_format)

        stdout_handler = logging.StreamHandler()
        if _support_color_output():
            stdout_handler.setFormatter(ColoredFormatter(
                fmt=self.string_format, datefmt=self.date_format))
        else:
            stdout_handler.setFormatter(formatter)
        self._handlers.append(stdout_handler)

        if self._filename:
            file_handler = _get_file_handler(self._filename)
            if file_handler:
                file_handler.setFormatter(formatter)
                self._handlers.append(file_handler)

        for handler in self._handlers:
            root_logger.addHandler(handler)

        set_debug_mode(True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Release resources (log files, ...)"""
        logging.getLogger(__name__).debug('Stop logger ...')
        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        logging.captureWarnings(False)


def set_logs_level(levels):
    """Configure a fine-grained log levels for the different modules.

    Args:
        levels (dict): associates a module name and a log level. A log level
            can be a number or a str representing one of the logging levels
            (DEBUG, WARNING, ...). The level name will be converted to
            uppercase.
            Invalids values will be ignored.

    Example:

        >>> # Accept DEBUG logs only for the dispatch module
        >>> set_logs_level({'dfd': 'info', 'dfd.dispatch': 'debug'})
    """
    for (module, level) in levels.items():
        try:
            if isinstance(level, str):
                level = level.upper()
                if level.isdigit():
                    level = int(level)
            logging.getLogger(module).setLevel(level)
        except (TypeError, ValueError):
            logger = logging.getLogger(__name__)
            logger.warning('Invalid log level "%s" for logger "%s". '
                           'Will be ignored.',
                           level, module)


def set_debug_mode(debug, root=True):
    """Set, or unset the debug log level.

    Args:
        debug (boolean): if True, the 'dfd' log level will be set to DEBUG.
            If False, it will be set to INFO.
        root (boolean, optional): if True, the root logger level is also
            set: INFO in debug mode, WARNING otherwise.
    """
    if debug:
        logging.getLogger('dfd').setLevel(logging.DEBUG)
    else:
        logging.getLogger('dfd').setLevel(logging.INFO)

    if root:
        logging.getLogger().setLevel(logging.INFO if debug else
                                     logging.WARNING)


def reset():
    """Reset the root logger (remove handlers and filters)."""
    logger = logging.getLogger()

    for h in logger.handlers[:]:
        logger.removeHandler(h)
    for f in logger.filters[:]:
        logger.removeFilter(f)
