# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This module contains helper functions related to logging.

The library modules only emit debug messages and never add handlers, so nothing is printed unless
the user of the library configures the logger, e.g., with 'getLogger(MAIN_LOGGER_NAME).configure()'.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import logging
from typing import IO, cast
import colorama

# Log levels.
#   * INFO: No prefixes, just the message.
#   * DEBUG, WARNING, ERROR, CRITICAL: Also have the prefix.
INFO = logging.INFO
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL

# Name of the main logger instance. Other project loggers are supposed to be children of this one.
MAIN_LOGGER_NAME = "main"

# The default prefix for debug messages.
_DEFAULT_DBG_PREFIX = "[%(created)f] [%(asctime)s] [%(module)s,%(lineno)d]"

class _MyFormatter(logging.Formatter):
    """
    A custom formatter for logging messages. Provides different message formats for different log
    levels.
    """

    def __init__(self,
                 prefix: str | None = None,
                 prefix_debug: str | None = None,
                 colors: dict[int, str] | None = None):
        """
        Initialize the custom logging formatter.

        Args:
            prefix: Prefix for non-info and non-debug messages. Info messages go without any
                    formatting. By default, the prefix is just the log level name.
            prefix_debug: Prefix for debug messages. The default value is '_DEFAULT_DBG_PREFIX'.
            colors: A dictionary containing colorama color codes to use for 'prefix' and
                    'prefix_debug'.
        """

        logging.Formatter.__init__(self, "%(levelname)s: %(message)s", "%H:%M:%S")

        self._prefix = ""
        self._prefix_debug = ""
        self._myfmt: dict[int, str] = {}

        if not colors:
            colors = {}
        self._colors = colors

        self.set_prefix(prefix=prefix, prefix_debug=prefix_debug)

    def set_prefix(self, prefix: str | None = None, prefix_debug: str | None = None):
        """
        Set the prefix for messages.

        Args:
            prefix: Prefix for non-info and non-debug messages.
            prefix_debug: Prefix for debug messages. The default value is '_DEFAULT_DBG_PREFIX'.
        """

        def _start(level):
            """Return the "start color output" code for the given log level."""
            return str(self._colors.get(level, ""))

        def _end(level):
            """Return the "end color output" code for the given log level."""

            if level in self._colors:
                return str(colorama.Style.RESET_ALL)
            return ""

        if not prefix:
            prefix = ""
        if prefix:
            prefix += ": "

        self._prefix = prefix

        for lvl, pfx in ((WARNING, "warning"), (ERROR, "error"), (CRITICAL, "critical error")):
            if not prefix:
                pfx = pfx.title()
            self._myfmt[lvl] = _start(lvl) + prefix + pfx + _end(lvl) + ": %(message)s"

        lvl = DEBUG
        if prefix_debug is None:
            prefix_debug = _DEFAULT_DBG_PREFIX
        if prefix_debug:
            prefix_debug += ": "

        self._prefix_debug = prefix_debug

        self._myfmt[lvl] = prefix_debug + "%(message)s"
        self._myfmt[lvl] = self._myfmt[lvl].replace("[", "[" + _start(lvl))
        self._myfmt[lvl] = self._myfmt[lvl].replace("]", _end(lvl) + "]")

        # Leave the info messages without any formatting.
        self._myfmt[INFO] = "%(message)s"

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record. Prefix debugging messages with a timestamp and keep info messages
        unchanged.

        Args:
            record: The log record to format.

        Returns:
            str: The formatted log record.
        """

        # pylint: disable=protected-access
        self._style._fmt = self._myfmt.get(record.levelno, "%(levelname)s: %(message)s")
        return logging.Formatter.format(self, record)

class _MyFilter(logging.Filter):
    """A custom filter which allows only certain log levels to go through."""

    def __init__(self, let_go):
        """
        Initialize the logging filter.

        Args:
            let_go: A list of logging levels to let go through the filter.
        """

        logging.Filter.__init__(self)
        self._let_go = let_go

    def filter(self, record):
        """Filter out all log levels except the ones specified by the user."""

        return record.levelno in self._let_go

class Logger(logging.Logger):
    """
    A custom logger class that provides the following functionality on top of the standard logger:
      * Message coloring.
      * Different prefixes for different log levels.
      * Debug messages with timestamps and file line numbers.
    """

    def __init__(self, name: str | None = None):
        """
        Initialize the logger.

        Args:
            name: The name of the logger (same as in 'logging.Logger()').
        """

        self.prefix = ""
        self.colored = True

        self._colors: dict[int, str] = {}

        if not name:
            name = "default"

        super().__init__(name)

    def _init_colors(self):
        """Initialize the per-level colorama color codes."""

        self._colors[DEBUG] = colorama.Fore.GREEN
        self._colors[WARNING] = colorama.Fore.YELLOW + colorama.Style.BRIGHT
        self._colors[ERROR] = self._colors[CRITICAL] = colorama.Fore.RED + colorama.Style.BRIGHT

    def configure(self,
                  prefix: str | None = None,
                  level: int = INFO,
                  colored: bool | None = None,
                  info_stream: IO[str] = sys.stdout,
                  error_stream: IO[str] = sys.stderr) -> Logger:
        """
        Configure the logger for printing messages to the console.

        Args:
            prefix: The prefix for log messages, used for all levels except 'INFO'.
            level: The log level.
            colored: Whether to use colored output. By default, colored output is used if both
                     streams are TTYs.
            info_stream: The stream for 'INFO' level messages. Default is 'sys.stdout'.
            error_stream: The stream for messages of all levels except 'INFO'. Default is
                          'sys.stderr'.

        Returns:
            Logger: The configured logger instance.
        """

        if not prefix:
            prefix = ""

        self.prefix = prefix
        self.setLevel(level)

        if colored is None:
            colored = info_stream.isatty() and error_stream.isatty()

        self.colored = colored
        self._colors = {}
        if colored:
            self._init_colors()

        # Remove existing handlers.
        self.handlers = []

        formatter = _MyFormatter(prefix=self.prefix, colors=self._colors)

        stream_handler = logging.StreamHandler(info_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([INFO]))
        self.addHandler(stream_handler)

        stream_handler = logging.StreamHandler(error_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([DEBUG, WARNING, ERROR, CRITICAL]))
        self.addHandler(stream_handler)

        return self

logging.setLoggerClass(Logger)

def getLogger(name: str | None = None) -> Logger:
    """
    Get a logger by name (similar to 'logging.getLogger()').

    Args:
        name: The name of the logger.

    Returns:
        Logger: The logger instance.
    """

    # Note, because of 'setLoggerClass()', this will return a 'Logger' instance (except for the root
    # logger case).
    return cast(Logger, logging.getLogger(name=name))
